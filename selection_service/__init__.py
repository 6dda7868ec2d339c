"""Fair turn-order selection service for stable routine rotation."""

__version__ = "1.0.0"
