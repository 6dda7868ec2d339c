# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Locale-aware name collation used for every alphabetical tie-break.

The comparator is passed explicitly into the ordering code so results never
depend on the host's locale settings. Keys compare in three levels, like a
UCA collator: base letters first, then accents, then case.

Swedish ("sv") tailoring: å, ä, ö are separate letters sorted after z;
æ and ę sort as ä, ø, ő, œ and ô as ö, ü and ű as y (each with an accent
difference). The "root" collator treats å/ä/ö as accented a/a/o.
Latin letters without a decomposition sort with the letters they stand
for in both collators: ł as l, đ as d, ß as ss, þ as th.
"""

import unicodedata
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")

_LETTER = 2
_DIGIT = 1
_OTHER = 0
_FOREIGN = 3

# letter -> (primary letters, secondary weight)
# Latin letters NFD cannot split into base + mark; shared by every locale
LATIN_EXPANSIONS: dict[str, tuple[str, int]] = {
    "ł": ("l", 1),
    "đ": ("d", 1),
    "ð": ("d", 2),
    "ħ": ("h", 1),
    "ı": ("i", 1),
    "ŋ": ("n", 1),
    "ß": ("ss", 1),
    "þ": ("th", 1),
    "æ": ("ae", 1),
    "œ": ("oe", 1),
    "ø": ("o", 1),
}

# "{", "|", "}" follow "z" in code point order
SWEDISH_TAILORING: dict[str, tuple[str, int]] = {
    "å": ("{", 0),
    "ä": ("|", 0),
    "æ": ("|", 1),
    "ę": ("|", 2),
    "ö": ("}", 0),
    "ø": ("}", 1),
    "ő": ("}", 2),
    "œ": ("}", 3),
    "ô": ("}", 4),
    "ü": ("y", 1),
    "ű": ("y", 2),
}

Element = tuple[tuple[int, int], tuple[int, ...], int]


class Collator:
    """Three-level sort key builder for display names."""

    def __init__(self, locale: str, tailoring: dict[str, tuple[str, int]] | None = None) -> None:
        self.locale = locale
        self._tailoring = tailoring or {}

    def _elements(self, char: str) -> list[Element]:
        lower = char.lower()
        case = 1 if char != lower else 0

        tailored = self._tailoring.get(lower) or LATIN_EXPANSIONS.get(lower)
        if tailored is not None:
            letters, accent = tailored
            return [((_LETTER, ord(letter)), (accent,), case) for letter in letters]

        decomposed = unicodedata.normalize("NFD", lower)
        base, marks = decomposed[0], decomposed[1:]
        secondary = tuple(ord(m) for m in marks)
        if "a" <= base <= "z":
            return [((_LETTER, ord(base)), secondary, case)]
        if base.isdigit():
            return [((_DIGIT, int(base) if base.isdecimal() else ord(base)), secondary, case)]
        if base.isalpha():
            return [((_FOREIGN, ord(base)), secondary, case)]
        return [((_OTHER, ord(base)), secondary, case)]

    def key(self, text: str) -> tuple:
        primary, secondary, tertiary = [], [], []
        for char in unicodedata.normalize("NFC", text or ""):
            for p, s, t in self._elements(char):
                primary.append(p)
                secondary.append(s)
                tertiary.append(t)
        return tuple(primary), tuple(secondary), tuple(tertiary), text or ""

    def compare(self, a: str, b: str) -> int:
        ka, kb = self.key(a), self.key(b)
        return (ka > kb) - (ka < kb)

    def sorted(self, items: Iterable[T], name: Callable[[T], str]) -> list[T]:
        """Return *items* sorted alphabetically by ``name(item)``."""
        return sorted(items, key=lambda item: self.key(name(item)))


def get_collator(locale: str = "sv") -> Collator:
    """Return the collator for *locale* ("sv" or "root")."""
    normalized = (locale or "root").lower().replace("_", "-").split("-")[0]
    if normalized == "sv":
        return Collator("sv", SWEDISH_TAILORING)
    if normalized == "root":
        return Collator("root")
    raise ValueError(f"Unsupported collation locale '{locale}'")
