# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Process-wide repository and service instances handed to FastAPI via Depends.
SQL repositories when DATABASE_URL is set, in-memory stores otherwise.
"""

from selection_service.core.config import settings
from selection_service.core.database import engine
from selection_service.repositories.directory_repository import (
    DirectoryRepository,
    SqlDirectoryRepository,
)
from selection_service.repositories.history_repository import (
    HistoryRepository,
    SqlHistoryRepository,
)
from selection_service.repositories.selection_repository import (
    SelectionRepository,
    SqlSelectionRepository,
)
from selection_service.repositories.work_item_repository import (
    SqlWorkItemRepository,
    WorkItemRepository,
)
from selection_service.services.collation import get_collator
from selection_service.services.history_service import HistoryService
from selection_service.services.member_resolver import MemberResolver
from selection_service.services.notification_client import NotificationClient
from selection_service.services.turn_order_service import TurnOrderService

# ── Repository instances ──
if engine is not None:
    _directory_repo = SqlDirectoryRepository(engine)
    _work_item_repo = SqlWorkItemRepository(engine)
    _selection_repo = SqlSelectionRepository(engine)
    _history_repo = SqlHistoryRepository(engine)
else:
    _directory_repo = DirectoryRepository()
    _work_item_repo = WorkItemRepository()
    _selection_repo = SelectionRepository()
    _history_repo = HistoryRepository()

_notification_client = NotificationClient()
_collator = get_collator(settings.COLLATION_LOCALE)

# ── Service instances (with injected dependencies) ──
_member_resolver = MemberResolver(_directory_repo)
_history_service = HistoryService(
    history_repo=_history_repo,
    selection_repo=_selection_repo,
    notification_client=_notification_client,
    notify_on_completion=settings.NOTIFY_ON_COMPLETION,
)
_turn_order_service = TurnOrderService(
    resolver=_member_resolver,
    directory=_directory_repo,
    work_items=_work_item_repo,
    history=_history_service,
    collator=_collator,
    default_memory_horizon_days=settings.DEFAULT_MEMORY_HORIZON_DAYS,
    strict_algorithms=settings.STRICT_ALGORITHMS,
)


# ── FastAPI dependency functions ──
def get_turn_order_service() -> TurnOrderService:
    return _turn_order_service


def get_history_service() -> HistoryService:
    return _history_service


def get_member_resolver() -> MemberResolver:
    return _member_resolver


def get_directory_repo():
    return _directory_repo


def get_work_item_repo():
    return _work_item_repo


def get_selection_repo():
    return _selection_repo


def get_history_repo():
    return _history_repo
