# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Turn-order orchestration.
Resolves members once, reads whatever the chosen strategy needs from the
repositories, dispatches, and checks the result is a permutation of the
requested members.
"""

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Optional, Union

from selection_service.core.logging import get_logger
from selection_service.core.timeutil import parse_day, utc_now
from selection_service.metrics.prometheus import (
    TURN_ORDER_DURATION,
    TURN_ORDER_INVARIANT_VIOLATIONS,
    TURN_ORDERS_COMPUTED,
    UNKNOWN_ALGORITHM_FALLBACKS,
)
from selection_service.models.domain import (
    FAIR_ROTATION,
    MANUAL,
    POINTS_BALANCE,
    QUOTA_BASED,
    SELECTION_ALGORITHMS,
    Member,
    ProcessTurn,
    TurnOrderResult,
)
from selection_service.repositories.directory_repository import DirectoryRepository
from selection_service.repositories.work_item_repository import WorkItemRepository
from selection_service.services import algorithms
from selection_service.services.collation import Collator
from selection_service.services.history_service import HistoryService
from selection_service.services.member_resolver import MemberResolver

logger = get_logger(__name__)

DateLike = Union[str, date, datetime]


def unique_ids(member_ids: list[str]) -> list[str]:
    """Drop repeated IDs, keeping the first occurrence."""
    return list(dict.fromkeys(member_ids))


def create_turns_from_member_order(members: list[Member]) -> list[ProcessTurn]:
    """Draft turns for a new selection process: 1-based, nothing picked yet."""
    return [
        ProcessTurn(
            user_id=m.user_id,
            user_name=m.user_name,
            user_email=m.user_email,
            order=index + 1,
            status="pending",
            selections_count=0,
        )
        for index, m in enumerate(members)
    ]


class TurnOrderService:
    """Business logic for computing selection turn orders."""

    def __init__(
        self,
        resolver: MemberResolver,
        directory: DirectoryRepository,
        work_items: WorkItemRepository,
        history: HistoryService,
        collator: Collator,
        default_memory_horizon_days: int = 90,
        strict_algorithms: bool = False,
    ) -> None:
        self._resolver = resolver
        self._directory = directory
        self._work_items = work_items
        self._history = history
        self._collator = collator
        self._default_horizon = default_memory_horizon_days
        self._strict = strict_algorithms

    def compute_turn_order(
        self,
        stable_id: str,
        organization_id: str,
        algorithm: Optional[str],
        member_ids: list[str],
        selection_start_date: Optional[DateLike] = None,
        selection_end_date: Optional[DateLike] = None,
        now: Optional[datetime] = None,
    ) -> TurnOrderResult:
        """
        Compute the turn order for a selection process.
        Missing algorithm means manual order. Unrecognized algorithms fall
        back to manual order, or raise ValueError in strict mode.
        Storage errors propagate unchanged.
        """
        chosen = self._normalize_algorithm(algorithm, stable_id)
        requested_ids = unique_ids(member_ids)

        with TURN_ORDER_DURATION.labels(algorithm=chosen).time():
            members = self._resolver.resolve_members(stable_id, organization_id, requested_ids)

            if chosen == QUOTA_BASED:
                result = self._quota_based(stable_id, members, selection_start_date, selection_end_date)
            elif chosen == POINTS_BALANCE:
                result = self._points_balance(stable_id, members, now)
            elif chosen == FAIR_ROTATION:
                result = algorithms.fair_rotation_order(
                    members, self._history.get_last_completed_history(stable_id), self._collator,
                )
            else:
                result = algorithms.manual_order(members)

        self._check_permutation(result, requested_ids, stable_id)
        TURN_ORDERS_COMPUTED.labels(algorithm=result.algorithm).inc()
        logger.info(
            "Turn order computed: stable=%s, algorithm=%s, members=%d",
            stable_id, result.algorithm, len(result.turns),
        )
        return result

    # ── Strategy inputs ──

    def _quota_based(
        self,
        stable_id: str,
        members: list[Member],
        start: Optional[DateLike],
        end: Optional[DateLike],
    ) -> TurnOrderResult:
        if start is None or end is None:
            raise ValueError("quota_based requires selection_start_date and selection_end_date")
        start_day, end_day = parse_day(start), parse_day(end)
        if end_day < start_day:
            raise ValueError("selection_end_date must not be before selection_start_date")

        items = self._work_items.list_unassigned_in_range(stable_id, start_day, end_day)
        history = self._history.get_last_completed_history(stable_id)
        return algorithms.quota_based_order(members, items, history, self._collator)

    def _points_balance(
        self,
        stable_id: str,
        members: list[Member],
        now: Optional[datetime],
    ) -> TurnOrderResult:
        stable = self._directory.get_stable(stable_id)
        horizon_days = self._default_horizon
        if stable is not None and stable.memory_horizon_days is not None:
            horizon_days = stable.memory_horizon_days

        cutoff = (now or utc_now()) - timedelta(days=horizon_days)
        items = self._work_items.list_completed_since(stable_id, cutoff)
        return algorithms.points_balance_order(members, items, self._collator)

    # ── Internal ──

    def _normalize_algorithm(self, algorithm: Optional[str], stable_id: str) -> str:
        if not algorithm:
            return MANUAL
        if algorithm in SELECTION_ALGORITHMS:
            return algorithm
        if self._strict:
            raise ValueError(f"Unknown selection algorithm '{algorithm}'")
        UNKNOWN_ALGORITHM_FALLBACKS.inc()
        logger.warning(
            "Unknown selection algorithm '%s' for stable=%s, using manual order",
            algorithm, stable_id,
        )
        return MANUAL

    def _check_permutation(
        self,
        result: TurnOrderResult,
        requested_ids: list[str],
        stable_id: str,
    ) -> None:
        """Log (never raise) when turns are not exactly the requested members."""
        produced = Counter(m.user_id for m in result.turns)
        if produced == Counter(requested_ids):
            return
        TURN_ORDER_INVARIANT_VIOLATIONS.labels(algorithm=result.algorithm).inc()
        logger.error(
            "Turn order mismatch: stable=%s, algorithm=%s, requested=%d, produced=%d",
            stable_id, result.algorithm, len(requested_ids), len(result.turns),
        )
