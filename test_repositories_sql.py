# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for the SQLAlchemy repositories against an in-memory SQLite engine.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from selection_service.core.database import build_engine
from selection_service.models.domain import (
    CompletedProcess,
    MembershipRecord,
    ProcessTurn,
    SelectionEntry,
    StableRecord,
    UserProfile,
    WorkItem,
)
from selection_service.repositories.directory_repository import SqlDirectoryRepository
from selection_service.repositories.history_repository import SqlHistoryRepository
from selection_service.repositories.schema import create_schema
from selection_service.repositories.selection_repository import SqlSelectionRepository
from selection_service.repositories.work_item_repository import SqlWorkItemRepository
from selection_service.services.collation import get_collator
from selection_service.services.history_service import HistoryService
from selection_service.services.member_resolver import MemberResolver
from selection_service.services.turn_order_service import TurnOrderService

T0 = datetime(2026, 4, 1, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    create_schema(eng)
    yield eng
    eng.dispose()


# ============================================
# Directory
# ============================================
class TestSqlDirectoryRepository:
    def test_stable_and_user_round_trip(self, engine):
        repo = SqlDirectoryRepository(engine)
        repo.save_stable(StableRecord(id="s1", organization_id="o1", owner_id="u0", memory_horizon_days=30))
        repo.save_user(UserProfile(user_id="u0", first_name="Karin", email="k@test.com"))

        stable = repo.get_stable("s1")
        assert stable.organization_id == "o1"
        assert stable.memory_horizon_days == 30
        assert repo.get_user("u0").first_name == "Karin"
        assert repo.get_stable("missing") is None
        assert repo.get_user("missing") is None

    def test_save_stable_replaces(self, engine):
        repo = SqlDirectoryRepository(engine)
        repo.save_stable(StableRecord(id="s1", organization_id="o1"))
        repo.save_stable(StableRecord(id="s1", organization_id="o1", memory_horizon_days=14))
        assert repo.get_stable("s1").memory_horizon_days == 14

    def test_membership_round_trip(self, engine):
        repo = SqlDirectoryRepository(engine)
        repo.save_membership(MembershipRecord(
            user_id="u1", organization_id="o1", first_name="Åsa",
            stable_access="specific", assigned_stable_ids=["s1", "s2"],
        ))
        repo.save_membership(MembershipRecord(user_id="u2", organization_id="o2"))

        membership = repo.get_membership("u1", "o1")
        assert membership.first_name == "Åsa"
        assert membership.assigned_stable_ids == ["s1", "s2"]
        assert membership.status == "active"
        assert repo.get_membership("u1", "o2") is None
        assert [m.user_id for m in repo.list_memberships("o1")] == ["u1"]
        assert repo.count() == 2


# ============================================
# Work items
# ============================================
class TestSqlWorkItemRepository:
    def test_unassigned_range_is_inclusive_by_day(self, engine):
        repo = SqlWorkItemRepository(engine)
        repo.save(WorkItem(id="in-1", stable_id="s1", scheduled_date=T0, points_value=2))
        repo.save(WorkItem(id="in-2", stable_id="s1", scheduled_date=T0 + timedelta(days=2, hours=23), points_value=3))
        repo.save(WorkItem(id="out", stable_id="s1", scheduled_date=T0 + timedelta(days=3), points_value=5))
        repo.save(WorkItem(
            id="taken", stable_id="s1", scheduled_date=T0, points_value=7, assignment_type="assigned",
        ))

        items = repo.list_unassigned_in_range("s1", date(2026, 4, 1), date(2026, 4, 3))
        assert sorted(i.id for i in items) == ["in-1", "in-2"]
        assert all(i.scheduled_date.tzinfo is not None for i in items)

    def test_completed_since_includes_cutoff_instant(self, engine):
        repo = SqlWorkItemRepository(engine)
        cutoff = T0 - timedelta(days=90)
        repo.save(WorkItem(
            id="at-cutoff", stable_id="s1", scheduled_date=cutoff, points_value=4,
            status="completed", completed_by="u1", completed_at=cutoff,
        ))
        repo.save(WorkItem(
            id="just-before", stable_id="s1", scheduled_date=cutoff, points_value=4,
            status="completed", completed_by="u2", completed_at=cutoff - timedelta(microseconds=1),
        ))
        assert [i.id for i in repo.list_completed_since("s1", cutoff)] == ["at-cutoff"]

    def test_points_balance_horizon_boundary_over_sql(self, engine):
        directory = SqlDirectoryRepository(engine)
        directory.save_stable(StableRecord(id="s1", organization_id="o1", memory_horizon_days=30))
        work_items = SqlWorkItemRepository(engine)
        cutoff = T0 - timedelta(days=30)
        work_items.save(WorkItem(
            id="at-cutoff", stable_id="s1", scheduled_date=cutoff, points_value=5,
            status="completed", completed_by="u1", completed_at=cutoff,
        ))
        work_items.save(WorkItem(
            id="just-before", stable_id="s1", scheduled_date=cutoff, points_value=9,
            status="completed", completed_by="u2", completed_at=cutoff - timedelta(microseconds=1),
        ))
        service = TurnOrderService(
            resolver=MemberResolver(directory),
            directory=directory,
            work_items=work_items,
            history=HistoryService(SqlHistoryRepository(engine), SqlSelectionRepository(engine)),
            collator=get_collator("sv"),
        )
        result = service.compute_turn_order("s1", "o1", "points_balance", ["u1", "u2"], now=T0)
        assert result.metadata["member_points_map"] == {"u1": 5, "u2": 0}

    def test_completed_since_cutoff(self, engine):
        repo = SqlWorkItemRepository(engine)
        repo.save(WorkItem(
            id="recent", stable_id="s1", scheduled_date=T0, points_value=4, points_awarded=2,
            assignment_type="assigned", status="completed", completed_by="u1", completed_at=T0,
        ))
        repo.save(WorkItem(
            id="old", stable_id="s1", scheduled_date=T0, points_value=4,
            status="completed", completed_by="u1", completed_at=T0 - timedelta(days=40),
        ))
        repo.save(WorkItem(id="open", stable_id="s1", scheduled_date=T0, points_value=4))

        items = repo.list_completed_since("s1", T0 - timedelta(days=30))
        assert [i.id for i in items] == ["recent"]
        assert items[0].points_awarded == 2
        assert items[0].completed_at == T0
        assert repo.count() == 3


# ============================================
# Selections & history
# ============================================
class TestSqlSelectionAndHistory:
    def test_selections_ordered_by_time(self, engine):
        repo = SqlSelectionRepository(engine)
        repo.record(SelectionEntry(id="e2", process_id="p1", selected_by="u2", points_value=1,
                                   selected_at=T0 + timedelta(minutes=5)))
        repo.record(SelectionEntry(id="e1", process_id="p1", selected_by="u1", points_value=3,
                                   selected_at=T0))
        repo.record(SelectionEntry(id="e3", process_id="p2", selected_by="u1", selected_at=T0))
        assert [e.id for e in repo.list_for_process("p1")] == ["e1", "e2"]
        assert repo.count() == 3

    def test_history_same_completion_time_later_append_wins(self, engine):
        repo = SqlHistoryRepository(engine)
        for process_id in ("p-first", "p-second", "p-third"):
            repo.append({
                "process_id": process_id,
                "process_name": process_id,
                "organization_id": "o1",
                "stable_id": "s1",
                "algorithm": "fair_rotation",
                "final_turn_order": [],
                "completed_at": T0,
            })
        assert repo.get_last_completed("s1").process_id == "p-third"

    def test_history_round_trip_and_latest(self, engine):
        repo = SqlHistoryRepository(engine)
        service = HistoryService(repo, SqlSelectionRepository(engine))
        SqlSelectionRepository(engine).record(SelectionEntry(
            id="e1", process_id="p-new", selected_by="u1", points_value=6, selected_at=T0,
        ))

        def completed(process_id):
            return CompletedProcess(
                id=process_id, name=f"Val {process_id}", organization_id="o1", stable_id="s1",
                turns=[
                    ProcessTurn(user_id="u1", user_name="Anna", order=1),
                    ProcessTurn(user_id="u2", user_name="Bertil", order=2),
                ],
            )

        service.save_completed_history(completed("p-new"), completed_at=T0 + timedelta(days=10))
        service.save_completed_history(completed("p-old"), completed_at=T0)

        latest = repo.get_last_completed("s1")
        assert latest.process_id == "p-new"
        assert latest.algorithm == "manual"
        assert latest.completed_at == T0 + timedelta(days=10)
        assert latest.ordered_user_ids() == ["u1", "u2"]
        assert latest.final_turn_order[0].total_points_picked == 6
        assert repo.get_last_completed("s2") is None
        assert repo.count() == 2


# ============================================
# End to end on SQL storage
# ============================================
class TestSqlTurnOrder:
    def test_fair_rotation_over_sql_storage(self, engine):
        directory = SqlDirectoryRepository(engine)
        directory.save_stable(StableRecord(id="s1", organization_id="o1"))
        for user_id, name in (("u-a", "Anna"), ("u-b", "Bertil"), ("u-c", "Cecilia")):
            directory.save_membership(MembershipRecord(user_id=user_id, organization_id="o1", first_name=name))

        history = HistoryService(SqlHistoryRepository(engine), SqlSelectionRepository(engine))
        service = TurnOrderService(
            resolver=MemberResolver(directory),
            directory=directory,
            work_items=SqlWorkItemRepository(engine),
            history=history,
            collator=get_collator("sv"),
        )

        first = service.compute_turn_order("s1", "o1", "fair_rotation", ["u-c", "u-a", "u-b"])
        assert [m.user_id for m in first.turns] == ["u-a", "u-b", "u-c"]

        history.save_completed_history(CompletedProcess(
            id="p1", name="April", organization_id="o1", stable_id="s1", algorithm="fair_rotation",
            turns=[
                ProcessTurn(user_id=m.user_id, user_name=m.user_name, order=i + 1)
                for i, m in enumerate(first.turns)
            ],
        ), completed_at=T0)

        second = service.compute_turn_order("s1", "o1", "fair_rotation", ["u-c", "u-a", "u-b"])
        assert [m.user_id for m in second.turns] == ["u-b", "u-c", "u-a"]
        assert second.metadata["previous_process_id"] == "p1"
