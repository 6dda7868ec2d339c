# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for rotation history archiving and completion notifications.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import httpx
import pytest

from selection_service.models.domain import CompletedProcess, ProcessTurn, SelectionEntry
from selection_service.repositories.history_repository import HistoryRepository
from selection_service.repositories.selection_repository import SelectionRepository
from selection_service.services.history_service import HistoryService
from selection_service.services.notification_client import NotificationClient

T0 = datetime(2026, 2, 1, 9, 0, tzinfo=timezone.utc)


def process(process_id="proc-1", stable_id="stable-1", algorithm="fair_rotation", emails=True):
    users = [("u1", "Anna"), ("u2", "Bertil"), ("u3", "Cecilia")]
    return CompletedProcess(
        id=process_id,
        name="Mars rutinval",
        organization_id="org-1",
        stable_id=stable_id,
        algorithm=algorithm,
        turns=[
            ProcessTurn(
                user_id=uid, user_name=name, order=i + 1, selections_count=i,
                user_email=f"{uid}@test.com" if emails and uid != "u2" else "",
            )
            for i, (uid, name) in enumerate(users)
        ],
    )


def entry(entry_id, user_id, points, minutes, process_id="proc-1"):
    return SelectionEntry(
        id=entry_id,
        process_id=process_id,
        selected_by=user_id,
        points_value=points,
        selected_at=T0 + timedelta(minutes=minutes),
    )


@pytest.fixture
def repos():
    return HistoryRepository(), SelectionRepository()


@pytest.fixture
def service(repos):
    history_repo, selection_repo = repos
    return HistoryService(history_repo, selection_repo)


# ============================================
# Saving history
# ============================================
class TestSaveCompletedHistory:
    def test_points_picked_summed_per_member(self, repos, service):
        _, selections = repos
        selections.record(entry("e1", "u1", 10, 1))
        selections.record(entry("e2", "u1", 20, 5))
        selections.record(entry("e3", "u3", 4, 3))
        selections.record(entry("e4", "u2", 99, 2, process_id="other-proc"))

        service.save_completed_history(process(), completed_at=T0)
        record = service.get_last_completed_history("stable-1")

        points = {t.user_id: t.total_points_picked for t in record.final_turn_order}
        assert points == {"u1": 30, "u2": 0, "u3": 4}

    def test_turns_copied_with_order_and_counts(self, service):
        service.save_completed_history(process(), completed_at=T0)
        record = service.get_last_completed_history("stable-1")
        assert [(t.user_id, t.user_name, t.order, t.selections_count) for t in record.final_turn_order] == [
            ("u1", "Anna", 1, 0), ("u2", "Bertil", 2, 1), ("u3", "Cecilia", 3, 2),
        ]
        assert record.process_name == "Mars rutinval"
        assert record.organization_id == "org-1"
        assert record.completed_at == T0

    def test_returns_generated_record_id(self, service):
        record_id = service.save_completed_history(process(), completed_at=T0)
        assert record_id
        assert service.get_last_completed_history("stable-1").id == record_id

    def test_algorithm_defaults_to_manual(self, service):
        service.save_completed_history(process(algorithm=None), completed_at=T0)
        assert service.get_last_completed_history("stable-1").algorithm == "manual"

    def test_completed_at_defaults_to_now(self, service):
        service.save_completed_history(process())
        completed_at = service.get_last_completed_history("stable-1").completed_at
        assert completed_at.tzinfo is not None
        assert datetime.now(timezone.utc) - completed_at < timedelta(minutes=1)


# ============================================
# Reading history
# ============================================
class TestLastCompletedHistory:
    def test_none_before_first_rotation(self, service):
        assert service.get_last_completed_history("stable-1") is None

    def test_newest_by_completion_time(self, repos, service):
        history_repo, _ = repos
        service.save_completed_history(process("p-new"), completed_at=T0 + timedelta(days=30))
        service.save_completed_history(process("p-old"), completed_at=T0)
        assert service.get_last_completed_history("stable-1").process_id == "p-new"
        assert history_repo.count() == 2

    def test_same_completion_time_later_save_wins(self, service):
        service.save_completed_history(process("p-first"), completed_at=T0)
        service.save_completed_history(process("p-second"), completed_at=T0)
        assert service.get_last_completed_history("stable-1").process_id == "p-second"

    def test_stables_are_isolated(self, service):
        service.save_completed_history(process("p-1", stable_id="stable-1"), completed_at=T0)
        service.save_completed_history(
            process("p-2", stable_id="stable-2"), completed_at=T0 + timedelta(days=1),
        )
        assert service.get_last_completed_history("stable-1").process_id == "p-1"
        assert service.get_last_completed_history("stable-3") is None


# ============================================
# Notifications
# ============================================
class TestCompletionNotifications:
    def test_members_with_email_notified(self, repos):
        client = MagicMock(spec=NotificationClient)
        service = HistoryService(*repos, notification_client=client, notify_on_completion=True)
        service.save_completed_history(process(), completed_at=T0)

        recipients = [c.kwargs["recipient"] for c in client.send.call_args_list]
        assert recipients == ["u1@test.com", "u3@test.com"]
        assert all(c.kwargs["reference_id"] == "proc-1" for c in client.send.call_args_list)

    def test_disabled_by_flag(self, repos):
        client = MagicMock(spec=NotificationClient)
        service = HistoryService(*repos, notification_client=client, notify_on_completion=False)
        service.save_completed_history(process(), completed_at=T0)
        client.send.assert_not_called()


class TestNotificationClient:
    def test_posts_to_notification_service(self):
        with patch("selection_service.services.notification_client.httpx.Client") as mock_cls:
            http = mock_cls.return_value.__enter__.return_value
            http.post.return_value = MagicMock(status_code=200)
            NotificationClient(channel="email").send("a@test.com", "Done", reference_id="proc-1")

        url = http.post.call_args.args[0]
        body = http.post.call_args.kwargs["json"]
        assert url.endswith("/api/v1/notify")
        assert body["recipient"] == "a@test.com"
        assert body["channel"] == "email"
        assert body["entity_id"] == "proc-1"
        assert body["type"] == "selection_process_completed"

    def test_failures_are_swallowed(self):
        with patch("selection_service.services.notification_client.httpx.Client") as mock_cls:
            mock_cls.return_value.__enter__.return_value.post.side_effect = httpx.ConnectError("down")
            NotificationClient().send("a@test.com", "Done")
