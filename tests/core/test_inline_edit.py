# tests/core/test_inline_edit.py
"""
Тесты редактирования строки жалобы.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from ev_crm.common.constants import Messages
from ev_crm.common.exceptions import GatewayError
from ev_crm.core.forms import InlineEditSession
from ev_crm.core.forms.inline_edit import INVALID_STATUS_MESSAGE, MISSING_ID_MESSAGE
from ev_crm.shared.models import ComplaintRecord


@pytest.fixture
def committer() -> AsyncMock:
    return AsyncMock(return_value={"message": "updated"})


@pytest.fixture
def editor(committer: AsyncMock) -> InlineEditSession:
    return InlineEditSession(committer)


@pytest.fixture
def row() -> dict:
    return {
        "complaint_id": 101,
        "driver_cnic": "12345-1234567-1",
        "status": "In-Progress",
        "description": "Front brake squeaks",
    }


class TestActiveRow:

    def test_single_active_row(self, editor: InlineEditSession) -> None:
        editor.begin(2)
        editor.begin(3)

        assert editor.is_active(3)
        assert not editor.is_active(2)

    def test_cancel_requests_reload(self, editor: InlineEditSession) -> None:
        editor.begin(1)

        result = editor.cancel()

        assert result.reload is True
        assert editor.is_editing is False


class TestCommit:

    @pytest.mark.asyncio
    async def test_normalizes_cnic_and_sends_full_row(self, editor, committer, row) -> None:
        editor.begin(0)

        result = await editor.commit(row)

        committer.assert_awaited_once_with(101, {
            "complaint_id": 101,
            "driver_cnic": "1234512345671",
            "status": "In-Progress",
            "description": "Front brake squeaks",
        })
        assert result.success is True
        assert result.reload is True
        assert result.message == Messages.COMPLAINT_UPDATED
        assert editor.is_editing is False

    @pytest.mark.asyncio
    async def test_long_cnic_truncated(self, editor, committer, row) -> None:
        row["driver_cnic"] = "3520212345671999"

        await editor.commit(row)

        assert committer.await_args.args[1]["driver_cnic"] == "3520212345671"

    @pytest.mark.asyncio
    async def test_accepts_typed_record(self, editor, committer, sample_complaints) -> None:
        await editor.commit(sample_complaints[2])

        complaint_id, payload = committer.await_args.args
        assert complaint_id == 103
        # неизвестные поля backend уходят обратно
        assert payload["depot"] == "North"

    @pytest.mark.asyncio
    async def test_partial_record_sends_only_received_columns(self, editor, committer) -> None:
        record = ComplaintRecord.model_validate(
            {"complaint_id": 7, "driver_cnic": "1234512345671", "status": "Pending", "extra_col": "x"}
        )

        await editor.commit(record)

        _, payload = committer.await_args.args
        assert set(payload) == {"complaint_id", "driver_cnic", "status", "extra_col"}
        assert "driver_image" not in payload

    @pytest.mark.asyncio
    async def test_short_cnic_refused_locally(self, editor, committer, row) -> None:
        editor.begin(0)
        row["driver_cnic"] = "35202-12"

        result = await editor.commit(row)

        assert result.success is False
        assert result.message == Messages.CNIC_INVALID
        assert editor.is_active(0)
        committer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_status_refused(self, editor, committer, row) -> None:
        row["status"] = "Closed"

        result = await editor.commit(row)

        assert result.message == INVALID_STATUS_MESSAGE
        committer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unchanged_backend_status_is_kept(self, editor, committer, row) -> None:
        row["status"] = "Open"
        editor.begin(0, row)
        row["driver_cnic"] = "12345-1234567-9"

        result = await editor.commit(row)

        assert result.success is True
        _, payload = committer.await_args.args
        assert payload["status"] == "Open"
        assert payload["driver_cnic"] == "1234512345679"

    @pytest.mark.asyncio
    async def test_switch_to_other_unknown_status_refused(self, editor, committer, row) -> None:
        row["status"] = "Open"
        editor.begin(0, row)
        row["status"] = "Closed"

        result = await editor.commit(row)

        assert result.message == INVALID_STATUS_MESSAGE
        assert editor.is_active(0)
        committer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_id_refused(self, editor, committer, row) -> None:
        del row["complaint_id"]

        result = await editor.commit(row)

        assert result.message == MISSING_ID_MESSAGE
        committer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_backend_failure_keeps_row_active(self, editor, committer, row) -> None:
        committer.side_effect = GatewayError("PUT failed", status_code=422, backend_message="Invalid status")
        editor.begin(4)

        result = await editor.commit(row)

        assert result.success is False
        assert result.reload is False
        assert result.message == "Invalid status"
        assert editor.is_active(4)
        assert editor.busy is False

    @pytest.mark.asyncio
    async def test_busy_refuses(self, editor, committer, row) -> None:
        editor.busy = True

        result = await editor.commit(row)

        assert result.message == Messages.BUSY
        committer.assert_not_awaited()
