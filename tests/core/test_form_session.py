# tests/core/test_form_session.py
"""
Тесты базовой сессии формы и формы регистрации водителя.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from ev_crm.common.constants import Messages
from ev_crm.common.exceptions import GatewayError
from ev_crm.core.forms import DriverRegistrationForm, FieldRule, FormSession
from ev_crm.shared.models import UploadedAsset


@pytest.fixture
def sender() -> AsyncMock:
    return AsyncMock(return_value={"message": "ok"})


@pytest.fixture
def form(sender: AsyncMock) -> FormSession:
    return FormSession(
        {
            "name": FieldRule(required=True),
            "phone": FieldRule(required=True, digits=11),
            "note": FieldRule(max_length=10),
            "kind": FieldRule(required=True, choices=("A", "B")),
        },
        sender,
        defaults={"kind": "A"},
        free_text_fields=("name", "note"),
        success_message="Saved",
        failure_message="Failed",
        name="test",
    )


def fill(form: FormSession) -> None:
    form.set_field("name", "  <b>Ali</b> & Sons ")
    form.set_field("phone", "03001234567")
    form.set_field("note", "short")


class TestFieldRule:

    @pytest.mark.parametrize(
        "rule, value, expected",
        [
            (FieldRule(required=True), "", ["required"]),
            (FieldRule(required=True), "   ", ["required"]),
            (FieldRule(), "", []),
            (FieldRule(pattern=r"\d{3}"), "12a", ["pattern"]),
            (FieldRule(max_length=3), "abcd", ["maxlength"]),
            (FieldRule(digits=11), "0300123456", ["digits"]),
            (FieldRule(digits=11), "0300123456x", ["digits"]),
            (FieldRule(choices=("A",)), "B", ["choice"]),
            (FieldRule(required=True, digits=11), "03001234567", []),
        ],
    )
    def test_check(self, rule: FieldRule, value: str, expected: list[str]) -> None:
        assert rule.check(value) == expected


class TestFormSessionFields:

    def test_initialize_seeds_defaults_untouched(self, form: FormSession) -> None:
        assert form.value("kind") == "A"
        assert form.value("name") == ""
        assert not any(state.touched for state in form.fields.values())
        assert form.errors == {"name": ["required"], "phone": ["required"]}

    def test_set_field_recomputes_validity(self, form: FormSession) -> None:
        form.set_field("phone", "123")
        assert form.fields["phone"].errors == ["digits"]

        form.set_field("phone", "03001234567")
        assert form.fields["phone"].valid

    def test_unknown_field(self, form: FormSession) -> None:
        with pytest.raises(KeyError):
            form.set_field("missing", "x")

    def test_validate_all_marks_touched_without_changing_values(self, form: FormSession) -> None:
        form.set_field("note", "this is far too long")

        assert form.validate_all() is False
        assert all(state.touched for state in form.fields.values())
        assert form.value("note") == "this is far too long"

    def test_initialize_with_new_defaults(self, form: FormSession) -> None:
        fill(form)
        form.initialize({"kind": "B", "name": "Omar"})

        assert form.value("kind") == "B"
        assert form.value("name") == "Omar"
        assert form.value("phone") == ""


class TestFormSessionSubmit:

    @pytest.mark.asyncio
    async def test_invalid_form_never_calls_backend(self, form: FormSession, sender: AsyncMock) -> None:
        form.set_field("name", "Ali")

        result = await form.submit()

        assert result.success is False
        assert result.message == Messages.FORM_INVALID
        assert result.errors == {"phone": ["required"]}
        assert all(state.touched for state in form.fields.values())
        sender.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_payload_escapes_free_text(self, form: FormSession, sender: AsyncMock) -> None:
        fill(form)

        await form.submit()

        sender.assert_awaited_once_with({
            "name": "&lt;b&gt;Ali&lt;/b&gt; &amp; Sons",
            "phone": "03001234567",
            "note": "short",
            "kind": "A",
        })

    @pytest.mark.asyncio
    async def test_success_resets_and_requests_refresh(self, form: FormSession) -> None:
        fill(form)

        result = await form.submit()

        assert result.success is True
        assert result.refresh is True
        assert result.message == "Saved"
        assert result.data == {"message": "ok"}
        assert form.value("name") == ""
        assert form.value("kind") == "A"

    @pytest.mark.asyncio
    async def test_backend_message_is_surfaced(self, form: FormSession, sender: AsyncMock) -> None:
        sender.side_effect = GatewayError("POST failed", status_code=400, backend_message="CNIC already exists")
        fill(form)

        result = await form.submit()

        assert result.success is False
        assert result.message == "CNIC already exists"
        assert result.refresh is False
        # значения не сбрасываются
        assert form.value("phone") == "03001234567"
        assert form.busy is False

    @pytest.mark.asyncio
    async def test_generic_failure_message(self, form: FormSession, sender: AsyncMock) -> None:
        sender.side_effect = GatewayError(Messages.NETWORK_ERROR)
        fill(form)

        result = await form.submit()

        assert result.message == "Failed"
        assert form.error_message == "Failed"

    @pytest.mark.asyncio
    async def test_busy_refuses_second_submit(self, form: FormSession, sender: AsyncMock) -> None:
        fill(form)
        form.busy = True

        result = await form.submit()

        assert result.message == Messages.BUSY
        sender.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_assets_are_merged_and_cleared(self, form: FormSession, sender: AsyncMock) -> None:
        fill(form)
        form.attach_asset(UploadedAsset(field="photo", data_url="data:image/png;base64,AAAA"))

        await form.submit()

        payload = sender.await_args.args[0]
        assert payload["photo"] == "data:image/png;base64,AAAA"
        assert form.assets == {}

    def test_asset_does_not_affect_validity(self, form: FormSession) -> None:
        form.attach_asset(UploadedAsset(field="photo", data_url="data:,"))
        assert form.is_valid is False

        form.detach_asset("photo")
        assert form.assets == {}


class TestDriverRegistrationForm:

    @pytest.mark.asyncio
    async def test_posts_driver(self, mock_gateway) -> None:
        form = DriverRegistrationForm(mock_gateway)
        form.set_field("name", "Ali Raza")
        form.set_field("contact_number", "03001234567")
        form.set_field("dob", "1990-04-01")
        form.set_field("current_address", "Model Town <Lahore>")
        form.set_field("cnic_number", "1234512345671")

        result = await form.submit()

        assert result.success is True
        assert result.message == Messages.DRIVER_REGISTERED
        payload = mock_gateway.post_driver.await_args.args[0]
        assert payload["current_address"] == "Model Town &lt;Lahore&gt;"
        assert payload["allocated_rikshaw"] == ""

    @pytest.mark.asyncio
    async def test_contact_must_have_eleven_digits(self, mock_gateway) -> None:
        form = DriverRegistrationForm(mock_gateway)
        form.set_field("contact_number", "0300-1234567")

        await form.submit()

        assert form.fields["contact_number"].errors == ["digits"]
        mock_gateway.post_driver.assert_not_awaited()
