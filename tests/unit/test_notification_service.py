"""
Tests for OTP email dispatchers.
"""
from unittest.mock import MagicMock

import pytest
from sendgrid.helpers.mail import Mail

from auth_workflow.core.config import settings
from auth_workflow.services.notification_service import (
    OTP_SUBJECT,
    ConsoleOTPDispatcher,
    EmailDeliveryError,
    SendGridOTPDispatcher,
    build_otp_email,
    create_notification_dispatcher
)


@pytest.mark.unit
def test_build_otp_email():
    message = build_otp_email("ada@example.com", "Ada", "042917", expire_minutes=10)

    assert message.to == "ada@example.com"
    assert message.subject == OTP_SUBJECT
    assert message.text == "Hello Ada,\n\nYour OTP is: 042917"
    assert "042917" in message.html
    assert "10 minutes" in message.html


@pytest.mark.unit
def test_build_otp_email_escapes_name():
    message = build_otp_email("x@example.com", "<script>", "111111", expire_minutes=10)

    assert "<script>" not in message.html


@pytest.mark.unit
class TestSendGridOTPDispatcher:

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.send.return_value = MagicMock(status_code=202)
        return client

    @pytest.fixture
    def dispatcher(self, client):
        return SendGridOTPDispatcher(
            api_key="SG.test",
            from_email="Admin@BCT.com",
            expire_minutes=10,
            client=client
        )

    @pytest.mark.asyncio
    async def test_dispatch_returns_recipient(self, dispatcher, client):
        recipient = await dispatcher.dispatch("ada@example.com", "Ada", "123456")

        assert recipient == "ada@example.com"
        client.send.assert_called_once()
        assert isinstance(client.send.call_args[0][0], Mail)

    @pytest.mark.asyncio
    async def test_provider_rejection_raises(self, dispatcher, client):
        client.send.return_value = MagicMock(status_code=400)

        with pytest.raises(EmailDeliveryError):
            await dispatcher.dispatch("ada@example.com", "Ada", "123456")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, dispatcher, client):
        client.send.side_effect = ConnectionError("unreachable")

        with pytest.raises(EmailDeliveryError) as exc_info:
            await dispatcher.dispatch("ada@example.com", "Ada", "123456")

        assert "unreachable" in str(exc_info.value)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_console_dispatcher_returns_recipient():
    dispatcher = ConsoleOTPDispatcher(expire_minutes=10)

    assert await dispatcher.dispatch("ada@example.com", "Ada", "123456") == "ada@example.com"


@pytest.mark.unit
def test_dispatcher_selection():
    assert isinstance(create_notification_dispatcher(settings), ConsoleOTPDispatcher)

    sendgrid_settings = settings.model_copy(
        update={"EMAIL_BACKEND": "sendgrid", "SENDGRID_API_KEY": "SG.test"}
    )
    assert isinstance(create_notification_dispatcher(sendgrid_settings), SendGridOTPDispatcher)
