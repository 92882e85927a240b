"""Unit tests for the phone/OTP login flow"""

import pytest
from unittest.mock import AsyncMock
from mysanvi.controllers.login import LoginController, LoginStep
from mysanvi.domain.exceptions import HttpError, NetworkError
from mysanvi.domain.models import AuthResult, Credential, OtpDispatch, SagerProfile
from mysanvi.domain.session import SessionStore


@pytest.fixture
def sager() -> AsyncMock:
    client = AsyncMock()
    client.send_otp.return_value = OtpDispatch(detail="sent", debug_otp="135790")
    client.verify_otp.return_value = AuthResult(
        credential=Credential("a1", "r1"),
        user=SagerProfile(id=1, shop_name="Demo Shop"),
    )
    return client


@pytest.fixture
def controller(sager: AsyncMock, session: SessionStore) -> LoginController:
    return LoginController(sager, session)


async def test_blank_phone_stays_without_network(controller: LoginController, sager: AsyncMock):
    await controller.submit_phone("   ")

    assert controller.state.step is LoginStep.PHONE_INPUT
    assert controller.state.error_message == "Please enter your phone number"
    sager.send_otp.assert_not_awaited()


async def test_send_otp_moves_to_otp_sent(controller: LoginController, sager: AsyncMock):
    await controller.submit_phone(" 9876543210 ")

    sager.send_otp.assert_awaited_once_with("9876543210")
    assert controller.state.step is LoginStep.OTP_SENT
    assert controller.state.phone == "9876543210"
    assert controller.state.success_message == "sent (Debug OTP: 135790)"


async def test_send_otp_failure_stays_on_phone_input(controller: LoginController, sager: AsyncMock):
    sager.send_otp.side_effect = NetworkError("sager unreachable")

    await controller.submit_phone("9876543210")

    assert controller.state.step is LoginStep.PHONE_INPUT
    assert controller.state.error_message.startswith("Failed to send OTP")
    assert controller.state.is_loading is False


async def test_verify_persists_credential(controller: LoginController, sager: AsyncMock, session: SessionStore):
    await controller.submit_phone("9876543210")
    await controller.submit_code("135790")

    sager.verify_otp.assert_awaited_once_with("9876543210", "135790")
    assert controller.state.step is LoginStep.AUTHENTICATED
    assert session.get_auth_header() == "Bearer a1"
    status = controller.state.user_status
    assert status.phone == "9876543210"
    assert status.sager.exists is True
    assert status.sager.profile.shop_name == "Demo Shop"
    assert status.mandii.checked is False


async def test_wrong_code_persists_nothing(controller: LoginController, sager: AsyncMock, session: SessionStore):
    sager.verify_otp.side_effect = HttpError(400, "Invalid or expired OTP")
    await controller.submit_phone("9876543210")

    await controller.submit_code("000000")

    assert controller.state.step is LoginStep.OTP_SENT
    assert controller.state.error_message == "Verification failed: HTTP 400: Invalid or expired OTP"
    assert session.has_valid_session() is False


async def test_blank_code_rejected_locally(controller: LoginController, sager: AsyncMock):
    await controller.submit_phone("9876543210")
    await controller.submit_code("  ")

    assert controller.state.error_message == "Please enter the verification code"
    sager.verify_otp.assert_not_awaited()


async def test_resend_keeps_step(controller: LoginController, sager: AsyncMock):
    await controller.submit_phone("9876543210")
    await controller.resend()

    assert sager.send_otp.await_count == 2
    assert controller.state.step is LoginStep.OTP_SENT
    assert controller.state.success_message == "OTP resent: sent (Debug OTP: 135790)"


async def test_change_phone_returns_to_phone_input(controller: LoginController):
    await controller.submit_phone("9876543210")
    controller.change_phone()

    assert controller.state.step is LoginStep.PHONE_INPUT
    assert controller.state.code == ""
    assert controller.state.error_message is None


async def test_password_login_reaches_authenticated(controller: LoginController, sager: AsyncMock, session: SessionStore):
    sager.login.return_value = AuthResult(
        credential=Credential("a9", "r9"),
        user=SagerProfile(id=1, username="demo", phone="9876543210"),
    )

    await controller.login_with_password("demo", "s3cret")

    assert controller.state.step is LoginStep.AUTHENTICATED
    assert controller.state.user_status.phone == "9876543210"
    assert session.get_auth_header() == "Bearer a9"


async def test_listeners_notified_on_each_change(controller: LoginController):
    steps = []
    unsubscribe = controller.subscribe(lambda state: steps.append(state.step))

    await controller.submit_phone("9876543210")
    unsubscribe()
    await controller.submit_code("135790")

    assert steps == [LoginStep.PHONE_INPUT, LoginStep.OTP_SENT]


async def test_late_verify_after_close_is_discarded(controller: LoginController, sager: AsyncMock, session: SessionStore):
    await controller.submit_phone("9876543210")

    async def verify_then_leave(phone, code):
        controller.close()
        return AuthResult(credential=Credential("a1", "r1"))

    sager.verify_otp.side_effect = verify_then_leave
    await controller.submit_code("135790")

    assert controller.state.step is LoginStep.OTP_SENT
    assert session.has_valid_session() is False
