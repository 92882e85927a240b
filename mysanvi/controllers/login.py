"""Phone/OTP login flow"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from mysanvi.controllers.base import Controller
from mysanvi.domain.exceptions import MySanviError
from mysanvi.domain.models import AuthResult, UserStatus
from mysanvi.domain.session import SessionStore
from mysanvi.domain.status import initial_user_status
from mysanvi.infrastructure.clients.sager import SagerClient


class LoginStep(str, enum.Enum):
    PHONE_INPUT = "phone_input"
    OTP_SENT = "otp_sent"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class LoginState:
    step: LoginStep = LoginStep.PHONE_INPUT
    phone: str = ""
    code: str = ""
    is_loading: bool = False
    error_message: Optional[str] = None
    success_message: Optional[str] = None
    user_status: Optional[UserStatus] = None


def _sent_message(detail: str, debug_otp: Optional[str], prefix: str = "") -> str:
    message = f"{prefix}{detail}"
    if debug_otp:
        message += f" (Debug OTP: {debug_otp})"
    return message


class LoginController(Controller[LoginState]):
    """PHONE_INPUT -> OTP_SENT -> AUTHENTICATED; only AUTHENTICATED is terminal"""

    def __init__(self, sager: SagerClient, session: SessionStore):
        super().__init__(LoginState())
        self.sager = sager
        self.session = session

    async def submit_phone(self, phone: str) -> None:
        if self.state.step is not LoginStep.PHONE_INPUT:
            return
        phone = phone.strip()
        if not phone:
            self._update(error_message="Please enter your phone number", success_message=None)
            return

        self._update(phone=phone, is_loading=True, error_message=None, success_message=None)
        try:
            dispatch = await self.sager.send_otp(phone)
        except MySanviError as e:
            logging.warning(f"OTP send failed: {e}", extra={"step": "send_otp"})
            self._update(is_loading=False, error_message=f"Failed to send OTP: {e}")
            return
        self._update(
            step=LoginStep.OTP_SENT,
            is_loading=False,
            success_message=_sent_message(dispatch.detail, dispatch.debug_otp),
        )

    async def resend(self) -> None:
        if self.state.step is not LoginStep.OTP_SENT:
            return
        self._update(is_loading=True, error_message=None, success_message=None)
        try:
            dispatch = await self.sager.send_otp(self.state.phone)
        except MySanviError as e:
            self._update(is_loading=False, error_message=f"Failed to resend OTP: {e}")
            return
        self._update(
            is_loading=False,
            success_message=_sent_message(dispatch.detail, dispatch.debug_otp, prefix="OTP resent: "),
        )

    async def submit_code(self, code: str) -> None:
        if self.state.step is not LoginStep.OTP_SENT:
            return
        code = code.strip()
        if not code:
            self._update(error_message="Please enter the verification code", success_message=None)
            return

        self._update(code=code, is_loading=True, error_message=None, success_message=None)
        try:
            auth = await self.sager.verify_otp(self.state.phone, code)
        except MySanviError as e:
            logging.warning(f"OTP verification failed: {e}", extra={"step": "verify_otp"})
            self._update(is_loading=False, error_message=f"Verification failed: {e}")
            return
        self._authenticated(self.state.phone, auth)

    async def login_with_password(self, username: str, password: str) -> None:
        """Alternate auth path; lands in the same AUTHENTICATED state"""
        if self.state.step is LoginStep.AUTHENTICATED:
            return
        if not username.strip() or not password:
            self._update(error_message="Please enter username and password", success_message=None)
            return

        self._update(is_loading=True, error_message=None, success_message=None)
        try:
            auth = await self.sager.login(username.strip(), password)
        except MySanviError as e:
            logging.warning(f"Password login failed: {e}", extra={"step": "login"})
            self._update(is_loading=False, error_message=f"Login failed: {e}")
            return
        phone = (auth.user.phone if auth.user else None) or self.state.phone or username.strip()
        self._authenticated(phone, auth)

    def change_phone(self) -> None:
        if self.state.step is not LoginStep.OTP_SENT:
            return
        self._update(step=LoginStep.PHONE_INPUT, code="", error_message=None, success_message=None)

    def _authenticated(self, phone: str, auth: AuthResult) -> None:
        if self.closed:
            # Late response after the screen was left
            return
        self.session.save_credential(auth.credential)
        self._update(
            step=LoginStep.AUTHENTICATED,
            phone=phone,
            is_loading=False,
            user_status=initial_user_status(phone, auth),
            success_message=auth.detail,
        )
        logging.info("Login completed", extra={"step": "login_complete"})
