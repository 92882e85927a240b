"""SaGer HTTP client: OTP auth, sales CRUD and analytics reads"""

import httpx
from typing import List, Optional
from mysanvi.config import settings
from mysanvi.domain.exceptions import AuthenticationRequired
from mysanvi.domain.models import (
    AuthResult,
    BackendPresence,
    Credential,
    DailySummary,
    DebtSummary,
    OtpDispatch,
    Prediction,
    SalesRecord,
    SalesRecordInput,
)
from mysanvi.infrastructure.clients.decoding import (
    decode_daily_summary,
    decode_debt,
    decode_prediction,
    decode_presence,
    decode_sale,
    decode_sager_profile,
    encode_sale,
    expect_dict,
    expect_list,
)
from mysanvi.infrastructure.clients.transport import BackendClient

DECODE_ERRORS = (KeyError, ValueError, TypeError, ArithmeticError)


def require_auth(auth_header: Optional[str]) -> str:
    """Fail fast, before any network call, when no session header is available"""
    if not auth_header:
        raise AuthenticationRequired("No authentication token found")
    return auth_header


class SagerClient(BackendClient):
    """Client for the SaGer sales-management backend"""

    backend = "sager"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url or settings.sager_api_base, timeout, transport)

    # Auth

    async def send_otp(self, phone: str) -> OtpDispatch:
        """
        Ask SaGer to send an OTP to `phone`.

        Debug deployments echo the code back in `otp`.

        Raises:
            NetworkError, HttpError, DecodeError
        """
        data = await self._request("POST", "api/auth/otp/send/", json={"phone": phone})
        try:
            data = expect_dict(data)
            return OtpDispatch(detail=str(data.get("detail") or ""), debug_otp=data.get("otp"))
        except DECODE_ERRORS as e:
            raise self._decode_failed("OTP", e) from e

    async def verify_otp(self, phone: str, code: str) -> AuthResult:
        """Exchange phone + OTP for a credential; the caller persists it"""
        data = await self._request("POST", "api/auth/otp/verify/", json={"phone": phone, "code": code})
        return self._decode_auth(data)

    async def login(self, username: str, password: str) -> AuthResult:
        """Username/password alternative to OTP verification"""
        data = await self._request("POST", "api/auth/token/", json={"username": username, "password": password})
        return self._decode_auth(data)

    async def refresh_access_token(self, refresh_token: str) -> str:
        data = await self._request("POST", "api/auth/token/refresh/", json={"refresh": refresh_token})
        try:
            access = expect_dict(data)["access"]
            if not isinstance(access, str) or not access:
                raise ValueError("empty access token")
            return access
        except DECODE_ERRORS as e:
            raise self._decode_failed("token refresh", e) from e

    def _decode_auth(self, data) -> AuthResult:
        try:
            data = expect_dict(data)
            access, refresh = data["access"], data["refresh"]
            if not isinstance(access, str) or not isinstance(refresh, str) or not access or not refresh:
                raise ValueError("access and refresh tokens must be non-empty strings")
            user = data.get("user")
            return AuthResult(
                credential=Credential(access_token=access, refresh_token=refresh),
                user=decode_sager_profile(user) if user else None,
                detail=data.get("detail"),
            )
        except DECODE_ERRORS as e:
            raise self._decode_failed("auth", e) from e

    # Sales

    async def list_sales(self, auth_header: Optional[str]) -> List[SalesRecord]:
        auth = require_auth(auth_header)
        data = await self._request("GET", "api/sales/", auth_header=auth)
        try:
            return [decode_sale(item) for item in expect_list(data)]
        except DECODE_ERRORS as e:
            raise self._decode_failed("sales", e) from e

    async def create_sale(self, auth_header: Optional[str], record: SalesRecordInput) -> SalesRecord:
        auth = require_auth(auth_header)
        data = await self._request("POST", "api/sales/", json=encode_sale(record), auth_header=auth)
        try:
            return decode_sale(data)
        except DECODE_ERRORS as e:
            raise self._decode_failed("sale", e) from e

    async def update_sale(self, sale_id: int, auth_header: Optional[str], record: SalesRecordInput) -> SalesRecord:
        auth = require_auth(auth_header)
        data = await self._request("PUT", f"api/sales/{sale_id}/", json=encode_sale(record), auth_header=auth)
        try:
            return decode_sale(data)
        except DECODE_ERRORS as e:
            raise self._decode_failed("sale", e) from e

    async def delete_sale(self, sale_id: int, auth_header: Optional[str]) -> None:
        auth = require_auth(auth_header)
        await self._request("DELETE", f"api/sales/{sale_id}/", auth_header=auth)

    # Analytics

    async def list_debts(
        self,
        auth_header: Optional[str],
        days: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[DebtSummary]:
        """Unpaid balances per customer; omitted filters are not sent"""
        auth = require_auth(auth_header)
        params = {key: value for key, value in (("days", days), ("limit", limit)) if value is not None}
        data = await self._request("GET", "api/debts/", params=params or None, auth_header=auth)
        try:
            return [decode_debt(item) for item in expect_list(data)]
        except DECODE_ERRORS as e:
            raise self._decode_failed("debt", e) from e

    async def list_predictions(self, auth_header: Optional[str]) -> List[Prediction]:
        auth = require_auth(auth_header)
        data = await self._request("GET", "api/predictions/", auth_header=auth)
        try:
            return [decode_prediction(item) for item in expect_list(data)]
        except DECODE_ERRORS as e:
            raise self._decode_failed("prediction", e) from e

    async def get_daily_summary(
        self,
        auth_header: Optional[str],
        days: int = 14,
        top: int = 10,
    ) -> DailySummary:
        auth = require_auth(auth_header)
        data = await self._request("GET", "api/daily-summary/", params={"days": days, "top": top}, auth_header=auth)
        try:
            return decode_daily_summary(data)
        except DECODE_ERRORS as e:
            raise self._decode_failed("daily summary", e) from e

    # Presence

    async def check_user_status(self, phone: str) -> BackendPresence:
        """Existence probe on SaGer itself"""
        data = await self._request("POST", "api/check-user-status/", json={"phone": phone})
        try:
            return decode_presence(data, "sager", decode_sager_profile)
        except DECODE_ERRORS as e:
            raise self._decode_failed("user status", e) from e
