"""Integration tests for the SaGer client against the mock backend"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import patch
from mock_backends.sager import SagerState
from mysanvi.domain.exceptions import AuthenticationRequired, HttpError
from mysanvi.domain.models import SalesRecordInput
from mysanvi.domain.session import SessionStore
from mysanvi.infrastructure.clients.sager import SagerClient


async def test_send_and_verify_otp(sager_client: SagerClient):
    dispatch = await sager_client.send_otp("9876543210")
    assert dispatch.detail == "OTP sent"
    assert dispatch.debug_otp == "135790"

    auth = await sager_client.verify_otp("9876543210", "135790")

    assert auth.credential.access_token
    assert auth.credential.refresh_token
    assert auth.user.shop_name == "Demo Shop"


async def test_send_otp_without_debug_echo(sager_client: SagerClient, sager_state: SagerState):
    sager_state.echo_otp = False
    dispatch = await sager_client.send_otp("9876543210")
    assert dispatch.debug_otp is None


async def test_wrong_otp_raises_http_error(sager_client: SagerClient):
    await sager_client.send_otp("9876543210")

    with pytest.raises(HttpError) as exc_info:
        await sager_client.verify_otp("9876543210", "000000")

    assert exc_info.value.status == 400
    assert exc_info.value.message == "Invalid or expired OTP"


async def test_password_login_and_refresh(sager_client: SagerClient):
    auth = await sager_client.login("demo", "s3cret")
    assert auth.user.phone == "9876543210"

    access = await sager_client.refresh_access_token(auth.credential.refresh_token)
    assert access and access != auth.credential.access_token


async def test_bad_password_raises_401(sager_client: SagerClient):
    with pytest.raises(HttpError) as exc_info:
        await sager_client.login("demo", "wrong")
    assert exc_info.value.status == 401


@pytest.mark.parametrize("auth_header", [None, ""])
async def test_sales_calls_require_auth_before_network(sager_client: SagerClient, auth_header):
    with patch.object(SagerClient, "_request") as request:
        with pytest.raises(AuthenticationRequired):
            await sager_client.list_sales(auth_header)
        with pytest.raises(AuthenticationRequired):
            await sager_client.list_debts(auth_header, days=7)
        with pytest.raises(AuthenticationRequired):
            await sager_client.get_daily_summary(auth_header)
        with pytest.raises(AuthenticationRequired):
            await sager_client.delete_sale(1, auth_header)
        request.assert_not_called()


async def test_stale_token_raises_401(sager_client: SagerClient):
    with pytest.raises(HttpError) as exc_info:
        await sager_client.list_sales("Bearer expired")
    assert exc_info.value.status == 401


async def test_sales_crud(sager_client: SagerClient, authed_session: SessionStore):
    auth = authed_session.get_auth_header()
    record = SalesRecordInput(
        customer_id="C010",
        date=date(2026, 10, 19),
        product="Tea",
        amount=Decimal("45.50"),
    )

    created = await sager_client.create_sale(auth, record)
    assert created.id is not None
    assert created.amount == Decimal("45.5")

    record.paid = True
    record.payment_mode = "cash"
    updated = await sager_client.update_sale(created.id, auth, record)
    assert updated.paid is True
    assert updated.payment_mode == "cash"

    listed = await sager_client.list_sales(auth)
    assert [s.id for s in listed] == [created.id]

    await sager_client.delete_sale(created.id, auth)
    assert await sager_client.list_sales(auth) == []


async def test_update_missing_sale_is_404(sager_client: SagerClient, authed_session: SessionStore):
    record = SalesRecordInput(customer_id="C1", date=date(2026, 10, 19), product="Tea", amount=Decimal("1"))
    with pytest.raises(HttpError) as exc_info:
        await sager_client.update_sale(999, authed_session.get_auth_header(), record)
    assert exc_info.value.status == 404


async def test_debts_filters(sager_client: SagerClient, authed_session: SessionStore, sample_sales):
    auth = authed_session.get_auth_header()

    all_debts = await sager_client.list_debts(auth)
    assert {d.customer_id for d in all_debts} == {"C001", "C002", "C003"}
    c002 = next(d for d in all_debts if d.customer_id == "C002")
    assert c002.unpaid_count == 2
    assert c002.total_unpaid_amount == Decimal("390.0")

    recent = await sager_client.list_debts(auth, days=7)
    assert next(d for d in recent if d.customer_id == "C002").unpaid_count == 1

    top = await sager_client.list_debts(auth, limit=1)
    assert len(top) == 1


async def test_daily_summary_defaults(sager_client: SagerClient, authed_session: SessionStore, sample_sales):
    summary = await sager_client.get_daily_summary(authed_session.get_auth_header())

    assert summary.meta["days"] == 14
    assert summary.meta["top"] == 10
    assert len(summary.totals) == 14
    assert summary.latest_total().total_count == 2
    assert summary.products[0].product == "Rice"


async def test_read_aggregates_are_idempotent(sager_client: SagerClient, authed_session: SessionStore, sample_sales):
    auth = authed_session.get_auth_header()

    assert await sager_client.list_debts(auth, days=30, limit=5) == await sager_client.list_debts(auth, days=30, limit=5)
    assert await sager_client.list_predictions(auth) == await sager_client.list_predictions(auth)
    assert await sager_client.get_daily_summary(auth, days=7, top=3) == await sager_client.get_daily_summary(auth, days=7, top=3)


async def test_check_user_status_on_sager(sager_client: SagerClient):
    known = await sager_client.check_user_status("9876543210")
    unknown = await sager_client.check_user_status("0000000000")

    assert known.exists is True
    assert known.profile.shop_name == "Demo Shop"
    assert unknown.exists is False
    assert unknown.profile is None
