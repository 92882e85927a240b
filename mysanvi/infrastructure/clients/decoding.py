"""Explicit decoders from backend JSON to domain dataclasses"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from mysanvi.domain.models import (
    BackendPresence,
    DailySummary,
    DailyTotal,
    DebtSummary,
    MandiiProfile,
    Prediction,
    ProductSummary,
    SagerProfile,
    SalesRecord,
    SalesRecordInput,
)

_MISSING = object()


def pick(data: Dict[str, Any], *keys: str, default: Any = _MISSING) -> Any:
    """First present key among snake_case/camelCase aliases"""
    for key in keys:
        if key in data:
            return data[key]
    if default is _MISSING:
        raise KeyError(keys[0])
    return default


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise TypeError(f"expected a number, got {value!r}")
    # str() first so 0.1 decodes as Decimal("0.1")
    return Decimal(str(value))


def to_date(value: Any) -> date:
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO date string, got {value!r}")
    return date.fromisoformat(value)


def to_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{name} must be a boolean, got {value!r}")
    return value


def to_datetime(value: Any) -> datetime:
    return datetime.fromisoformat(str(value))


def expect_dict(value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"expected an object, got {type(value).__name__}")
    return value


def expect_list(value: Any) -> list:
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    return value


def decode_sager_profile(data: Dict[str, Any]) -> SagerProfile:
    data = expect_dict(data)
    return SagerProfile(
        id=pick(data, "id", default=None),
        username=pick(data, "username", default=None),
        phone=pick(data, "phone", default=None),
        name=pick(data, "name", default=None),
        shop_name=pick(data, "shop_name", "shopName", default=None),
        is_phone_verified=to_bool(pick(data, "is_phone_verified", "isPhoneVerified", default=False), "is_phone_verified"),
    )


def decode_mandii_profile(data: Dict[str, Any]) -> MandiiProfile:
    data = expect_dict(data)
    shop_id = pick(data, "shop_id", "shopId", default=None)
    return MandiiProfile(
        id=pick(data, "id", default=None),
        name=pick(data, "name", default=None),
        is_shop=to_bool(pick(data, "is_shop", "isShop", default=shop_id is not None), "is_shop"),
        otp_verified=to_bool(pick(data, "otp_verified", "otpVerified", default=False), "otp_verified"),
        shop_id=int(shop_id) if shop_id is not None else None,
    )


def decode_presence(
    data: Dict[str, Any],
    backend_key: str,
    profile_decoder: Callable[[Dict[str, Any]], Any],
) -> BackendPresence:
    """
    Decode a check-user-status body.

    Accepts the flat shape `{exists, profile?}` and the combined shape
    `{phone, sager: {...}, mandii: {exists, user_data?}}`.
    """
    data = expect_dict(data)
    block = expect_dict(data[backend_key]) if backend_key in data else data
    exists = pick(block, "exists")
    if not isinstance(exists, bool):
        raise TypeError(f"exists must be a boolean, got {exists!r}")
    raw_profile = pick(block, "profile", "user_data", default=None)
    if not exists or raw_profile is None:
        return BackendPresence(exists=exists, profile=None)
    return BackendPresence(exists=True, profile=profile_decoder(raw_profile))


def decode_sale(data: Dict[str, Any]) -> SalesRecord:
    data = expect_dict(data)
    return SalesRecord(
        id=pick(data, "id", default=None),
        customer_id=str(pick(data, "customer_id", "customerId")),
        date=to_date(pick(data, "date")),
        product=pick(data, "product_bought", "product"),
        amount=to_decimal(pick(data, "amount")),
        paid=to_bool(pick(data, "paid", default=False), "paid"),
        payment_mode=pick(data, "payment_mode", "paymentMode", default=None),
    )


def encode_sale(record: SalesRecordInput) -> Dict[str, Any]:
    return {
        "customer_id": record.customer_id,
        "date": record.date.isoformat(),
        "product_bought": record.product,
        "amount": str(record.amount),
        "paid": record.paid,
        "payment_mode": record.payment_mode,
    }


def decode_debt(data: Dict[str, Any]) -> DebtSummary:
    data = expect_dict(data)
    return DebtSummary(
        customer_id=str(pick(data, "customer_id", "customerId")),
        total_unpaid_amount=to_decimal(pick(data, "total_unpaid_amount", "totalUnpaidAmount")),
        oldest_unpaid_date=to_date(pick(data, "oldest_unpaid_date", "oldestUnpaidDate")),
        unpaid_count=int(pick(data, "unpaid_count", "unpaidCount")),
    )


def decode_prediction(data: Dict[str, Any]) -> Prediction:
    data = expect_dict(data)
    score = float(pick(data, "score"))
    if not 0.0 <= score <= 1.0:
        raise ValueError(f"score out of range: {score}")
    expires_at: Optional[Any] = pick(data, "expires_at", "expiresAt", default=None)
    return Prediction(
        id=int(pick(data, "id")),
        customer_id=str(pick(data, "customer_id", "customerId")),
        predicted_product=pick(data, "predicted_product", "predictedProduct"),
        score=score,
        created_at=to_datetime(pick(data, "created_at", "createdAt")),
        expires_at=to_datetime(expires_at) if expires_at else None,
    )


def decode_daily_summary(data: Dict[str, Any]) -> DailySummary:
    data = expect_dict(data)
    totals = [
        DailyTotal(
            date=to_date(pick(item, "date")),
            total_amount=to_decimal(pick(item, "total_amount", "totalAmount")),
            total_count=int(pick(item, "total_count", "totalCount")),
        )
        for item in map(expect_dict, expect_list(pick(data, "totals", default=[])))
    ]
    products = [
        ProductSummary(
            product=pick(item, "product"),
            sales_count=int(pick(item, "sales_count", "salesCount")),
            total_amount=to_decimal(pick(item, "total_amount", "totalAmount")),
        )
        for item in map(expect_dict, expect_list(pick(data, "products", default=[])))
    ]
    return DailySummary(totals=totals, products=products, meta=dict(pick(data, "meta", default={}) or {}))
