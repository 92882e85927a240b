"""Domain models - pure Python dataclasses for the entities both backends serve"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Credential:
    """Access/refresh token pair issued by SaGer"""

    access_token: str
    refresh_token: str


@dataclass
class SagerProfile:
    """User profile as returned by the SaGer auth endpoints"""

    id: Optional[int] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None
    shop_name: Optional[str] = None
    is_phone_verified: bool = False


@dataclass
class MandiiProfile:
    """Community account linked to a phone number"""

    id: Optional[int] = None
    name: Optional[str] = None
    is_shop: bool = False
    otp_verified: bool = False
    shop_id: Optional[int] = None


ProfileData = Union[SagerProfile, MandiiProfile]


@dataclass
class BackendPresence:
    """Existence flag plus optional profile for one backend"""

    exists: bool
    profile: Optional[ProfileData] = None
    checked: bool = True  # False only for the "not yet probed" marker

    def __post_init__(self) -> None:
        if not self.exists and self.profile is not None:
            raise ValueError("profile must be absent when exists is False")

    @classmethod
    def absent(cls) -> "BackendPresence":
        return cls(exists=False, profile=None)

    @classmethod
    def unchecked(cls) -> "BackendPresence":
        return cls(exists=False, profile=None, checked=False)


@dataclass
class UserStatus:
    """Unified view of a phone number across SaGer and Mandii"""

    phone: str
    sager: BackendPresence
    mandii: BackendPresence


@dataclass
class SalesRecordInput:
    """Body sent when creating or updating a sale"""

    customer_id: str
    date: date
    product: str
    amount: Decimal
    paid: bool = False
    payment_mode: Optional[str] = None


@dataclass
class SalesRecord:
    """Sale as persisted by SaGer; id is None until the backend assigns one"""

    customer_id: str
    date: date
    product: str
    amount: Decimal
    paid: bool
    payment_mode: Optional[str] = None
    id: Optional[int] = None


@dataclass
class DebtSummary:
    """Unpaid balance aggregated per customer"""

    customer_id: str
    total_unpaid_amount: Decimal
    oldest_unpaid_date: date
    unpaid_count: int


@dataclass
class Prediction:
    """Next-purchase prediction for a customer"""

    id: int
    customer_id: str
    predicted_product: str
    score: float  # 0.0 - 1.0
    created_at: datetime
    expires_at: Optional[datetime] = None


@dataclass
class DailyTotal:
    date: date
    total_amount: Decimal
    total_count: int


@dataclass
class ProductSummary:
    product: str
    sales_count: int
    total_amount: Decimal


@dataclass
class DailySummary:
    """Daily totals and top products over a trailing window"""

    totals: List[DailyTotal]
    products: List[ProductSummary]
    meta: Dict[str, Any] = field(default_factory=dict)

    def latest_total(self) -> Optional[DailyTotal]:
        return self.totals[-1] if self.totals else None


@dataclass
class OtpDispatch:
    """Result of asking SaGer to send an OTP"""

    detail: str
    debug_otp: Optional[str] = None


@dataclass
class AuthResult:
    """Result of OTP verification or password login"""

    credential: Credential
    user: Optional[SagerProfile] = None
    detail: Optional[str] = None
