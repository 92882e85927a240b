"""In-memory SaGer stand-in for local runs and tests"""

import datetime as dt
import random
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Response
from pydantic import BaseModel, Field


class SendOtpRequest(BaseModel):
    phone: str = Field(..., min_length=1)


class VerifyOtpRequest(BaseModel):
    phone: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    username: str
    password: str


class RefreshRequest(BaseModel):
    refresh: str


class UserStatusRequest(BaseModel):
    phone: str


class SalesRecordRequest(BaseModel):
    customer_id: str = Field(..., min_length=1)
    date: dt.date
    product_bought: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    paid: bool = False
    payment_mode: Optional[str] = None


@dataclass
class SagerState:
    """Backend data; tests mutate it directly"""

    users: Dict[str, dict] = field(default_factory=dict)  # phone -> user
    passwords: Dict[str, str] = field(default_factory=dict)  # username -> password
    fixed_otp: Optional[str] = None
    echo_otp: bool = True
    pending_otps: Dict[str, str] = field(default_factory=dict)
    access_tokens: Dict[str, str] = field(default_factory=dict)  # token -> phone
    refresh_tokens: Dict[str, str] = field(default_factory=dict)
    sales: List[dict] = field(default_factory=list)
    predictions: List[dict] = field(default_factory=list)
    today: date = field(default_factory=date.today)
    token_counter: int = 0
    sale_counter: int = 0

    def issue_tokens(self, phone: str) -> tuple[str, str]:
        self.token_counter += 1
        access, refresh = f"a{self.token_counter}", f"r{self.token_counter}"
        self.access_tokens[access] = phone
        self.refresh_tokens[refresh] = phone
        return access, refresh

    def user_for(self, phone: str) -> dict:
        if phone not in self.users:
            self.users[phone] = {
                "id": len(self.users) + 1,
                "username": phone,
                "phone": phone,
                "name": None,
                "shop_name": None,
                "is_phone_verified": True,
            }
        return self.users[phone]

    def add_sale(self, **fields) -> dict:
        self.sale_counter += 1
        record = {"id": self.sale_counter, "payment_mode": None, "paid": False, **fields}
        record["amount"] = Decimal(str(record["amount"]))
        if isinstance(record["date"], date):
            record["date"] = record["date"].isoformat()
        self.sales.append(record)
        return record


def money(value) -> str:
    """Decimal money as a JSON string, the way DRF renders DecimalField"""
    return str(value)


def sale_json(record: dict) -> dict:
    return {**record, "amount": money(record["amount"])}


def create_sager_app(state: SagerState | None = None) -> FastAPI:
    state = state or SagerState()
    app = FastAPI(title="Mock SaGer Server", version="1.0.0")
    app.state.backend = state

    def current_phone(authorization: Optional[str] = Header(default=None)) -> str:
        if not authorization or not authorization.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Authentication credentials were not provided.")
        phone = state.access_tokens.get(authorization.removeprefix("Bearer "))
        if phone is None:
            raise HTTPException(status_code=401, detail="Given token not valid for any token type")
        return phone

    def find_sale(sale_id: int) -> dict:
        for record in state.sales:
            if record["id"] == sale_id:
                return record
        raise HTTPException(status_code=404, detail="Not found.")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/auth/otp/send/")
    def send_otp(body: SendOtpRequest):
        code = state.fixed_otp or f"{random.randint(0, 999999):06d}"
        state.pending_otps[body.phone] = code
        payload = {"detail": "OTP sent"}
        if state.echo_otp:
            payload["otp"] = code
        return payload

    @app.post("/api/auth/otp/verify/")
    def verify_otp(body: VerifyOtpRequest):
        expected = state.pending_otps.get(body.phone)
        if expected is None or expected != body.code:
            raise HTTPException(status_code=400, detail="Invalid or expired OTP")
        del state.pending_otps[body.phone]
        access, refresh = state.issue_tokens(body.phone)
        return {"access": access, "refresh": refresh, "user": state.user_for(body.phone), "detail": "Login successful"}

    @app.post("/api/auth/token/")
    def login(body: LoginRequest):
        if state.passwords.get(body.username) != body.password:
            raise HTTPException(status_code=401, detail="No active account found with the given credentials")
        user = next((u for u in state.users.values() if u["username"] == body.username), None)
        phone = user["phone"] if user else body.username
        access, refresh = state.issue_tokens(phone)
        return {"access": access, "refresh": refresh, "user": user}

    @app.post("/api/auth/token/refresh/")
    def refresh_token(body: RefreshRequest):
        phone = state.refresh_tokens.get(body.refresh)
        if phone is None:
            raise HTTPException(status_code=401, detail="Token is invalid or expired")
        state.token_counter += 1
        access = f"a{state.token_counter}"
        state.access_tokens[access] = phone
        return {"access": access}

    @app.get("/api/sales/")
    def list_sales(phone: str = Depends(current_phone)):
        return [sale_json(r) for r in state.sales]

    @app.post("/api/sales/", status_code=201)
    def create_sale(body: SalesRecordRequest, phone: str = Depends(current_phone)):
        return sale_json(state.add_sale(**body.model_dump()))

    @app.put("/api/sales/{sale_id}/")
    def update_sale(sale_id: int, body: SalesRecordRequest, phone: str = Depends(current_phone)):
        record = find_sale(sale_id)
        record.update(body.model_dump())
        record["date"] = body.date.isoformat()
        return sale_json(record)

    @app.delete("/api/sales/{sale_id}/", status_code=204)
    def delete_sale(sale_id: int, phone: str = Depends(current_phone)):
        state.sales.remove(find_sale(sale_id))
        return Response(status_code=204)

    @app.get("/api/debts/")
    def list_debts(
        days: Optional[int] = Query(default=None, ge=1),
        limit: Optional[int] = Query(default=None, ge=1),
        phone: str = Depends(current_phone),
    ):
        since = state.today - timedelta(days=days) if days else None
        grouped: Dict[str, List[dict]] = defaultdict(list)
        for record in state.sales:
            if record["paid"]:
                continue
            if since and date.fromisoformat(record["date"]) < since:
                continue
            grouped[record["customer_id"]].append(record)

        debts = [
            {
                "customer_id": customer_id,
                "total_unpaid_amount": sum((r["amount"] for r in records), Decimal("0")),
                "oldest_unpaid_date": min(r["date"] for r in records),
                "unpaid_count": len(records),
            }
            for customer_id, records in grouped.items()
        ]
        debts.sort(key=lambda d: (-d["total_unpaid_amount"], d["customer_id"]))
        debts = debts[:limit] if limit else debts
        return [{**d, "total_unpaid_amount": money(d["total_unpaid_amount"])} for d in debts]

    @app.get("/api/predictions/")
    def list_predictions(phone: str = Depends(current_phone)):
        return state.predictions

    @app.get("/api/daily-summary/")
    def daily_summary(
        days: int = Query(default=14, ge=1),
        top: int = Query(default=10, ge=1),
        phone: str = Depends(current_phone),
    ):
        start = state.today - timedelta(days=days - 1)
        window = [r for r in state.sales if start <= date.fromisoformat(r["date"]) <= state.today]

        totals = []
        for offset in range(days):
            day = (start + timedelta(days=offset)).isoformat()
            records = [r for r in window if r["date"] == day]
            totals.append({
                "date": day,
                "total_amount": money(sum((r["amount"] for r in records), Decimal("0"))),
                "total_count": len(records),
            })

        by_product: Dict[str, List[dict]] = defaultdict(list)
        for record in window:
            by_product[record["product_bought"]].append(record)
        products = [
            {
                "product": product,
                "sales_count": len(records),
                "total_amount": sum((r["amount"] for r in records), Decimal("0")),
            }
            for product, records in by_product.items()
        ]
        products.sort(key=lambda p: (-p["total_amount"], p["product"]))

        return {
            "totals": totals,
            "products": [{**p, "total_amount": money(p["total_amount"])} for p in products[:top]],
            "meta": {"days": days, "top": top, "start": start.isoformat(), "end": state.today.isoformat()},
        }

    @app.post("/api/check-user-status/")
    def check_user_status(body: UserStatusRequest):
        user = state.users.get(body.phone)
        return {"exists": user is not None, "profile": user}

    return app


app = create_sager_app()
