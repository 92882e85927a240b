"""Client-side validation for the add-sale form"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

import pydantic
from pydantic import BaseModel, Field, field_validator

from mysanvi.domain.exceptions import ValidationError
from mysanvi.domain.models import SalesRecordInput


class SaleForm(BaseModel):
    """Raw add-sale form as typed by the user"""

    customer_id: str = Field(..., min_length=1, description="Customer identifier")
    product: str = Field(..., min_length=1, description="Product bought")
    amount: Decimal = Field(..., gt=0, max_digits=20, decimal_places=2, description="Sale amount")
    paid: bool = False
    payment_mode: Optional[str] = None

    @field_validator("customer_id", "product", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value):
        if isinstance(value, str):
            try:
                return Decimal(value.strip())
            except InvalidOperation as e:
                raise ValueError("amount must be a number") from e
        return value

    @field_validator("payment_mode", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


def validate_sale_input(
    customer_id: str,
    product: str,
    amount,
    paid: bool = False,
    payment_mode: Optional[str] = None,
    sale_date: Optional[date] = None,
) -> SalesRecordInput:
    """
    Validate the add-sale form before any network call.

    Raises:
        ValidationError: Blank customer/product, or amount not a positive number
    """
    try:
        form = SaleForm(
            customer_id=customer_id,
            product=product,
            amount=amount,
            paid=paid,
            payment_mode=payment_mode,
        )
    except pydantic.ValidationError as e:
        errors = {str(err["loc"][0]): err["msg"] for err in e.errors()}
        if "customer_id" in errors or "product" in errors:
            message = "Please fill all required fields"
        else:
            message = "Please enter a valid amount"
        raise ValidationError(message, errors) from e

    if not form.amount.is_finite():
        raise ValidationError("Please enter a valid amount", {"amount": "amount must be finite"})

    return SalesRecordInput(
        customer_id=form.customer_id,
        date=sale_date or date.today(),
        product=form.product,
        amount=form.amount,
        paid=form.paid,
        payment_mode=form.payment_mode,
    )
