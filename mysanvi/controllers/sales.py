"""Sales ledger: list sales and add new ones"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from mysanvi.controllers.base import Controller, LoadStatus
from mysanvi.domain.exceptions import AuthenticationRequired, MySanviError, ValidationError
from mysanvi.domain.models import SalesRecord
from mysanvi.domain.sales import validate_sale_input
from mysanvi.domain.session import SessionStore
from mysanvi.infrastructure.clients.sager import SagerClient


@dataclass(frozen=True)
class SalesLedgerState:
    status: LoadStatus = LoadStatus.IDLE
    records: Tuple[SalesRecord, ...] = ()
    error_message: Optional[str] = None
    is_submitting: bool = False
    form_error: Optional[str] = None


class SalesLedgerController(Controller[SalesLedgerState]):
    """LOADING -> LOADED | ERROR; retry re-enters LOADING"""

    def __init__(self, sager: SagerClient, session: SessionStore):
        super().__init__(SalesLedgerState())
        self.sager = sager
        self.session = session

    async def load(self) -> None:
        self._update(status=LoadStatus.LOADING, error_message=None)
        try:
            records = await self.sager.list_sales(self.session.get_auth_header())
        except AuthenticationRequired:
            self._update(status=LoadStatus.ERROR, error_message="No authentication token found")
            return
        except MySanviError as e:
            logging.warning(f"Sales load failed: {e}", extra={"step": "list_sales"})
            self._update(status=LoadStatus.ERROR, error_message=f"Failed to load sales: {e}")
            return
        self._update(status=LoadStatus.LOADED, records=tuple(records))

    async def retry(self) -> None:
        await self.load()

    async def add_sale(
        self,
        customer_id: str,
        product: str,
        amount,
        paid: bool = False,
        payment_mode: Optional[str] = None,
        sale_date: Optional[date] = None,
    ) -> Optional[SalesRecord]:
        """
        Validate locally, create on SaGer and append the result.

        Returns the created record, or None when validation or the call
        failed (the reason is in `form_error`).
        """
        try:
            record_input = validate_sale_input(customer_id, product, amount, paid, payment_mode, sale_date)
        except ValidationError as e:
            self._update(form_error=e.message)
            return None

        self._update(is_submitting=True, form_error=None)
        try:
            created = await self.sager.create_sale(self.session.get_auth_header(), record_input)
        except AuthenticationRequired:
            self._update(is_submitting=False, form_error="No authentication token found")
            return None
        except MySanviError as e:
            logging.warning(f"Sale creation failed: {e}", extra={"step": "create_sale"})
            self._update(is_submitting=False, form_error=f"Failed to add sale: {e}")
            return None

        self._update(is_submitting=False, records=self.state.records + (created,))
        return created
