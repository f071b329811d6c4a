"""Sale entity as exposed by ``/vendas/``.

A sale belongs to exactly one order; the link is fixed when the sale is
created.  ``amount`` starts as the order total but is edited on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from modules.sales.constants import INVOICE_DIGITS, INVOICE_PREFIX
from shared.domain.events import DomainEventMixin
from shared.domain.money import to_decimal
from shared.domain.timestamps import parse_date


@dataclass
class Sale(DomainEventMixin):
    id: int
    order_id: int
    amount: Decimal
    payment_method: Optional[str] = None
    sale_date: Optional[date] = None
    staff_id: Optional[int] = None

    @property
    def invoice_number(self) -> str:
        """``INV-00042`` for sale 42."""
        return f"{INVOICE_PREFIX}{str(self.id).zfill(INVOICE_DIGITS)}"

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> Sale:
        raw_date = payload.get("data_venda")
        return cls(
            id=int(payload["id"]),
            order_id=int(payload["pedido_id"]),
            amount=to_decimal(payload.get("valor_total")),
            payment_method=payload.get("forma_pagamento"),
            sale_date=parse_date(raw_date),
            staff_id=payload.get("funcionario_id"),
        )

    def __str__(self) -> str:
        return f"{self.invoice_number} (Pedido {self.order_id})"


@dataclass(frozen=True)
class SaleDetails:
    """A sale joined with what the sales list shows about its order."""

    sale: Sale
    customer_name: str
    items_summary: str
    order_status: Optional[str]
    staff_name: Optional[str] = None
