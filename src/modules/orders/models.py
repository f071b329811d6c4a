"""Order and OrderItem entities as exposed by ``/pedidos/``.

Rules carried by the entities:
- OrderItem snapshots product name and price when the line is added; the
  snapshot is never re-fetched.
- OrderItem subtotal is always ``quantity * unit_price``.
- Order status is always one of the recognised ``OrderStatus`` values;
  unknown wire strings are rejected when the payload is decoded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from modules.orders.constants import INITIAL_STATE, OrderStatus
from modules.orders.state_machine import from_wire
from shared.domain.events import DomainEventMixin
from shared.domain.money import ZERO, to_decimal
from shared.domain.timestamps import parse_date


@dataclass(frozen=True)
class OrderItem:
    """Line item of an order (one per product)."""

    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    id: Optional[int] = None

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> OrderItem:
        product_id = int(payload["produto_id"])
        return cls(
            id=payload.get("id"),
            product_id=product_id,
            product_name=payload.get("nome_produto") or f"Produto ID {product_id}",
            quantity=int(payload["quantidade"]),
            unit_price=to_decimal(payload["preco_unitario"]),
        )

    def __str__(self) -> str:
        return f"{self.product_name} (x{self.quantity})"


@dataclass
class Order(DomainEventMixin):
    """Order aggregate as last fetched from the store.

    ``id`` is ``None`` until the store has accepted the order.
    """

    customer_id: Optional[int] = None
    customer_name: str = ""
    items: List[OrderItem] = field(default_factory=list)
    total_amount: Decimal = ZERO
    status: OrderStatus = INITIAL_STATE
    order_date: Optional[date] = None
    id: Optional[int] = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def items_summary(self) -> str:
        """``"Cola (x2), Água (x3)"``, as shown next to sales."""
        return ", ".join(str(item) for item in self.items) or "Nenhum item"

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> Order:
        customer = payload.get("cliente") or {}
        raw_date = payload.get("data_pedido")
        return cls(
            id=int(payload["id"]),
            customer_id=payload.get("cliente_id") or customer.get("id"),
            customer_name=customer.get("nome") or "Cliente Desconhecido",
            items=[OrderItem.from_api(item) for item in payload.get("itens") or []],
            total_amount=to_decimal(payload.get("total")),
            status=from_wire(payload.get("status") or INITIAL_STATE.label),
            order_date=parse_date(raw_date),
        )

    def __str__(self) -> str:
        return f"Pedido {self.id} - {self.customer_name} ({self.status.label})"
