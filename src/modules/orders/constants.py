"""Order domain constants.

Defines the order lifecycle states and the mapping between them and the
status strings used by the remote store.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def label(self) -> str:
        """Status string as stored by the API (``"Enviado"``...)."""
        return STATUS_TO_WIRE[self]

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


# Exhaustive in both directions: every state has exactly one wire string.
STATUS_TO_WIRE: Dict[OrderStatus, str] = {
    OrderStatus.PENDING: "Pendente",
    OrderStatus.PROCESSING: "Processando",
    OrderStatus.SHIPPED: "Enviado",
    OrderStatus.DELIVERED: "Entregue",
    OrderStatus.CANCELLED: "Cancelado",
}

WIRE_TO_STATUS: Dict[str, OrderStatus] = {
    wire: status for status, wire in STATUS_TO_WIRE.items()
}

INITIAL_STATE = OrderStatus.PENDING

TERMINAL_STATES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
)
