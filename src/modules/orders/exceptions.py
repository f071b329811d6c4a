"""Order domain exceptions.

``RemoteError`` subclasses describe answers from the store the console
cannot use; ``ValidationError`` subclasses are rejected locally before
any call is made.
"""

from __future__ import annotations

from typing import Any

from modules.core.exceptions import RemoteError, ValidationError


class OrderNotFound(RemoteError):
    """The requested order does not exist in the remote store."""

    def __init__(self, order_id: int) -> None:
        super().__init__(
            "get_order",
            status_code=404,
            fallback=f"Pedido {order_id} não encontrado.",
        )
        self.order_id = order_id


class UnknownOrderStatus(RemoteError):
    """The store returned a status string outside the recognised set."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            "decode_order_status",
            fallback=f"Status de pedido desconhecido: {value!r}.",
        )
        self.value = value


class ItemQuantityLocked(ValidationError):
    """Item quantities are read-only once the order exists server-side."""


class OrderHasSale(ValidationError):
    """The order cannot be deleted while a sale references it."""

    def __init__(self, order_id: int, sale_id: int) -> None:
        super().__init__(
            f"O pedido {order_id} possui a venda {sale_id} e não pode ser excluído.",
            field="order_id",
        )
        self.order_id = order_id
        self.sale_id = sale_id
