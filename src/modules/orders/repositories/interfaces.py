"""Order repository interface.

Extends ``IRepository[Order]`` with the writes the console needs:
creation with nested items, partial update of the order header and the
status-only update driven by the state machine.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.constants import OrderStatus
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate.

    Item lines are only written on creation; afterwards only the header
    (customer, total, status) changes.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items.

        ``data`` is the wire payload: ``cliente_id``, ``status``,
        ``total`` and ``itens`` (``produto_id``, ``quantidade``,
        ``preco_unitario``).
        """

    @abstractmethod
    def update(self, id: int, data: Dict[str, Any]) -> Order:
        """Partially update the order header (``cliente_id``, ``status``, ``total``)."""

    @abstractmethod
    def update_status(self, id: int, status: OrderStatus) -> Optional[Order]:
        """Send a status-only update; ``None`` when the result cannot be read back."""

    @abstractmethod
    def search(
        self,
        query: str = "",
        status: Optional[OrderStatus] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Orders matching *query* (id or customer name), optionally by status."""
