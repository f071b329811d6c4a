"""``/pedidos/`` implementation of the Order repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog

from modules.core.exceptions import RemoteError
from modules.core.repositories.http_repository import HttpRepository
from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository
from modules.orders.state_machine import to_wire

logger = structlog.get_logger(__name__)


class OrderHttpRepository(HttpRepository[Order], IOrderRepository):
    """Concrete Order repository backed by the remote store."""

    resource = "pedidos"
    entity_label = "pedido"
    entity = Order

    def create(self, data: Dict[str, Any]) -> Order:
        order = self._create(data)
        logger.debug("order.persisted", order_id=order.id, item_count=len(order.items))
        return order

    def update(self, id: int, data: Dict[str, Any]) -> Order:
        return self._update(id, data)

    def update_status(self, id: int, status: OrderStatus) -> Optional[Order]:
        """PUT the new status; any 2xx answer counts as applied.

        The body is decoded when it is an order.  Otherwise the order is
        read back, and a failed read is only logged (``None`` is returned).
        """
        data = self._api.put(
            "update_order_status",
            self.item_path(id),
            json={"status": to_wire(status)},
            fallback=f"Erro ao atualizar {self.entity_label} {id}.",
        )
        if isinstance(data, dict):
            try:
                return self._build(data)
            except RemoteError:
                logger.info("order.status_body_unreadable", order_id=id)
        try:
            return self.get_by_id(id)
        except RemoteError as exc:
            logger.warning("order.status_reload_failed", order_id=id, error=exc.message)
            return None

    def search(
        self,
        query: str = "",
        status: Optional[OrderStatus] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        return self.list(
            {
                "status_filter": to_wire(status) if status else None,
                "search": query.strip(),
                "limit": limit,
            }
        )
