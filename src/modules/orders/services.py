"""Order service layer (Use Cases).

Orchestrates order creation, header edits, status changes and deletion
against the remote store.  Line items are composed locally by
``OrderComposer``; this layer only submits what the composer produced.

Rules enforced here:
- A customer must be selected before an order is submitted.
- Item lines are only sent on creation; edits touch customer, status
  and total.
- An order referenced by a sale cannot be deleted.
- Validation errors never reach the remote store; remote errors leave
  the composer untouched so the operator can retry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog

from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCreated, OrderDeleted, OrderUpdated
from modules.orders.exceptions import OrderHasSale, OrderNotFound
from modules.orders.state_machine import StatusLike

if TYPE_CHECKING:
    from modules.orders.composer import OrderComposer
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.orders.state_machine import OrderStatusMachine
    from modules.sales.repositories.interfaces import ISaleRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        sale_repository: ISaleRepository,
        status_machine: OrderStatusMachine,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._sale_repo = sale_repository
        self._status_machine = status_machine
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, composer: OrderComposer) -> Order:
        """Submit a newly composed order.

        Raises:
            ValidationError: no customer selected, or the composer is
                editing an existing order.
            RemoteError: the store rejected the order.
        """
        payload = composer.to_create_payload()
        log = logger.bind(
            customer_id=composer.customer_id,
            item_count=len(composer.items),
            total=payload["total"],
        )
        log.info("order.creation_started")

        order = self._order_repo.create(payload)
        order.add_domain_event(OrderCreated(aggregate_id=order.id))
        self._publish(order)

        log.info("order.created", order_id=order.id)
        return order

    def update_order(self, composer: OrderComposer) -> Order:
        """Save customer, status and total of an existing order.

        Raises:
            ValidationError: the composer is not editing an order, or no
                customer selected.
            RemoteError: the store rejected the update.
        """
        payload = composer.to_update_payload()
        order_id = composer.order_id
        order = self._order_repo.update(order_id, payload)
        order.add_domain_event(
            OrderUpdated(aggregate_id=order_id, data={"status": payload["status"]})
        )
        self._publish(order)
        logger.info("order.updated", order_id=order_id, status=payload["status"])
        return order

    def set_status(self, order_id: int, new_status: StatusLike) -> Optional[Order]:
        """Manual status change; no transition guard is applied."""
        return self._status_machine.set_status(order_id, new_status)

    def delete_order(self, order_id: int) -> None:
        """Delete an order that no sale references.

        Raises:
            OrderNotFound: the order does not exist.
            OrderHasSale: a sale still references the order.
            RemoteError: a store call failed.
        """
        self.get_order(order_id)
        sale = self._sale_repo.find_by_order(order_id)
        if sale is not None:
            logger.warning("order.delete_blocked", order_id=order_id, sale_id=sale.id)
            raise OrderHasSale(order_id, sale.id)

        self._order_repo.delete(order_id)
        if self._event_bus is not None:
            self._event_bus.publish(OrderDeleted(aggregate_id=order_id))
        logger.info("order.deleted", order_id=order_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def list_orders(
        self,
        search: str = "",
        status: Optional[OrderStatus] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Return orders, optionally filtered by text and status."""
        return self._order_repo.search(search, status=status, limit=limit)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _publish(self, order: Order) -> None:
        events = order.pull_domain_events()
        if self._event_bus is not None:
            self._event_bus.publish_all(events)
