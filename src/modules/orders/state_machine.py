"""Order status state machine.

The remote store is the authority on order status, so the console does
not guard manual transitions: any state may be set from any state.  The
only transition the console drives on its own is ``SHIPPED → DELIVERED``
when a sale is recorded (see ``SaleRecorder``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Union

import structlog

from modules.core.exceptions import RemoteError, ValidationError
from modules.orders.constants import (
    STATUS_TO_WIRE,
    TERMINAL_STATES,
    WIRE_TO_STATUS,
    OrderStatus,
)
from modules.orders.events import OrderStatusChanged
from modules.orders.exceptions import UnknownOrderStatus

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)

StatusLike = Union[OrderStatus, str]


# ---------------------------------------------------------------------------
# Vocabulary mapping
# ---------------------------------------------------------------------------


def to_wire(status: OrderStatus) -> str:
    """Status string the remote store expects for *status*."""
    return STATUS_TO_WIRE[status]


def from_wire(value: Any) -> OrderStatus:
    """Parse a status string received from the remote store.

    Raises:
        UnknownOrderStatus: *value* is not one of the recognised strings.
    """
    try:
        return WIRE_TO_STATUS[value]
    except (KeyError, TypeError):
        raise UnknownOrderStatus(value) from None


def coerce_status(value: StatusLike) -> OrderStatus:
    """Accept an ``OrderStatus``, its name or its wire label from local input.

    Raises:
        ValidationError: the value names no known status.
    """
    if isinstance(value, OrderStatus):
        return value
    if isinstance(value, str):
        if value in WIRE_TO_STATUS:
            return WIRE_TO_STATUS[value]
        try:
            return OrderStatus[value.upper()]
        except KeyError:
            pass
    raise ValidationError(f"Status de pedido inválido: {value!r}.", field="status")


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATES


def suggested_rollback(status: OrderStatus) -> OrderStatus:
    """Status to propose once the sale that delivered an order is gone.

    A delivered order goes back to shipped; any other status is kept.
    """
    if status is OrderStatus.DELIVERED:
        return OrderStatus.SHIPPED
    return status


# ---------------------------------------------------------------------------
# Transition API
# ---------------------------------------------------------------------------


class OrderStatusMachine:
    """Issues status updates to the store and announces them.

    Every call to ``set_status`` is exactly one update request; there is
    no retry and no transition guard.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._event_bus = event_bus

    def set_status(
        self,
        order_id: int,
        new_status: StatusLike,
        previous_status: Optional[OrderStatus] = None,
    ) -> Optional[Order]:
        """Move order *order_id* to *new_status*.

        ``previous_status`` is only used for logging and for the emitted
        event; pass it when the caller knows it.

        Raises:
            ValidationError: *new_status* is not a recognised status.
            RemoteError: the update request failed.
        """
        status = coerce_status(new_status)
        log = logger.bind(
            order_id=order_id,
            old_status=previous_status.label if previous_status else None,
            new_status=status.label,
        )
        try:
            order = self._order_repo.update_status(order_id, status)
        except RemoteError:
            log.warning("order.status_update_failed")
            raise

        log.info("order.status_updated")
        if self._event_bus is not None:
            self._event_bus.publish(
                OrderStatusChanged(
                    aggregate_id=order_id,
                    data={
                        "old_status": previous_status.value if previous_status else None,
                        "new_status": status.value,
                    },
                )
            )
        return order
