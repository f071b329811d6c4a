"""Order module wiring."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.domain.bus import IEventBus


def register_handlers(bus: IEventBus) -> None:
    from modules.orders.events import (
        OrderCreated,
        OrderDeleted,
        OrderStatusChanged,
        OrderUpdated,
    )
    from modules.orders.handlers import (
        order_created_handler,
        order_deleted_handler,
        order_status_changed_handler,
        order_updated_handler,
    )

    bus.subscribe(OrderCreated, order_created_handler)
    bus.subscribe(OrderUpdated, order_updated_handler)
    bus.subscribe(OrderDeleted, order_deleted_handler)
    bus.subscribe(OrderStatusChanged, order_status_changed_handler)
