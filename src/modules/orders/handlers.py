"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCreated,
    OrderDeleted,
    OrderStatusChanged,
    OrderUpdated,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            f"Pedido {event.aggregate_id} registrado",
            order_id=event.aggregate_id,
        )


class OrderUpdatedHandler(IEventHandler[OrderUpdated]):
    def handle(self, event: OrderUpdated) -> None:
        logger.info(
            f"Pedido {event.aggregate_id} atualizado",
            order_id=event.aggregate_id,
            status=event.data.get("status"),
        )


class OrderDeletedHandler(IEventHandler[OrderDeleted]):
    def handle(self, event: OrderDeleted) -> None:
        logger.info(
            f"Pedido {event.aggregate_id} excluído",
            order_id=event.aggregate_id,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            f"Status do pedido {event.aggregate_id} atualizado",
            order_id=event.aggregate_id,
            old_status=event.data.get("old_status"),
            new_status=event.data.get("new_status"),
        )


order_created_handler = OrderCreatedHandler()
order_updated_handler = OrderUpdatedHandler()
order_deleted_handler = OrderDeletedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
