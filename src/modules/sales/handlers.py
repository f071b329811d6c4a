"""Event handlers for Sales domain events."""

from __future__ import annotations

import structlog

from modules.sales.events import SaleCreated, SaleDeleted, SaleUpdated
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class SaleCreatedHandler(IEventHandler[SaleCreated]):
    def handle(self, event: SaleCreated) -> None:
        logger.info(
            f"Venda {event.aggregate_id} registrada",
            sale_id=event.aggregate_id,
            order_id=event.data.get("order_id"),
        )


class SaleUpdatedHandler(IEventHandler[SaleUpdated]):
    def handle(self, event: SaleUpdated) -> None:
        logger.info(
            f"Venda {event.aggregate_id} atualizada",
            sale_id=event.aggregate_id,
        )


class SaleDeletedHandler(IEventHandler[SaleDeleted]):
    def handle(self, event: SaleDeleted) -> None:
        logger.info(
            f"Venda {event.aggregate_id} excluída",
            sale_id=event.aggregate_id,
            order_id=event.data.get("order_id"),
        )


sale_created_handler = SaleCreatedHandler()
sale_updated_handler = SaleUpdatedHandler()
sale_deleted_handler = SaleDeletedHandler()
