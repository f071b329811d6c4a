"""Sales module wiring."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.domain.bus import IEventBus


def register_handlers(bus: IEventBus) -> None:
    from modules.sales.events import SaleCreated, SaleDeleted, SaleUpdated
    from modules.sales.handlers import (
        sale_created_handler,
        sale_deleted_handler,
        sale_updated_handler,
    )

    bus.subscribe(SaleCreated, sale_created_handler)
    bus.subscribe(SaleUpdated, sale_updated_handler)
    bus.subscribe(SaleDeleted, sale_deleted_handler)
