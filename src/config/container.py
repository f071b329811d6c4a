"""Composition root.

Builds the object graph of the console from ``config.settings``:
session → API client → repositories → event bus → services.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from config import settings
from modules.catalog.lookup import CatalogLookup
from modules.core.http import ApiClient
from modules.core.session import SessionContext, TokenStore
from modules.customers.repositories.http_repository import CustomerHttpRepository
from modules.orders import apps as orders_apps
from modules.orders.repositories import OrderHttpRepository
from modules.orders.services import OrderService
from modules.orders.state_machine import OrderStatusMachine
from modules.products.repositories.http_repository import ProductHttpRepository
from modules.products.services import ProductService
from modules.reconciliation.prompt import ReconciliationPrompt
from modules.sales import apps as sales_apps
from modules.sales.repositories.http_repository import SaleHttpRepository
from modules.sales.services import SaleRecorder
from modules.staff.repositories.http_repository import StaffHttpRepository
from shared.infrastructure.bus import InMemoryEventBus


@dataclass
class Container:
    session: SessionContext
    api: ApiClient
    event_bus: InMemoryEventBus
    status_machine: OrderStatusMachine
    reconciliation: ReconciliationPrompt
    products: ProductService
    orders: OrderService
    sales: SaleRecorder
    lookup: CatalogLookup


def build_container(
    http: Optional[requests.Session] = None,
    base_url: Optional[str] = None,
    token_store: Optional[TokenStore] = None,
    configure_logging: bool = True,
) -> Container:
    """Wire every service; ``http`` and ``token_store`` can be replaced in tests."""
    if configure_logging:
        settings.configure_logging()

    session = SessionContext(token_store or TokenStore(settings.AUTH_TOKEN_FILE))
    session.init()
    api = ApiClient(
        base_url or settings.API_BASE_URL,
        session=session,
        timeout=settings.API_TIMEOUT,
        http=http,
    )

    product_repo = ProductHttpRepository(api)
    customer_repo = CustomerHttpRepository(api)
    order_repo = OrderHttpRepository(api)
    sale_repo = SaleHttpRepository(api)
    staff_repo = StaffHttpRepository(api)

    bus = InMemoryEventBus()
    orders_apps.register_handlers(bus)
    sales_apps.register_handlers(bus)

    status_machine = OrderStatusMachine(order_repo, event_bus=bus)
    prompt = ReconciliationPrompt(status_machine)

    return Container(
        session=session,
        api=api,
        event_bus=bus,
        status_machine=status_machine,
        reconciliation=prompt,
        products=ProductService(product_repo),
        orders=OrderService(order_repo, sale_repo, status_machine, event_bus=bus),
        sales=SaleRecorder(
            sale_repo,
            order_repo,
            status_machine,
            session,
            prompt,
            event_bus=bus,
            staff_repository=staff_repo,
            require_shipped=settings.SALE_REQUIRE_SHIPPED_ORDER,
        ),
        lookup=CatalogLookup(
            product_repo,
            customer_repo,
            order_repo,
            debounce=settings.SEARCH_DEBOUNCE_SECONDS,
            product_limit=settings.PRODUCT_SEARCH_LIMIT,
            order_limit=settings.ORDER_SEARCH_LIMIT,
        ),
    )
