"""Debounced catalog look-ups for the order and sale forms.

Three independent channels (products, customers, shippable orders) each
hold their own state.  A submit cancels the channel's pending timer and
arms a new one; when it fires, the blocking repository search runs in
the loop's default executor.  Each submit takes a new sequence number
and a response is only applied when it carries the channel's latest
one, so a slow stale response can never overwrite a newer result.

Search failures end up in the channel's ``error``; nothing raises past
the lookup.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Tuple

import structlog

from modules.core.exceptions import RemoteError
from modules.orders.constants import OrderStatus

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.composer import OrderComposer
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

ProductsCallback = Callable[[Sequence["Product"]], None]


class SearchKind(str, Enum):
    PRODUCT = "product"
    CUSTOMER = "customer"
    SHIPPABLE_ORDER = "shippable-order"


@dataclass
class SearchChannel:
    """Mutable state of one search box."""

    kind: SearchKind
    query: str = ""
    pending_query: Optional[str] = None
    timer_handle: Optional[asyncio.TimerHandle] = None
    sequence: int = 0
    results: Tuple[Any, ...] = ()
    error: Optional[str] = None
    loading: bool = False
    task: Optional[asyncio.Task] = None

    @property
    def is_pending(self) -> bool:
        return self.timer_handle is not None


class CatalogLookup:
    """Search front-end over the product, customer and order repositories."""

    def __init__(
        self,
        product_repository: IProductRepository,
        customer_repository: ICustomerRepository,
        order_repository: IOrderRepository,
        debounce: float = 0.5,
        product_limit: Optional[int] = 50,
        order_limit: Optional[int] = 10,
        on_products: Optional[ProductsCallback] = None,
    ) -> None:
        self._product_repo = product_repository
        self._customer_repo = customer_repository
        self._order_repo = order_repository
        self._debounce = debounce
        self._product_limit = product_limit
        self._order_limit = order_limit
        self._on_products = on_products
        self._channels: Dict[SearchKind, SearchChannel] = {
            kind: SearchChannel(kind) for kind in SearchKind
        }

    def channel(self, kind: SearchKind) -> SearchChannel:
        return self._channels[SearchKind(kind)]

    def attach_composer(self, composer: OrderComposer) -> None:
        """Feed product results into *composer*'s stock snapshot."""
        self._on_products = composer.load_catalog

    # ------------------------------------------------------------------
    # Search rules
    # ------------------------------------------------------------------

    def search(self, kind: SearchKind, query: str) -> List[Any]:
        """Run one search synchronously.

        A blank product query lists the (bounded) catalog; a blank
        customer or order query returns nothing without calling the API.

        Raises:
            RemoteError: the search request failed.
        """
        kind = SearchKind(kind)
        query = (query or "").strip()
        if kind is SearchKind.PRODUCT:
            return self._product_repo.search(query, limit=self._product_limit)
        if not query:
            return []
        if kind is SearchKind.CUSTOMER:
            return self._customer_repo.search(query)
        return self._order_repo.search(
            query, status=OrderStatus.SHIPPED, limit=self._order_limit
        )

    # ------------------------------------------------------------------
    # Debounced channel API
    # ------------------------------------------------------------------

    def submit(self, kind: SearchKind, query: str) -> int:
        """Schedule a search after the debounce delay.

        Must be called from the running event loop.  Returns the sequence
        number assigned to this submit.
        """
        loop = asyncio.get_running_loop()
        channel = self.channel(kind)
        self._cancel_timer(channel)
        channel.sequence += 1
        channel.pending_query = query
        channel.timer_handle = loop.call_later(
            self._debounce, self._fire, channel, channel.sequence
        )
        return channel.sequence

    async def search_now(self, kind: SearchKind, query: str) -> Tuple[Any, ...]:
        """Search immediately, superseding any pending or in-flight search."""
        channel = self.channel(kind)
        self._cancel_timer(channel)
        channel.pending_query = None
        channel.sequence += 1
        await self._run(channel, query, channel.sequence)
        return channel.results

    async def flush(self, kind: SearchKind) -> Tuple[Any, ...]:
        """Fire the pending search now (if any) and wait for the channel."""
        channel = self.channel(kind)
        if channel.timer_handle is not None:
            self._cancel_timer(channel)
            self._fire(channel, channel.sequence)
        if channel.task is not None:
            await channel.task
        return channel.results

    def cancel(self, kind: SearchKind) -> None:
        """Drop the pending search and ignore any response still in flight."""
        channel = self.channel(kind)
        self._cancel_timer(channel)
        channel.pending_query = None
        channel.sequence += 1
        channel.loading = False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fire(self, channel: SearchChannel, sequence: int) -> None:
        channel.timer_handle = None
        query = channel.pending_query or ""
        channel.pending_query = None
        channel.task = asyncio.get_running_loop().create_task(
            self._run(channel, query, sequence)
        )

    async def _run(self, channel: SearchChannel, query: str, sequence: int) -> None:
        log = logger.bind(kind=channel.kind.value, query=query, sequence=sequence)
        channel.loading = True
        loop = asyncio.get_running_loop()
        try:
            results = await loop.run_in_executor(None, self.search, channel.kind, query)
        except RemoteError as exc:
            if sequence != channel.sequence:
                log.debug("catalog.stale_error_dropped")
                return
            channel.results = ()
            channel.error = exc.message
            channel.loading = False
            log.warning("catalog.search_failed", error=exc.message)
            return

        if sequence != channel.sequence:
            log.debug("catalog.stale_result_dropped", latest=channel.sequence)
            return

        channel.query = query
        channel.results = tuple(results)
        channel.error = None
        channel.loading = False
        log.debug("catalog.search_applied", result_count=len(results))
        if channel.kind is SearchKind.PRODUCT and self._on_products is not None:
            self._on_products(channel.results)

    @staticmethod
    def _cancel_timer(channel: SearchChannel) -> None:
        if channel.timer_handle is not None:
            channel.timer_handle.cancel()
            channel.timer_handle = None
