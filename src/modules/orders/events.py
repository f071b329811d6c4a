"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is accepted by the remote store."""


@dataclass(frozen=True)
class OrderUpdated(DomainEvent):
    """Raised when an existing order's customer, total or status is saved."""


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised when an order is deleted."""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an order status update is accepted."""
