"""Domain events for the Sales bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class SaleCreated(DomainEvent):
    """Raised when a sale is accepted by the remote store."""


@dataclass(frozen=True)
class SaleUpdated(DomainEvent):
    """Raised when a sale's amount or payment method is saved."""


@dataclass(frozen=True)
class SaleDeleted(DomainEvent):
    """Raised when a sale is deleted; the order may need a status rollback."""
