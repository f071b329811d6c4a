"""``/vendas/`` implementation of the Sale repository."""

from __future__ import annotations

from typing import Optional

from modules.core.repositories.http_repository import HttpRepository
from modules.sales.dtos import CreateSaleDTO, UpdateSaleDTO
from modules.sales.models import Sale
from modules.sales.repositories.interfaces import ISaleRepository


class SaleHttpRepository(HttpRepository[Sale], ISaleRepository):
    resource = "vendas"
    entity_label = "venda"
    entity = Sale

    def create(self, dto: CreateSaleDTO) -> Sale:
        return self._create(dto.to_api())

    def update(self, id: int, dto: UpdateSaleDTO) -> Sale:
        return self._update(id, dto.to_api())

    def find_by_order(self, order_id: int) -> Optional[Sale]:
        # /vendas/ has no order filter; the sales list is scanned instead.
        for sale in self.list():
            if sale.order_id == order_id:
                return sale
        return None
