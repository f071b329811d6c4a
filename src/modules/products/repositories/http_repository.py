"""``/produtos/`` implementation of the Product repository."""

from __future__ import annotations

from typing import List, Optional

from modules.core.repositories.http_repository import HttpRepository
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository


class ProductHttpRepository(HttpRepository[Product], IProductRepository):
    resource = "produtos"
    entity_label = "produto"
    entity = Product

    def search(self, query: str = "", limit: Optional[int] = None) -> List[Product]:
        return self.list({"search": query.strip(), "limit": limit})

    def create(self, dto: CreateProductDTO) -> Product:
        return self._create(dto.to_api())

    def update(self, id: int, dto: UpdateProductDTO) -> Product:
        return self._update(id, dto.to_api())
