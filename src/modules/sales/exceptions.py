"""Sale domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import RemoteError


class SaleNotFound(RemoteError):
    """The requested sale does not exist in the remote store."""

    def __init__(self, sale_id: int) -> None:
        super().__init__(
            "get_sale",
            status_code=404,
            fallback=f"Venda {sale_id} não encontrada.",
        )
        self.sale_id = sale_id
