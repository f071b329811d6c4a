"""Sale domain constants."""

from __future__ import annotations

from enum import Enum


class PaymentMethod(str, Enum):
    """Payment methods accepted by the sales register (wire values)."""

    CASH = "Dinheiro"
    CREDIT_CARD = "Cartão de Crédito"
    DEBIT_CARD = "Cartão de Débito"
    BANK_TRANSFER = "Transferência Bancária"
    PIX = "PIX"
    CHEQUE = "Cheque"


INVOICE_PREFIX = "INV-"
INVOICE_DIGITS = 5
