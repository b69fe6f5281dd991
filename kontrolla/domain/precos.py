# kontrolla/domain/precos.py
"""
Cálculo de totais do carrinho.

    subtotal       = Σ total da linha
    valor_desconto = subtotal * desconto_percentual / 100
    total          = subtotal - valor_desconto

Função pura: nada é armazenado, os totais são recalculados a cada
consulta ou mutação.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, NamedTuple

from kontrolla.domain.models import ItemCarrinho, para_decimal


class Totais(NamedTuple):
    subtotal: Decimal
    valor_desconto: Decimal
    total: Decimal


def calcular_totais(itens: Iterable[ItemCarrinho], desconto_percentual=0) -> Totais:
    subtotal = sum((item.total for item in itens), Decimal("0"))
    desconto = para_decimal(desconto_percentual or 0)
    valor_desconto = subtotal * desconto / Decimal(100)
    return Totais(subtotal, valor_desconto, subtotal - valor_desconto)
