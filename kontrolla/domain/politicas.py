# kontrolla/domain/politicas.py
"""
Políticas de estoque do checkout.

Este módulo contém as regras que decidem se um produto pode entrar no
carrinho e como classificar o estoque de um produto para exibição.
A única regra que bloqueia é a de estoque zerado: pedidos acima do
estoque disponível são permitidos e apenas sinalizados por
:func:`excede_estoque`.
"""

from __future__ import annotations

from decimal import Decimal

from kontrolla.domain.models import Produto, Quantidade


def pode_adicionar(produto: Produto, quantidade: Quantidade = 1) -> bool:
    """Decide se ``produto`` pode ser adicionado/incrementado no carrinho.

    Regras:
        - ``estoque_disponivel <= 0`` → ``False``, qualquer que seja a
          quantidade pedida; produto sem estoque nunca é vendido, nem
          parcialmente.
        - caso contrário → ``True``. Não há limite superior: vender
          além do estoque não é bloqueado aqui.

    Args:
        produto: Produto do catálogo (estoque já resolvido pelo modo).
        quantidade: Quantidade canônica pedida. Não altera o resultado.

    Returns:
        ``True`` quando a ação é permitida.
    """
    return produto.estoque_disponivel > 0


def excede_estoque(produto: Produto, quantidade_total: Quantidade) -> bool:
    """Indica se a linha resultante ficaria acima do estoque disponível."""
    return Decimal(quantidade_total) > produto.estoque_disponivel


def status_estoque(produto: Produto) -> str:
    """Classifica o estoque de um produto.

    Regras:
        - ``estoque <= 0`` → ``'SEM_ESTOQUE'``
        - ``estoque <= estoque_minimo`` → ``'BAIXO'``
        - caso contrário → ``'OK'``
    """
    if produto.estoque_disponivel <= 0:
        return "SEM_ESTOQUE"
    if produto.estoque_disponivel <= produto.estoque_minimo:
        return "BAIXO"
    return "OK"
