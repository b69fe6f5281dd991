# kontrolla/domain/busca.py
"""
Localização de produtos na lista fornecida pelo catálogo.

A lista já chega filtrada pelo serviço de catálogo (a busca remota com
debounce é responsabilidade dele); aqui só se procura dentro dela.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from kontrolla.domain.models import Produto


def buscar_por_codigo(produtos: Iterable[Produto], codigo: Optional[str]) -> Optional[Produto]:
    """Retorna o produto cujo código de barras é igual a ``codigo``.

    A comparação ignora maiúsculas/minúsculas e espaços nas pontas.
    Retorna ``None`` quando nenhum produto corresponde ou o código é
    vazio.
    """
    alvo = (codigo or "").strip().casefold()
    if not alvo:
        return None
    for produto in produtos:
        if produto.codigo_barras and produto.codigo_barras.strip().casefold() == alvo:
            return produto
    return None


def buscar_por_id(produtos: Iterable[Produto], produto_id) -> Optional[Produto]:
    alvo = str(produto_id)
    for produto in produtos:
        if produto.id == alvo:
            return produto
    return None


def filtrar_produtos(produtos: Iterable[Produto], termo: Optional[str]) -> List[Produto]:
    """Filtro local: nome, código de barras ou categoria contendo ``termo``."""
    t = (termo or "").strip().casefold()
    if not t:
        return list(produtos)
    out: List[Produto] = []
    for p in produtos:
        campos = (p.nome, p.codigo_barras or "", p.categoria or "")
        if any(t in c.casefold() for c in campos):
            out.append(p)
    return out
