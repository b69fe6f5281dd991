"""
Utilidades de parsing para as quantidades digitadas no caixa.

O operador digita algo como "500 g", "1,2 kg", "750ml" ou só "3". Este
módulo extrai o número (vírgula ou ponto como separador decimal) e a
unidade, e traduz a unidade para a `Denominacao` usada pela conversão.
A validação do valor (positivo, finito) fica com a conversão.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Optional, Tuple

from kontrolla.domain.models import Denominacao, ModoPreco

_NUM_RE = re.compile(r"^\s*([-+]?\d+(?:[.,]\d+)?|[-+]?[.,]\d+)\s*([a-zA-Z]*)\s*$")

_UNIDADES = {
    "g": Denominacao.PEQUENA,
    "gr": Denominacao.PEQUENA,
    "grama": Denominacao.PEQUENA,
    "gramas": Denominacao.PEQUENA,
    "ml": Denominacao.PEQUENA,
    "kg": Denominacao.GRANDE,
    "quilo": Denominacao.GRANDE,
    "quilos": Denominacao.GRANDE,
    "l": Denominacao.GRANDE,
    "lt": Denominacao.GRANDE,
    "litro": Denominacao.GRANDE,
    "litros": Denominacao.GRANDE,
}

# unidades aceitas para cada modo de preço
_FAMILIAS = {
    ModoPreco.UNIDADE: {"un", "und", "unid", "unidade", "unidades"},
    ModoPreco.KG: {"g", "gr", "grama", "gramas", "kg", "quilo", "quilos"},
    ModoPreco.LITROS: {"ml", "l", "lt", "litro", "litros"},
}


def parse_quantidade_operador(txt: Optional[str]) -> Tuple[Optional[Decimal], Optional[str], Optional[Denominacao]]:
    """Interpreta uma quantidade digitada pelo operador.

    Exemplos:
        "500 g"  → (Decimal('500'), "G", Denominacao.PEQUENA)
        "1,2 kg" → (Decimal('1.2'), "KG", Denominacao.GRANDE)
        "750ml"  → (Decimal('750'), "ML", Denominacao.PEQUENA)
        "3"      → (Decimal('3'), None, None)
        "3 un"   → (Decimal('3'), "UN", None)

    Args:
        txt: Texto a ser interpretado.

    Returns:
        Uma tupla (numero, unidade, denominacao). Qualquer valor que não
        possa ser determinado é retornado como None; texto que não tem a
        forma "<número> [unidade]" retorna (None, None, None).
    """
    if txt is None:
        return None, None, None
    s = str(txt).strip()
    if not s:
        return None, None, None
    m = _NUM_RE.match(s)
    if not m:
        return None, None, None
    num = Decimal(m.group(1).replace(",", "."))
    unidade = m.group(2).upper() or None
    denominacao = _UNIDADES.get(unidade.lower()) if unidade else None
    return num, unidade, denominacao


def unidade_compativel(modo: ModoPreco, unidade: Optional[str]) -> bool:
    """Indica se a unidade digitada pertence ao modo de preço do produto.

    Sem unidade vale a denominação selecionada. "500 l" para um produto
    por kg, ou "2 kg" para um produto por litro, não são compatíveis.
    """
    if not unidade:
        return True
    return unidade.lower() in _FAMILIAS[ModoPreco.de_codigo(modo)]
