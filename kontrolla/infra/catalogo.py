# kontrolla/infra/catalogo.py
"""
Loader da lista de produtos exportada pelo catálogo (CSV ou XLSX).

Essas funções:
- leem a planilha usando pandas;
- normalizam cabeçalhos (acentos, variações, sinônimos);
- resolvem o preço e o estoque específicos do tipo de preço
  (``preco_por_kg``/``estoque_kg``, ``preco_por_litros``/``estoque_litros``)
  para um único número;
- retornam `Produto` prontos para o checkout.

Observações:
- Linhas inválidas não interrompem a carga: são devolvidas em ``erros``
  com o número da linha e registradas no log do sistema.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from kontrolla.domain.models import ModoPreco, Produto
from kontrolla.infra.logger import log_file_operation, log_system_event


# ---------------------------
# utilitários de normalização
# ---------------------------

def _slug(s: str) -> str:
    """Normaliza cabeçalhos: minúsculas, sem acentos, sem não-alfanumérico."""
    if s is None:
        return ""
    s = str(s).strip().lower()
    acentos = dict(zip("áàâãäéèêëíìîïóòôõöúùûüç", "aaaaaeeeeiiiiooooouuuuc"))
    s = "".join(acentos.get(ch, ch) for ch in s)
    s = re.sub(r"[^a-z0-9]+", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


def _safe_get(row, key):
    """Lê um valor da linha tratando NA/strings vazias como None."""
    val = row.get(key)
    if val is None or pd.isna(val):
        return None
    s = str(val).strip()
    return s or None


def _first_nonnull(*vals):
    for v in vals:
        if v is not None:
            return v
    return None


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Renomeia colunas com base em sinônimos/variações."""
    aliases = {
        "id": "id",
        "codigo": "id",
        "cod": "id",
        "produto id": "id",

        "nome": "nome",
        "produto": "nome",
        "descricao": "nome",
        "nome do produto": "nome",

        "tipo preco": "tipo_preco",
        "tipo de preco": "tipo_preco",
        "modo preco": "tipo_preco",
        "unidade venda": "tipo_preco",

        "preco": "preco",
        "preco unitario": "preco",
        "valor": "preco",
        "preco venda": "preco",
        "preco por kg": "preco_por_kg",
        "preco kg": "preco_por_kg",
        "preco por litros": "preco_por_litros",
        "preco por litro": "preco_por_litros",
        "preco litro": "preco_por_litros",

        "estoque": "estoque",
        "quantidade": "estoque",
        "estoque kg": "estoque_kg",
        "estoque litros": "estoque_litros",
        "estoque minimo": "estoque_minimo",

        "codigo barras": "codigo_barras",
        "codigo de barras": "codigo_barras",
        "ean": "codigo_barras",
        "gtin": "codigo_barras",

        "categoria": "categoria",
    }

    new_cols = {}
    for col in df.columns:
        key = _slug(col)
        new_cols[col] = aliases.get(key, key.replace(" ", "_"))
    return df.rename(columns=new_cols)


def _read_table(path: str) -> pd.DataFrame:
    suffix = Path(path).suffix.lower()
    if suffix in (".xlsx", ".xls"):
        return pd.read_excel(path, dtype="string")
    return pd.read_csv(path, dtype="string", sep=None, engine="python")


# ---------------------------
# conversão linha -> Produto
# ---------------------------

def linha_para_produto(rec: Dict[str, Optional[str]]) -> Produto:
    """Monta um `Produto` a partir de um registro já normalizado.

    O preço e o estoque usados são os do tipo de preço da linha; quando
    a coluna específica (``_kg``/``_litros``) está vazia, cai para as
    colunas genéricas ``preco``/``estoque``.
    """
    if not rec.get("id"):
        raise ValueError("id ausente")
    if not rec.get("nome"):
        raise ValueError("nome ausente")
    modo = ModoPreco.de_codigo(rec.get("tipo_preco") or ModoPreco.UNIDADE.value)

    if modo is ModoPreco.KG:
        preco = _first_nonnull(rec.get("preco_por_kg"), rec.get("preco"))
        estoque = _first_nonnull(rec.get("estoque_kg"), rec.get("estoque"))
    elif modo is ModoPreco.LITROS:
        preco = _first_nonnull(rec.get("preco_por_litros"), rec.get("preco"))
        estoque = _first_nonnull(rec.get("estoque_litros"), rec.get("estoque"))
    else:
        preco = rec.get("preco")
        estoque = rec.get("estoque")
    if preco is None:
        raise ValueError("preço ausente")

    return Produto(
        id=rec["id"],
        nome=rec["nome"],
        modo_preco=modo,
        preco_unitario=preco,
        estoque_disponivel=estoque or 0,
        codigo_barras=rec.get("codigo_barras"),
        categoria=rec.get("categoria"),
        estoque_minimo=rec.get("estoque_minimo") or 0,
    )


# ---------------------------
# loaders públicos
# ---------------------------

CAMPOS = (
    "id", "nome", "tipo_preco", "preco", "preco_por_kg", "preco_por_litros",
    "estoque", "estoque_kg", "estoque_litros", "estoque_minimo",
    "codigo_barras", "categoria",
)


def carregar_catalogo(path: str) -> Dict[str, Any]:
    """Lê o catálogo e retorna ``{"arquivo", "produtos", "erros"}``.

    ``erros`` é uma lista de ``{"linha": n, "mensagem": str}`` (linha
    contada a partir de 2, como na planilha com cabeçalho).
    """
    log_file_operation("import", path)
    df = _normalize_columns(_read_table(path))
    produtos: List[Produto] = []
    erros: List[Dict[str, Any]] = []
    for idx, row in df.iterrows():
        rec = {campo: _safe_get(row, campo) for campo in CAMPOS}
        try:
            produtos.append(linha_para_produto(rec))
        except ValueError as e:
            erros.append({"linha": int(idx) + 2, "mensagem": str(e)})
    log_file_operation("import", path, rows_processed=len(produtos), erros=len(erros))
    if erros:
        log_system_event("catalogo_linhas_invalidas", {"arquivo": path, "erros": erros}, level="warning")
    return {"arquivo": path, "produtos": produtos, "erros": erros}


def carregar_produtos(path: str) -> List[Produto]:
    """Atalho: apenas a lista de produtos válidos do catálogo."""
    return carregar_catalogo(path)["produtos"]
