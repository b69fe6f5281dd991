# kontrolla/infra/sessao.py
"""
Venda em andamento salva em arquivo JSON.

Permite sair do checkout e voltar depois sem perder o carrinho. O
núcleo não depende deste módulo: ele só recebe um carrinho (ou o dict
de `Carrinho.para_dict`) no construtor do `Checkout`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from kontrolla.config import SESSAO_PATH
from kontrolla.domain.carrinho import Carrinho
from kontrolla.infra.logger import log_file_operation, print_system

VERSAO = 1


def salvar_carrinho(carrinho: Carrinho, path: str = SESSAO_PATH) -> str:
    """Grava o carrinho em ``path`` e retorna o caminho."""
    dados = {"versao": VERSAO, "carrinho": carrinho.para_dict()}
    destino = Path(path)
    destino.parent.mkdir(parents=True, exist_ok=True)
    destino.write_text(json.dumps(dados, ensure_ascii=False, indent=2), encoding="utf-8")
    log_file_operation("save", str(destino), rows_processed=len(carrinho))
    print_system(f">> Venda salva em {destino}.")
    return str(destino)


def carregar_carrinho(path: str = SESSAO_PATH) -> Optional[Carrinho]:
    """Lê o carrinho salvo; ``None`` quando não há venda em andamento."""
    origem = Path(path)
    if not origem.exists():
        return None
    dados = json.loads(origem.read_text(encoding="utf-8"))
    carrinho = Carrinho.de_dict(dados.get("carrinho") or {})
    log_file_operation("load", str(origem), rows_processed=len(carrinho))
    return carrinho


def descartar_carrinho(path: str = SESSAO_PATH) -> bool:
    """Remove a venda salva. Retorna ``False`` se não havia nenhuma."""
    origem = Path(path)
    if not origem.exists():
        return False
    origem.unlink()
    log_file_operation("discard", str(origem))
    return True
