# kontrolla/config.py
"""
Configurações globais e valores padrão do checkout (PDV).
"""

import os
from dataclasses import dataclass


# Catálogo de produtos usado pela CLI quando nenhum arquivo é informado
CATALOGO_PATH = os.environ.get("KONTROLLA_CATALOGO", os.path.join(os.getcwd(), "produtos.csv"))

# Venda em andamento salva entre execuções (substitui o estado de navegação)
SESSAO_PATH = os.environ.get("KONTROLLA_SESSAO", os.path.join(os.getcwd(), "venda_em_andamento.json"))


@dataclass
class DefaultConfig:
    """Valores padrão para o carrinho."""
    casas_quantidade: int = 6  # kg/L guardados com resolução de mg/µL
    fator_denominacao: int = 1000  # g -> kg, mL -> L
    desconto_maximo: float = 100.0  # percentual


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
