# kontrolla/domain/models.py
"""
Modelos do domínio do checkout.

Observação importante:
- `Produto` e `Cliente` pertencem a colaboradores externos (catálogo e
  cadastro); o carrinho guarda apenas um retrato imutável deles.
- Quantidades e valores monetários são `Decimal`. Produtos por unidade
  usam `int` como quantidade.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Union

Quantidade = Union[int, Decimal]

CENTAVOS = Decimal("0.01")


class ModoPreco(str, Enum):
    """Semântica de quantidade de um produto."""
    UNIDADE = "unidade"
    KG = "kg"
    LITROS = "litros"

    @classmethod
    def de_codigo(cls, codigo: Any) -> "ModoPreco":
        """Interpreta o código vindo do catálogo (``unidade|kg|litros``).

        Também aceita os nomes ``unit``, ``weight`` e ``volume``.
        Códigos desconhecidos geram ``ValueError``.
        """
        if isinstance(codigo, cls):
            return codigo
        s = str(codigo or "").strip().lower()
        sinonimos = {
            "unidade": cls.UNIDADE, "un": cls.UNIDADE, "unit": cls.UNIDADE,
            "kg": cls.KG, "peso": cls.KG, "weight": cls.KG,
            "litros": cls.LITROS, "litro": cls.LITROS, "l": cls.LITROS, "volume": cls.LITROS,
        }
        try:
            return sinonimos[s]
        except KeyError:
            raise ValueError(f"tipo de preço desconhecido: {codigo!r}") from None

    @property
    def fracionado(self) -> bool:
        """Peso e volume passam pela entrada de quantidade; unidade não."""
        return self is not ModoPreco.UNIDADE


class Denominacao(str, Enum):
    """Unidade em que o operador digita a quantidade."""
    PEQUENA = "pequena"  # gramas / mililitros
    GRANDE = "grande"    # quilogramas / litros

    @classmethod
    def de_codigo(cls, codigo: Any) -> Optional["Denominacao"]:
        """Aceita o membro, o valor (``pequena|grande``) ou a unidade digitada."""
        if codigo is None or isinstance(codigo, cls):
            return codigo
        s = str(codigo).strip().lower()
        sinonimos = {
            "pequena": cls.PEQUENA, "small": cls.PEQUENA, "g": cls.PEQUENA, "ml": cls.PEQUENA,
            "grande": cls.GRANDE, "large": cls.GRANDE, "kg": cls.GRANDE, "l": cls.GRANDE,
        }
        try:
            return sinonimos[s]
        except KeyError:
            raise ValueError(f"denominação desconhecida: {codigo!r}") from None


def para_decimal(valor: Any) -> Decimal:
    """Converte números do catálogo/sessão para Decimal (aceita vírgula)."""
    if isinstance(valor, Decimal):
        return valor
    if isinstance(valor, bool):
        raise ValueError(f"valor numérico inválido: {valor!r}")
    if isinstance(valor, int):
        return Decimal(valor)
    try:
        return Decimal(str(valor).strip().replace(",", "."))
    except InvalidOperation:
        raise ValueError(f"valor numérico inválido: {valor!r}") from None


@dataclass(frozen=True)
class Produto:
    """Retrato de um produto do catálogo no momento em que foi lido."""
    id: str
    nome: str
    modo_preco: ModoPreco
    preco_unitario: Decimal           # por item, por kg ou por litro
    estoque_disponivel: Decimal       # já resolvido para o modo de preço
    codigo_barras: Optional[str] = None
    categoria: Optional[str] = None
    estoque_minimo: Decimal = Decimal("0")

    def __post_init__(self):
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "modo_preco", ModoPreco.de_codigo(self.modo_preco))
        object.__setattr__(self, "preco_unitario", para_decimal(self.preco_unitario).quantize(CENTAVOS))
        object.__setattr__(self, "estoque_disponivel", para_decimal(self.estoque_disponivel))
        object.__setattr__(self, "estoque_minimo", para_decimal(self.estoque_minimo))

    def para_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "modo_preco": self.modo_preco.value,
            "preco_unitario": str(self.preco_unitario),
            "estoque_disponivel": str(self.estoque_disponivel),
            "codigo_barras": self.codigo_barras,
            "categoria": self.categoria,
            "estoque_minimo": str(self.estoque_minimo),
        }

    @classmethod
    def de_dict(cls, dados: dict) -> "Produto":
        return cls(
            id=dados["id"],
            nome=dados["nome"],
            modo_preco=dados["modo_preco"],
            preco_unitario=dados["preco_unitario"],
            estoque_disponivel=dados.get("estoque_disponivel", 0),
            codigo_barras=dados.get("codigo_barras"),
            categoria=dados.get("categoria"),
            estoque_minimo=dados.get("estoque_minimo") or 0,
        )


@dataclass(frozen=True)
class Cliente:
    """Referência ao cliente da venda."""
    id: str
    nome: str
    documento: Optional[str] = None  # CPF/CNPJ


@dataclass
class ItemCarrinho:
    """Uma linha do carrinho. O total nunca é armazenado."""
    produto: Produto
    quantidade: Quantidade
    preco_unitario: Decimal = field(default=None)

    def __post_init__(self):
        if self.preco_unitario is None:
            self.preco_unitario = self.produto.preco_unitario

    @property
    def produto_id(self) -> str:
        return self.produto.id

    @property
    def total(self) -> Decimal:
        return self.quantidade * self.preco_unitario
