# kontrolla/domain/carrinho.py
"""
Carrinho do PDV.

O `Carrinho` guarda as linhas em ordem de inclusão, uma por produto,
além do cliente, do percentual de desconto e da observação da venda.
Toda operação que muda o carrinho recalcula os totais antes de
retornar, e nenhuma deixa uma linha com quantidade <= 0.

Produtos por peso/volume não são adicionados diretamente:
`adicionar_item` repassa o produto para `ao_solicitar_quantidade`
(normalmente o fluxo de entrada de quantidade) e a linha só é criada
por `aplicar_quantidade_fracionada` depois da confirmação.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from kontrolla.config import DEFAULTS
from kontrolla.domain.conversao import arredondar_unidades, quantizar
from kontrolla.domain.erros import DescontoInvalidoError, QuantidadeInvalidaError, SemEstoqueError
from kontrolla.domain.models import (
    Cliente,
    ItemCarrinho,
    ModoPreco,
    Produto,
    Quantidade,
    para_decimal,
)
from kontrolla.domain.politicas import pode_adicionar
from kontrolla.domain.precos import Totais, calcular_totais


class Carrinho:
    """Linhas da venda em andamento e os totais derivados delas."""

    def __init__(
        self,
        cliente: Optional[Cliente] = None,
        desconto_percentual: Any = 0,
        observacao: Optional[str] = None,
        ao_solicitar_quantidade: Optional[Callable[[Produto], None]] = None,
    ):
        self._itens: Dict[str, ItemCarrinho] = {}
        self.cliente = cliente
        self.desconto_percentual = self._validar_desconto(desconto_percentual)
        self.observacao = observacao
        self.ao_solicitar_quantidade = ao_solicitar_quantidade
        self.totais: Totais = calcular_totais([], self.desconto_percentual)

    # -----------------------
    # consultas
    # -----------------------

    @property
    def itens(self) -> List[ItemCarrinho]:
        return list(self._itens.values())

    def item(self, produto_id) -> Optional[ItemCarrinho]:
        return self._itens.get(str(produto_id))

    @property
    def vazio(self) -> bool:
        return not self._itens

    def __len__(self) -> int:
        return len(self._itens)

    def __contains__(self, produto_id) -> bool:
        return str(produto_id) in self._itens

    def _recalcular(self) -> None:
        self.totais = calcular_totais(self._itens.values(), self.desconto_percentual)

    # -----------------------
    # mutações
    # -----------------------

    def adicionar_item(self, produto: Produto, quantidade: Quantidade = 1) -> bool:
        """Adiciona ``produto`` (leitura do código ou clique na lista).

        Returns:
            ``True`` se o carrinho mudou; ``False`` se o produto é
            fracionado e foi repassado para a entrada de quantidade.

        Raises:
            SemEstoqueError: produto sem estoque; o carrinho não muda.
            QuantidadeInvalidaError: quantidade não positiva.
        """
        if not pode_adicionar(produto, quantidade):
            raise SemEstoqueError(produto)

        if produto.modo_preco.fracionado:
            if self.ao_solicitar_quantidade is not None:
                self.ao_solicitar_quantidade(produto)
            return False

        unidades = self._unidades(quantidade)
        existente = self._itens.get(produto.id)
        if existente is not None:
            existente.quantidade += unidades
        else:
            self._itens[produto.id] = ItemCarrinho(produto, unidades)
        self._recalcular()
        return True

    def definir_quantidade(self, produto_id, nova_quantidade: Any) -> bool:
        """Define a quantidade de uma linha existente.

        Linhas por unidade são arredondadas para inteiro; linhas por peso
        ou volume recebem a quantidade canônica (kg/L). Valores <= 0
        removem a linha.

        Returns:
            ``True`` se o carrinho mudou; ``False`` se não há linha para
            ``produto_id``.
        """
        item = self._itens.get(str(produto_id))
        if item is None:
            return False
        try:
            valor = para_decimal(nova_quantidade)
        except ValueError:
            raise QuantidadeInvalidaError(f"Quantidade inválida: {nova_quantidade!r}") from None
        if not valor.is_finite():
            raise QuantidadeInvalidaError(f"Quantidade inválida: {nova_quantidade!r}")

        if item.produto.modo_preco is ModoPreco.UNIDADE:
            nova: Quantidade = arredondar_unidades(valor)
        else:
            nova = quantizar(valor)
        if nova <= 0:
            return self.remover_item(produto_id)

        if nova > item.quantidade and not pode_adicionar(item.produto, nova):
            raise SemEstoqueError(item.produto)
        item.quantidade = nova
        self._recalcular()
        return True

    def aplicar_quantidade_fracionada(self, produto: Produto, quantidade: Any, edicao: bool = False) -> None:
        """Aplica a quantidade confirmada na entrada de peso/volume.

        Na edição a quantidade da linha é substituída; na adição ela é
        somada à linha existente ou cria uma nova.
        """
        canonica = quantizar(para_decimal(quantidade))
        if canonica <= 0:
            raise QuantidadeInvalidaError(f"Quantidade deve ser maior que zero: {quantidade!r}")

        existente = self._itens.get(produto.id)
        if edicao and existente is not None:
            if canonica > existente.quantidade and not pode_adicionar(produto, canonica):
                raise SemEstoqueError(produto)
            existente.quantidade = canonica
        else:
            if not pode_adicionar(produto, canonica):
                raise SemEstoqueError(produto)
            if existente is not None:
                existente.quantidade = quantizar(existente.quantidade + canonica)
            else:
                self._itens[produto.id] = ItemCarrinho(produto, canonica)
        self._recalcular()

    def remover_item(self, produto_id) -> bool:
        removido = self._itens.pop(str(produto_id), None)
        if removido is None:
            return False
        self._recalcular()
        return True

    def limpar(self) -> None:
        """Abandona a venda: remove linhas, cliente, desconto e observação."""
        self._itens.clear()
        self.cliente = None
        self.desconto_percentual = Decimal("0")
        self.observacao = None
        self._recalcular()

    def definir_cliente(self, cliente: Optional[Cliente]) -> None:
        self.cliente = cliente

    @staticmethod
    def _validar_desconto(percentual: Any) -> Decimal:
        try:
            d = para_decimal(percentual if percentual not in (None, "") else 0)
        except ValueError:
            raise DescontoInvalidoError(f"Desconto inválido: {percentual!r}") from None
        if not d.is_finite() or d < 0 or d > Decimal(str(DEFAULTS.desconto_maximo)):
            raise DescontoInvalidoError(f"Desconto deve estar entre 0 e {DEFAULTS.desconto_maximo:g}%: {percentual!r}")
        return d

    def definir_desconto(self, percentual: Any) -> None:
        self.desconto_percentual = self._validar_desconto(percentual)
        self._recalcular()

    def definir_observacao(self, texto: Optional[str]) -> None:
        self.observacao = (texto or "").strip() or None

    @staticmethod
    def _unidades(quantidade: Any) -> int:
        try:
            valor = para_decimal(quantidade)
        except ValueError:
            raise QuantidadeInvalidaError(f"Quantidade inválida: {quantidade!r}") from None
        unidades = arredondar_unidades(valor) if valor.is_finite() else 0
        if unidades <= 0:
            raise QuantidadeInvalidaError(f"Quantidade deve ser pelo menos 1 unidade: {quantidade!r}")
        return unidades

    # -----------------------
    # serialização
    # -----------------------

    def para_dict(self) -> Dict[str, Any]:
        """Estado completo para retomar a venda (inclui o retrato dos produtos)."""
        return {
            "itens": [
                {
                    "produto": item.produto.para_dict(),
                    "quantidade": str(item.quantidade),
                    "preco_unitario": str(item.preco_unitario),
                }
                for item in self._itens.values()
            ],
            "cliente": (
                {"id": self.cliente.id, "nome": self.cliente.nome, "documento": self.cliente.documento}
                if self.cliente else None
            ),
            "desconto_percentual": str(self.desconto_percentual),
            "observacao": self.observacao,
        }

    @classmethod
    def de_dict(cls, dados: Dict[str, Any], **kwargs) -> "Carrinho":
        """Reconstrói um carrinho salvo por :meth:`para_dict`.

        Linhas com quantidade <= 0 são descartadas e linhas repetidas do
        mesmo produto são somadas.
        """
        cli = dados.get("cliente")
        carrinho = cls(
            cliente=Cliente(str(cli["id"]), cli["nome"], cli.get("documento")) if cli else None,
            desconto_percentual=dados.get("desconto_percentual", 0),
            observacao=dados.get("observacao"),
            **kwargs,
        )
        for linha in dados.get("itens", []):
            produto = Produto.de_dict(linha["produto"])
            valor = para_decimal(linha["quantidade"])
            if produto.modo_preco is ModoPreco.UNIDADE:
                quantidade: Quantidade = arredondar_unidades(valor)
            else:
                quantidade = quantizar(valor)
            if quantidade <= 0:
                continue
            existente = carrinho._itens.get(produto.id)
            if existente is not None:
                existente.quantidade += quantidade
                continue
            preco = linha.get("preco_unitario")
            carrinho._itens[produto.id] = ItemCarrinho(
                produto, quantidade, para_decimal(preco) if preco is not None else None
            )
        carrinho._recalcular()
        return carrinho

    def para_handoff(self) -> Dict[str, Any]:
        """Valor entregue à etapa de pagamento."""
        totais = self.totais
        return {
            "itens": [
                {
                    "produto_id": item.produto_id,
                    "quantidade": str(item.quantidade),
                    "preco_unitario": str(item.preco_unitario),
                    "total": str(item.total),
                }
                for item in self._itens.values()
            ],
            "cliente_id": self.cliente.id if self.cliente else None,
            "desconto_percentual": str(self.desconto_percentual),
            "subtotal": str(totais.subtotal),
            "valor_desconto": str(totais.valor_desconto),
            "total": str(totais.total),
            "observacao": self.observacao,
        }
