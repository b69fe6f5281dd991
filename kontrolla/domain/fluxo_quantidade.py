# kontrolla/domain/fluxo_quantidade.py
"""
Entrada de quantidade para produtos por peso ou volume.

Máquina de estados do formulário (modal) em que o operador escolhe a
denominação (g/kg ou mL/L) e digita o valor:

    FECHADO --abrir_adicao--> ABERTO_ADICAO --confirmar--> CONFIRMADO --fechar--> FECHADO
    FECHADO --abrir_edicao--> ABERTO_EDICAO --confirmar--> CONFIRMADO --fechar--> FECHADO
    ABERTO_* --cancelar--> CANCELADO --fechar--> FECHADO

Apenas uma entrada fica aberta por vez. Eventos fora da tabela geram
``TransicaoInvalidaError``. Um valor inválido não gera erro: ``erro``
descreve o problema e ``confirmar()`` não faz nada até ele ser corrigido.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, NamedTuple, Optional

from kontrolla.domain.conversao import (
    denominacao_padrao,
    para_quantidade_exibicao,
    resolver_quantidade_canonica,
)
from kontrolla.domain.erros import QuantidadeInvalidaError, TransicaoInvalidaError
from kontrolla.domain.models import Denominacao, ItemCarrinho, Produto


class EstadoEntrada(str, Enum):
    FECHADO = "fechado"
    ABERTO_ADICAO = "aberto_adicao"
    ABERTO_EDICAO = "aberto_edicao"
    CONFIRMADO = "confirmado"
    CANCELADO = "cancelado"


class EventoEntrada(str, Enum):
    ABRIR_ADICAO = "abrir_adicao"
    ABRIR_EDICAO = "abrir_edicao"
    EDITAR_CAMPOS = "editar_campos"
    CONFIRMAR = "confirmar"
    CANCELAR = "cancelar"
    FECHAR = "fechar"


_E = EstadoEntrada
_EV = EventoEntrada

TRANSICOES = {
    (_E.FECHADO, _EV.ABRIR_ADICAO): _E.ABERTO_ADICAO,
    (_E.FECHADO, _EV.ABRIR_EDICAO): _E.ABERTO_EDICAO,
    (_E.ABERTO_ADICAO, _EV.EDITAR_CAMPOS): _E.ABERTO_ADICAO,
    (_E.ABERTO_EDICAO, _EV.EDITAR_CAMPOS): _E.ABERTO_EDICAO,
    (_E.ABERTO_ADICAO, _EV.CONFIRMAR): _E.CONFIRMADO,
    (_E.ABERTO_EDICAO, _EV.CONFIRMAR): _E.CONFIRMADO,
    (_E.ABERTO_ADICAO, _EV.CANCELAR): _E.CANCELADO,
    (_E.ABERTO_EDICAO, _EV.CANCELAR): _E.CANCELADO,
    (_E.CONFIRMADO, _EV.FECHAR): _E.FECHADO,
    (_E.CANCELADO, _EV.FECHAR): _E.FECHADO,
}


class EntradaConfirmada(NamedTuple):
    produto: Produto
    quantidade: Decimal
    edicao: bool


class FluxoQuantidade:
    """Formulário de quantidade para produtos fracionados (kg/litros)."""

    def __init__(self):
        self.estado = EstadoEntrada.FECHADO
        self.produto: Optional[Produto] = None
        self.item_original: Optional[ItemCarrinho] = None
        self.denominacao: Optional[Denominacao] = None
        self.valor: Any = None
        self.erro: Optional[str] = None
        self.resultado: Optional[EntradaConfirmada] = None

    # -----------------------
    # consultas
    # -----------------------

    @property
    def aberto(self) -> bool:
        return self.estado in (EstadoEntrada.ABERTO_ADICAO, EstadoEntrada.ABERTO_EDICAO)

    @property
    def edicao(self) -> bool:
        return self.estado is EstadoEntrada.ABERTO_EDICAO or bool(self.resultado and self.resultado.edicao)

    @property
    def quantidade_canonica(self) -> Optional[Decimal]:
        """Quantidade canônica do valor atual, ou ``None`` se inválido."""
        if not self.aberto:
            return None
        try:
            return resolver_quantidade_canonica(self.produto.modo_preco, self.valor, self.denominacao)
        except QuantidadeInvalidaError:
            return None

    @property
    def pode_confirmar(self) -> bool:
        return self.quantidade_canonica is not None

    # -----------------------
    # transições
    # -----------------------

    def _transitar(self, evento: EventoEntrada) -> None:
        try:
            self.estado = TRANSICOES[(self.estado, evento)]
        except KeyError:
            raise TransicaoInvalidaError(self.estado, evento) from None

    def _checar_fracionado(self, produto: Produto, evento: EventoEntrada) -> None:
        if not produto.modo_preco.fracionado:
            raise TransicaoInvalidaError(self.estado, f"{evento.value}({produto.modo_preco.value})")

    def abrir_adicao(self, produto: Produto) -> None:
        """Abre o formulário para adicionar ``produto`` ao carrinho."""
        self._checar_fracionado(produto, EventoEntrada.ABRIR_ADICAO)
        self._transitar(EventoEntrada.ABRIR_ADICAO)
        self.produto = produto
        self.item_original = None
        self.denominacao = denominacao_padrao(produto.modo_preco)
        self.valor = None
        self.erro = None
        self.resultado = None

    def abrir_edicao(self, produto: Produto, item: ItemCarrinho) -> None:
        """Abre o formulário já preenchido com a quantidade da linha, em g/mL."""
        self._checar_fracionado(produto, EventoEntrada.ABRIR_EDICAO)
        self._transitar(EventoEntrada.ABRIR_EDICAO)
        self.produto = produto
        self.item_original = item
        self.denominacao = denominacao_padrao(produto.modo_preco)
        self.valor = para_quantidade_exibicao(produto.modo_preco, item.quantidade, self.denominacao)
        self.erro = None
        self.resultado = None

    def definir_denominacao(self, denominacao) -> None:
        self._transitar(EventoEntrada.EDITAR_CAMPOS)
        self.denominacao = Denominacao.de_codigo(denominacao)
        self._validar()

    def definir_valor(self, valor: Any) -> None:
        self._transitar(EventoEntrada.EDITAR_CAMPOS)
        self.valor = valor
        self._validar()

    def _validar(self) -> None:
        try:
            resolver_quantidade_canonica(self.produto.modo_preco, self.valor, self.denominacao)
            self.erro = None
        except QuantidadeInvalidaError as e:
            self.erro = e.mensagem

    def confirmar(self) -> Optional[EntradaConfirmada]:
        """Confirma a entrada.

        Returns:
            ``EntradaConfirmada`` quando o valor é válido; ``None`` (sem
            mudar de estado) quando não é.
        """
        if not self.aberto:
            raise TransicaoInvalidaError(self.estado, EventoEntrada.CONFIRMAR)
        quantidade = self.quantidade_canonica
        if quantidade is None:
            self._validar()
            return None
        edicao = self.estado is EstadoEntrada.ABERTO_EDICAO
        self._transitar(EventoEntrada.CONFIRMAR)
        self.resultado = EntradaConfirmada(self.produto, quantidade, edicao)
        return self.resultado

    def cancelar(self) -> None:
        """Descarta a entrada; a linha original (se edição) fica intacta."""
        self._transitar(EventoEntrada.CANCELAR)
        self.resultado = None

    def fechar(self) -> None:
        self._transitar(EventoEntrada.FECHAR)
        self.produto = None
        self.item_original = None
        self.denominacao = None
        self.valor = None
        self.erro = None
