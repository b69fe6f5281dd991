# kontrolla/usecases/checkout.py
"""
UC: Checkout do PDV (montagem do carrinho até a entrega ao pagamento).

Liga leitura/busca de produto, política de estoque, entrada de
quantidade (peso/volume) e carrinho:

    código lido -> busca -> estoque -> (entrada de quantidade) -> carrinho -> totais

Máquina de estados de cada tentativa:

    ESCANEANDO -> RESOLVIDO -> BLOQUEADO | AGUARDANDO_QUANTIDADE | ADICIONADO

BLOQUEADO e ADICIONADO voltam imediatamente para ESCANEANDO, então o
campo de leitura está sempre pronto para o próximo código.
AGUARDANDO_QUANTIDADE espera a confirmação ou o cancelamento da entrada.

Erros de `CheckoutError` são tratados aqui: viram `Notificacao`, são
registrados no log e o carrinho permanece no último estado válido.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from kontrolla.domain.busca import buscar_por_codigo, buscar_por_id, filtrar_produtos
from kontrolla.domain.carrinho import Carrinho
from kontrolla.domain.erros import (
    CarrinhoVazioError,
    CheckoutError,
    ProdutoNaoEncontradoError,
    QuantidadeInvalidaError,
    TransicaoInvalidaError,
)
from kontrolla.domain.fluxo_quantidade import FluxoQuantidade
from kontrolla.domain.models import Cliente, ItemCarrinho, Produto
from kontrolla.domain.politicas import excede_estoque
from kontrolla.domain.precos import Totais
from kontrolla.infra.logger import log_carrinho, log_checkout, print_system


class EstadoCheckout(str, Enum):
    ESCANEANDO = "escaneando"
    RESOLVIDO = "resolvido"
    BLOQUEADO = "bloqueado"
    AGUARDANDO_QUANTIDADE = "aguardando_quantidade"
    ADICIONADO = "adicionado"


class EventoCheckout(str, Enum):
    RESOLVER = "resolver"
    BLOQUEAR = "bloquear"
    AGUARDAR = "aguardar"
    ADICIONAR = "adicionar"
    EDITAR = "editar"
    CANCELAR = "cancelar"
    PRONTO = "pronto"


_S = EstadoCheckout
_EV = EventoCheckout

TRANSICOES = {
    (_S.ESCANEANDO, _EV.RESOLVER): _S.RESOLVIDO,
    (_S.ESCANEANDO, _EV.BLOQUEAR): _S.BLOQUEADO,
    (_S.ESCANEANDO, _EV.EDITAR): _S.AGUARDANDO_QUANTIDADE,
    (_S.RESOLVIDO, _EV.BLOQUEAR): _S.BLOQUEADO,
    (_S.RESOLVIDO, _EV.AGUARDAR): _S.AGUARDANDO_QUANTIDADE,
    (_S.RESOLVIDO, _EV.ADICIONAR): _S.ADICIONADO,
    (_S.AGUARDANDO_QUANTIDADE, _EV.ADICIONAR): _S.ADICIONADO,
    (_S.AGUARDANDO_QUANTIDADE, _EV.BLOQUEAR): _S.BLOQUEADO,
    (_S.AGUARDANDO_QUANTIDADE, _EV.CANCELAR): _S.ESCANEANDO,
    (_S.BLOQUEADO, _EV.PRONTO): _S.ESCANEANDO,
    (_S.ADICIONADO, _EV.PRONTO): _S.ESCANEANDO,
}


@dataclass(frozen=True)
class Notificacao:
    """Aviso exibido ao operador (toast / mensagem no formulário)."""
    tipo: str  # 'erro' | 'aviso' | 'sucesso'
    codigo: str
    mensagem: str


@dataclass
class Resultado:
    """Desfecho de uma ação do operador."""
    estado: EstadoCheckout
    produto: Optional[Produto] = None
    notificacao: Optional[Notificacao] = None
    handoff: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.notificacao is None or self.notificacao.tipo != "erro"


class Checkout:
    """Sessão de checkout: dona do carrinho até a entrega ao pagamento."""

    def __init__(self, produtos: Iterable[Produto],
                 carrinho: Union[Carrinho, Dict[str, Any], None] = None):
        self.produtos: List[Produto] = list(produtos)
        if isinstance(carrinho, dict):
            carrinho = Carrinho.de_dict(carrinho)
        self.carrinho: Carrinho = carrinho if carrinho is not None else Carrinho()
        self.carrinho.ao_solicitar_quantidade = self._abrir_entrada
        self.fluxo = FluxoQuantidade()
        self.estado = EstadoCheckout.ESCANEANDO
        self.notificacoes: List[Notificacao] = []

    # -----------------------
    # consultas
    # -----------------------

    @property
    def itens(self) -> List[ItemCarrinho]:
        return self.carrinho.itens

    @property
    def totais(self) -> Totais:
        return self.carrinho.totais

    @property
    def aguardando_quantidade(self) -> bool:
        return self.estado is EstadoCheckout.AGUARDANDO_QUANTIDADE

    def buscar(self, termo: Optional[str]) -> List[Produto]:
        """Filtra a lista atual do catálogo (nome, código ou categoria)."""
        return filtrar_produtos(self.produtos, termo)

    def atualizar_produtos(self, produtos: Iterable[Produto]) -> None:
        """Recebe a lista nova do catálogo. Linhas já no carrinho não mudam."""
        self.produtos = list(produtos)

    # -----------------------
    # máquina de estados
    # -----------------------

    def _transitar(self, evento: EventoCheckout) -> EstadoCheckout:
        try:
            self.estado = TRANSICOES[(self.estado, evento)]
        except KeyError:
            raise TransicaoInvalidaError(self.estado, evento) from None
        return self.estado

    def _exigir_escaneando(self, acao: str) -> None:
        if self.estado is not EstadoCheckout.ESCANEANDO:
            raise TransicaoInvalidaError(self.estado, acao)

    def _notificar(self, tipo: str, codigo: str, mensagem: str) -> Notificacao:
        n = Notificacao(tipo, codigo, mensagem)
        self.notificacoes.append(n)
        return n

    def _bloquear(self, erro: CheckoutError, produto: Optional[Produto] = None, evento: str = "") -> Resultado:
        """Rejeita a tentativa e volta para ESCANEANDO."""
        self._transitar(EventoCheckout.BLOQUEAR)
        n = self._notificar("erro", erro.codigo, erro.mensagem)
        log_checkout(evento, {"produto_id": produto.id if produto else None}, error=erro.codigo)
        self._transitar(EventoCheckout.PRONTO)
        return Resultado(EstadoCheckout.BLOQUEADO, produto, n)

    def _adicionado(self, produto: Produto, evento: str) -> Resultado:
        self._transitar(EventoCheckout.ADICIONAR)
        item = self.carrinho.item(produto.id)
        log_carrinho(evento, produto.id, item.quantidade if item else None)
        log_checkout(evento, {"produto_id": produto.id})
        n = None
        if item is not None and excede_estoque(produto, item.quantidade):
            n = self._notificar(
                "aviso", "estoque_excedido",
                f"Quantidade de {produto.nome} acima do estoque disponível ({produto.estoque_disponivel}).",
            )
        self._transitar(EventoCheckout.PRONTO)
        return Resultado(EstadoCheckout.ADICIONADO, produto, n)

    def _abrir_entrada(self, produto: Produto) -> None:
        self.fluxo.abrir_adicao(produto)

    # -----------------------
    # leitura / seleção
    # -----------------------

    def escanear(self, codigo: str) -> Resultado:
        """Trata um código lido pelo leitor ou digitado no campo de código."""
        self._exigir_escaneando("escanear")
        produto = buscar_por_codigo(self.produtos, codigo)
        if produto is None:
            return self._bloquear(ProdutoNaoEncontradoError((codigo or "").strip()), evento="escanear")
        return self._tentar_adicionar(produto, "escanear")

    def selecionar_produto(self, produto_id) -> Resultado:
        """Trata o clique em um produto da lista de busca."""
        self._exigir_escaneando("selecionar")
        produto = produto_id if isinstance(produto_id, Produto) else buscar_por_id(self.produtos, produto_id)
        if produto is None:
            return self._bloquear(ProdutoNaoEncontradoError(str(produto_id)), evento="selecionar")
        return self._tentar_adicionar(produto, "selecionar")

    def _tentar_adicionar(self, produto: Produto, evento: str) -> Resultado:
        self._transitar(EventoCheckout.RESOLVER)
        try:
            adicionado = self.carrinho.adicionar_item(produto)
        except CheckoutError as e:
            return self._bloquear(e, produto, evento)
        if not adicionado:
            self._transitar(EventoCheckout.AGUARDAR)
            log_checkout(evento, {"produto_id": produto.id, "aguardando": "quantidade"})
            return Resultado(EstadoCheckout.AGUARDANDO_QUANTIDADE, produto)
        return self._adicionado(produto, "adicionar")

    # -----------------------
    # entrada de quantidade (peso/volume)
    # -----------------------

    def editar_item(self, produto_id) -> Resultado:
        """Abre a edição de quantidade de uma linha por peso/volume."""
        self._exigir_escaneando("editar")
        item = self.carrinho.item(produto_id)
        if item is None:
            n = self._notificar("erro", ProdutoNaoEncontradoError.codigo, f"Item não está no carrinho: {produto_id}")
            return Resultado(self.estado, None, n)
        if not item.produto.modo_preco.fracionado:
            n = self._notificar("aviso", "edicao_por_unidade", "Altere a quantidade diretamente na linha do carrinho.")
            return Resultado(self.estado, item.produto, n)
        self.fluxo.abrir_edicao(item.produto, item)
        self._transitar(EventoCheckout.EDITAR)
        log_checkout("editar", {"produto_id": item.produto_id})
        return Resultado(self.estado, item.produto)

    def informar_quantidade(self, valor: Any, denominacao=None) -> Resultado:
        """Atualiza os campos do formulário de quantidade.

        Um valor inválido gera uma notificação de erro inline, e a
        confirmação continua bloqueada.
        """
        if not self.aguardando_quantidade:
            raise TransicaoInvalidaError(self.estado, "informar_quantidade")
        if denominacao is not None:
            self.fluxo.definir_denominacao(denominacao)
        self.fluxo.definir_valor(valor)
        n = None
        if self.fluxo.erro:
            n = Notificacao("erro", QuantidadeInvalidaError.codigo, self.fluxo.erro)
        return Resultado(self.estado, self.fluxo.produto, n)

    def confirmar_quantidade(self) -> Resultado:
        if not self.aguardando_quantidade:
            raise TransicaoInvalidaError(self.estado, "confirmar_quantidade")
        entrada = self.fluxo.confirmar()
        if entrada is None:
            n = self._notificar("erro", QuantidadeInvalidaError.codigo, self.fluxo.erro or "Quantidade inválida")
            return Resultado(self.estado, self.fluxo.produto, n)
        self.fluxo.fechar()
        try:
            self.carrinho.aplicar_quantidade_fracionada(entrada.produto, entrada.quantidade, entrada.edicao)
        except CheckoutError as e:
            return self._bloquear(e, entrada.produto, "confirmar_quantidade")
        return self._adicionado(entrada.produto, "editar_fracionado" if entrada.edicao else "adicionar_fracionado")

    def cancelar_quantidade(self) -> Resultado:
        """Descarta a entrada em andamento sem tocar no carrinho."""
        produto = self.fluxo.produto
        self.fluxo.cancelar()
        self.fluxo.fechar()
        self._transitar(EventoCheckout.CANCELAR)
        log_checkout("cancelar_quantidade", {"produto_id": produto.id if produto else None})
        return Resultado(self.estado, produto)

    # -----------------------
    # edição do carrinho
    # -----------------------

    def _mutar(self, acao: str, produto_id, fn, *args) -> Resultado:
        self._exigir_escaneando(acao)
        try:
            fn(*args)
        except CheckoutError as e:
            n = self._notificar("erro", e.codigo, e.mensagem)
            log_checkout(acao, {"produto_id": produto_id}, error=e.codigo)
            return Resultado(self.estado, None, n)
        item = self.carrinho.item(produto_id) if produto_id is not None else None
        log_carrinho(acao, produto_id, item.quantidade if item else None)
        return Resultado(self.estado, item.produto if item else None)

    def definir_quantidade(self, produto_id, quantidade: Any) -> Resultado:
        """Quantidade digitada na linha do carrinho (<= 0 remove a linha)."""
        return self._mutar("definir_quantidade", produto_id, self.carrinho.definir_quantidade, produto_id, quantidade)

    def remover_item(self, produto_id) -> Resultado:
        return self._mutar("remover", produto_id, self.carrinho.remover_item, produto_id)

    def definir_desconto(self, percentual: Any) -> Resultado:
        return self._mutar("definir_desconto", None, self.carrinho.definir_desconto, percentual)

    def definir_cliente(self, cliente: Optional[Cliente]) -> Resultado:
        return self._mutar("definir_cliente", None, self.carrinho.definir_cliente, cliente)

    def definir_observacao(self, texto: Optional[str]) -> Resultado:
        return self._mutar("definir_observacao", None, self.carrinho.definir_observacao, texto)

    def limpar(self) -> Resultado:
        """Abandona a venda em andamento."""
        return self._mutar("limpar", None, self.carrinho.limpar)

    # -----------------------
    # entrega ao pagamento
    # -----------------------

    def finalizar(self) -> Resultado:
        """Entrega o carrinho à etapa de pagamento e inicia um carrinho novo."""
        self._exigir_escaneando("finalizar")
        if self.carrinho.vazio:
            e = CarrinhoVazioError()
            n = self._notificar("erro", e.codigo, e.mensagem)
            log_checkout("finalizar", {}, error=e.codigo)
            return Resultado(self.estado, None, n)
        handoff = self.carrinho.para_handoff()
        log_checkout("finalizar", {"itens": len(handoff["itens"]), "total": handoff["total"]})
        print_system(f">> Venda entregue ao pagamento: {len(handoff['itens'])} item(ns), total {handoff['total']}.")
        self.carrinho = Carrinho(ao_solicitar_quantidade=self._abrir_entrada)
        return Resultado(self.estado, None, None, handoff)
