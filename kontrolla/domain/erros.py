# kontrolla/domain/erros.py
"""
Erros do checkout.

Todos os erros de `CheckoutError` são avisos ao operador: o orquestrador
os captura, registra e devolve como notificação, e o carrinho permanece
no último estado válido. `TransicaoInvalidaError` indica uso incorreto
das máquinas de estado e não é tratado como aviso.
"""

from __future__ import annotations


class CheckoutError(Exception):
    """Base dos erros recuperáveis do checkout."""
    codigo = "checkout_error"

    def __init__(self, mensagem: str):
        super().__init__(mensagem)
        self.mensagem = mensagem


class ProdutoNaoEncontradoError(CheckoutError):
    """Código lido/digitado não corresponde a nenhum produto."""
    codigo = "produto_nao_encontrado"

    def __init__(self, codigo_lido: str):
        super().__init__(f"Produto não encontrado: {codigo_lido}")
        self.codigo_lido = codigo_lido


class SemEstoqueError(CheckoutError):
    """Produto sem estoque disponível não pode ser adicionado."""
    codigo = "sem_estoque"

    def __init__(self, produto):
        super().__init__(f"Produto sem estoque: {produto.nome}")
        self.produto = produto


class QuantidadeInvalidaError(CheckoutError):
    """Quantidade não numérica, zero ou negativa."""
    codigo = "quantidade_invalida"


class DescontoInvalidoError(CheckoutError):
    """Percentual de desconto fora de 0–100."""
    codigo = "desconto_invalido"


class CarrinhoVazioError(CheckoutError):
    """Tentativa de finalizar uma venda sem itens."""
    codigo = "carrinho_vazio"

    def __init__(self):
        super().__init__("Adicione pelo menos um produto antes de finalizar a venda.")


class TransicaoInvalidaError(Exception):
    """Evento não permitido no estado atual de uma máquina de estados."""

    def __init__(self, estado, evento):
        super().__init__(f"Transição inválida: {evento} no estado {estado}")
        self.estado = estado
        self.evento = evento
