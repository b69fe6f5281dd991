from decimal import Decimal

import pytest

from kontrolla.domain.carrinho import Carrinho
from kontrolla.domain.erros import TransicaoInvalidaError
from kontrolla.domain.fluxo_quantidade import EstadoEntrada
from kontrolla.domain.models import Cliente, Denominacao
from kontrolla.usecases.checkout import Checkout, EstadoCheckout


@pytest.fixture
def checkout(produtos):
    return Checkout(produtos)


# -----------------------
# leitura de código
# -----------------------

def test_escanear_produto_por_unidade(checkout, widget):
    r = checkout.escanear("7891234567890")
    assert r.estado is EstadoCheckout.ADICIONADO
    assert r.ok
    assert r.notificacao is None
    assert checkout.estado is EstadoCheckout.ESCANEANDO
    assert checkout.carrinho.item(widget.id).quantidade == 1
    assert checkout.totais.subtotal == Decimal("10")

    checkout.escanear("7891234567890")
    assert len(checkout.itens) == 1
    assert checkout.itens[0].quantidade == 2
    assert checkout.totais.total == Decimal("20")


def test_escanear_codigo_desconhecido(checkout):
    r = checkout.escanear("0000000000000")
    assert r.estado is EstadoCheckout.BLOQUEADO
    assert not r.ok
    assert r.notificacao.codigo == "produto_nao_encontrado"
    assert "0000000000000" in r.notificacao.mensagem
    assert checkout.estado is EstadoCheckout.ESCANEANDO
    assert checkout.carrinho.vazio


def test_escanear_sem_estoque(checkout):
    checkout.escanear("7891234567890")
    r = checkout.escanear("7891234567894")
    assert r.estado is EstadoCheckout.BLOQUEADO
    assert r.notificacao.tipo == "erro"
    assert r.notificacao.codigo == "sem_estoque"
    assert "Sold Out" in r.notificacao.mensagem
    assert [i.produto_id for i in checkout.itens] == ["1"]
    assert checkout.notificacoes[-1] == r.notificacao


def test_escanear_acima_do_estoque_avisa(checkout, widget):
    for _ in range(5):
        r = checkout.escanear(widget.codigo_barras)
        assert r.notificacao is None
    r = checkout.escanear(widget.codigo_barras)
    assert r.estado is EstadoCheckout.ADICIONADO
    assert r.ok
    assert r.notificacao.tipo == "aviso"
    assert r.notificacao.codigo == "estoque_excedido"
    assert checkout.carrinho.item(widget.id).quantidade == 6


def test_selecionar_produto_da_lista(checkout, widget):
    r = checkout.selecionar_produto("1")
    assert r.estado is EstadoCheckout.ADICIONADO
    r = checkout.selecionar_produto(widget)
    assert checkout.carrinho.item(widget.id).quantidade == 2
    r = checkout.selecionar_produto("999")
    assert r.notificacao.codigo == "produto_nao_encontrado"


def test_buscar(checkout, leite):
    assert checkout.buscar("granel") == [leite]


# -----------------------
# peso / volume
# -----------------------

def test_escanear_fracionado_abre_entrada(checkout, queijo):
    r = checkout.escanear(queijo.codigo_barras)
    assert r.estado is EstadoCheckout.AGUARDANDO_QUANTIDADE
    assert checkout.aguardando_quantidade
    assert checkout.fluxo.estado is EstadoEntrada.ABERTO_ADICAO
    assert checkout.fluxo.produto is queijo
    assert checkout.carrinho.vazio


def test_confirmar_peso_em_gramas(checkout, queijo):
    checkout.escanear(queijo.codigo_barras)
    checkout.informar_quantidade(500)
    r = checkout.confirmar_quantidade()
    assert r.estado is EstadoCheckout.ADICIONADO
    assert checkout.estado is EstadoCheckout.ESCANEANDO
    assert checkout.fluxo.estado is EstadoEntrada.FECHADO
    item = checkout.carrinho.item(queijo.id)
    assert item.quantidade == Decimal("0.5")
    assert item.total == Decimal("20")


def test_confirmar_volume_em_litros(checkout, leite):
    checkout.escanear(leite.codigo_barras)
    checkout.informar_quantidade("1,5", Denominacao.GRANDE)
    checkout.confirmar_quantidade()
    assert checkout.carrinho.item(leite.id).quantidade == Decimal("1.5")
    assert checkout.totais.subtotal == Decimal("9.75")


def test_quantidade_invalida_mantem_formulario(checkout, queijo):
    checkout.escanear(queijo.codigo_barras)
    r = checkout.informar_quantidade("abc")
    assert r.notificacao.codigo == "quantidade_invalida"
    assert checkout.aguardando_quantidade

    r = checkout.confirmar_quantidade()
    assert not r.ok
    assert checkout.aguardando_quantidade
    assert checkout.carrinho.vazio

    checkout.informar_quantidade(250)
    checkout.confirmar_quantidade()
    assert checkout.carrinho.item(queijo.id).quantidade == Decimal("0.25")


def test_cancelar_entrada(checkout, queijo):
    checkout.escanear(queijo.codigo_barras)
    checkout.informar_quantidade(300)
    r = checkout.cancelar_quantidade()
    assert r.estado is EstadoCheckout.ESCANEANDO
    assert not checkout.aguardando_quantidade
    assert checkout.fluxo.estado is EstadoEntrada.FECHADO
    assert checkout.carrinho.vazio


def test_fracionado_sem_estoque_bloqueia_antes_da_entrada(checkout, queijo_esgotado):
    r = checkout.escanear(queijo_esgotado.codigo_barras)
    assert r.estado is EstadoCheckout.BLOQUEADO
    assert r.notificacao.codigo == "sem_estoque"
    assert checkout.fluxo.estado is EstadoEntrada.FECHADO


def test_editar_linha_fracionada(checkout, queijo):
    checkout.escanear(queijo.codigo_barras)
    checkout.informar_quantidade(500)
    checkout.confirmar_quantidade()

    r = checkout.editar_item(queijo.id)
    assert r.estado is EstadoCheckout.AGUARDANDO_QUANTIDADE
    assert checkout.fluxo.estado is EstadoEntrada.ABERTO_EDICAO
    assert checkout.fluxo.valor == Decimal("500")

    checkout.informar_quantidade("1.2", "kg")
    checkout.confirmar_quantidade()
    assert len(checkout.itens) == 1
    assert checkout.carrinho.item(queijo.id).quantidade == Decimal("1.2")
    assert checkout.totais.subtotal == Decimal("48")


def test_cancelar_edicao_preserva_linha(checkout, queijo):
    checkout.escanear(queijo.codigo_barras)
    checkout.informar_quantidade(500)
    checkout.confirmar_quantidade()
    checkout.editar_item(queijo.id)
    checkout.informar_quantidade(900)
    checkout.cancelar_quantidade()
    assert checkout.carrinho.item(queijo.id).quantidade == Decimal("0.5")


def test_editar_linha_por_unidade_avisa(checkout, widget):
    checkout.escanear(widget.codigo_barras)
    r = checkout.editar_item(widget.id)
    assert r.notificacao.tipo == "aviso"
    assert checkout.estado is EstadoCheckout.ESCANEANDO


def test_editar_linha_inexistente(checkout):
    r = checkout.editar_item("2")
    assert r.notificacao.tipo == "erro"
    assert checkout.estado is EstadoCheckout.ESCANEANDO


def test_transicoes_invalidas(checkout, queijo):
    with pytest.raises(TransicaoInvalidaError):
        checkout.confirmar_quantidade()
    with pytest.raises(TransicaoInvalidaError):
        checkout.informar_quantidade(1)

    checkout.escanear(queijo.codigo_barras)
    with pytest.raises(TransicaoInvalidaError):
        checkout.escanear("7891234567890")
    with pytest.raises(TransicaoInvalidaError):
        checkout.finalizar()
    with pytest.raises(TransicaoInvalidaError):
        checkout.remover_item(queijo.id)


# -----------------------
# edição do carrinho
# -----------------------

def test_definir_quantidade_e_remover(checkout, widget):
    checkout.escanear(widget.codigo_barras)
    checkout.definir_quantidade(widget.id, 3)
    assert checkout.totais.subtotal == Decimal("30")
    checkout.definir_quantidade(widget.id, 0)
    assert checkout.carrinho.vazio

    checkout.escanear(widget.codigo_barras)
    checkout.remover_item(widget.id)
    assert checkout.carrinho.vazio


def test_desconto_invalido_vira_notificacao(checkout, widget):
    checkout.escanear(widget.codigo_barras)
    r = checkout.definir_desconto(150)
    assert r.notificacao.codigo == "desconto_invalido"
    assert checkout.carrinho.desconto_percentual == 0

    checkout.definir_desconto("12.5")
    assert checkout.totais.total == Decimal("8.75")


def test_limpar(checkout, widget):
    checkout.escanear(widget.codigo_barras)
    checkout.definir_cliente(Cliente("c1", "Maria"))
    checkout.limpar()
    assert checkout.carrinho.vazio
    assert checkout.carrinho.cliente is None


# -----------------------
# entrega ao pagamento
# -----------------------

def test_finalizar_carrinho_vazio(checkout):
    r = checkout.finalizar()
    assert r.handoff is None
    assert r.notificacao.codigo == "carrinho_vazio"


def test_finalizar_entrega_e_reinicia(checkout, widget, queijo):
    checkout.escanear(widget.codigo_barras)
    checkout.escanear(queijo.codigo_barras)
    checkout.informar_quantidade(500)
    checkout.confirmar_quantidade()
    checkout.definir_cliente(Cliente("c7", "Ana"))
    checkout.definir_desconto(10)
    checkout.definir_observacao("troco para 50")

    r = checkout.finalizar()
    h = r.handoff
    assert r.ok
    assert h["cliente_id"] == "c7"
    assert [i["produto_id"] for i in h["itens"]] == ["1", "2"]
    assert Decimal(h["total"]) == Decimal("27")
    assert h["observacao"] == "troco para 50"

    assert checkout.carrinho.vazio
    assert checkout.carrinho.cliente is None
    # o carrinho novo continua repassando fracionados para a entrada
    r = checkout.escanear(queijo.codigo_barras)
    assert r.estado is EstadoCheckout.AGUARDANDO_QUANTIDADE


def test_retomar_carrinho_salvo(produtos, widget):
    antigo = Carrinho()
    antigo.adicionar_item(widget)
    checkout = Checkout(produtos, antigo.para_dict())
    checkout.escanear(widget.codigo_barras)
    assert checkout.carrinho.item(widget.id).quantidade == 2


def test_atualizar_produtos_preserva_linhas(checkout, widget):
    checkout.escanear(widget.codigo_barras)
    checkout.atualizar_produtos([])
    assert checkout.carrinho.item(widget.id).preco_unitario == Decimal("10")
    r = checkout.escanear(widget.codigo_barras)
    assert r.notificacao.codigo == "produto_nao_encontrado"


def test_quantidade_gigante_no_formulario_vira_aviso(checkout, queijo):
    checkout.escanear(queijo.codigo_barras)
    r = checkout.informar_quantidade("100000000000000000000000", "kg")
    assert r.notificacao.codigo == "quantidade_invalida"
    assert checkout.aguardando_quantidade
    r = checkout.confirmar_quantidade()
    assert not r.ok
    assert checkout.carrinho.vazio


def test_quantidade_gigante_na_linha_vira_aviso(checkout, widget, leite):
    checkout.escanear(widget.codigo_barras)
    r = checkout.definir_quantidade(widget.id, "1e40")
    assert r.notificacao.codigo == "quantidade_invalida"
    assert checkout.carrinho.item(widget.id).quantidade == 1

    checkout.escanear(leite.codigo_barras)
    checkout.informar_quantidade(2, "l")
    checkout.confirmar_quantidade()
    r = checkout.definir_quantidade(leite.id, "1e30")
    assert r.notificacao.codigo == "quantidade_invalida"
    assert checkout.carrinho.item(leite.id).quantidade == Decimal("2")
