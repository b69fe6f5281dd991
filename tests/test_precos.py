from decimal import Decimal

from kontrolla.domain.models import ItemCarrinho
from kontrolla.domain.precos import calcular_totais


def test_totais_sem_itens():
    t = calcular_totais([])
    assert t.subtotal == 0
    assert t.valor_desconto == 0
    assert t.total == 0


def test_totais_com_desconto(widget, queijo, leite):
    itens = [
        ItemCarrinho(widget, 3),
        ItemCarrinho(queijo, Decimal("0.250")),
        ItemCarrinho(leite, Decimal("2")),
    ]
    t = calcular_totais(itens, "5")
    assert t.subtotal == Decimal("53")  # 30 + 10 + 13
    assert t.valor_desconto == Decimal("2.65")
    assert t.total == Decimal("50.35")


def test_preco_da_linha_e_retrato_do_produto(widget):
    item = ItemCarrinho(widget, 2, Decimal("9.50"))
    assert item.total == Decimal("19")
    assert calcular_totais([item]).subtotal == Decimal("19")
