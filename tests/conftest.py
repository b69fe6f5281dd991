import pytest

from kontrolla.domain.models import ModoPreco, Produto


@pytest.fixture
def widget():
    return Produto("1", "Widget", ModoPreco.UNIDADE, "10", "5", codigo_barras="7891234567890", categoria="Acessórios")


@pytest.fixture
def queijo():
    return Produto("2", "Cheese", ModoPreco.KG, "40", "12.5", codigo_barras="2000000000017", categoria="Frios")


@pytest.fixture
def leite():
    return Produto("3", "Leite a granel", ModoPreco.LITROS, "6.50", "30", codigo_barras="2000000000024")


@pytest.fixture
def esgotado():
    return Produto("4", "Sold Out", ModoPreco.UNIDADE, "99.90", "0", codigo_barras="7891234567894")


@pytest.fixture
def queijo_esgotado():
    return Produto("5", "Queijo esgotado", ModoPreco.KG, "55", "0", codigo_barras="2000000000031")


@pytest.fixture
def produtos(widget, queijo, leite, esgotado, queijo_esgotado):
    return [widget, queijo, leite, esgotado, queijo_esgotado]
