import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from kontrolla.adapters.cli import app
from kontrolla.domain.carrinho import Carrinho
from kontrolla.infra.sessao import salvar_carrinho

runner = CliRunner()

CSV = """id,nome,tipo_preco,preco,preco_por_kg,estoque,estoque_kg,codigo_barras,categoria
1,Widget,unidade,10,,5,,7891234567890,Acessorios
2,Queijo,kg,,40,,12.5,2000000000017,Frios
4,Sold Out,unidade,99.90,,0,,7891234567894,
"""


def _catalogo(tmp_path: Path) -> str:
    p = tmp_path / "produtos.csv"
    p.write_text(CSV, encoding="utf-8")
    return str(p)


def test_cli_catalogo_json(tmp_path: Path):
    result = runner.invoke(app, ["catalogo", _catalogo(tmp_path), "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert [p["id"] for p in data] == ["1", "2", "4"]
    assert data[1]["modo_preco"] == "kg"
    assert data[1]["estoque_disponivel"] == "12.5"


def test_cli_catalogo_tabela(tmp_path: Path):
    result = runner.invoke(app, ["catalogo", _catalogo(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "3 produtos" in result.output


def test_cli_catalogo_inexistente(tmp_path: Path):
    result = runner.invoke(app, ["catalogo", str(tmp_path / "nada.csv")])
    assert result.exit_code == 1


def test_cli_buscar(tmp_path: Path):
    path = _catalogo(tmp_path)
    result = runner.invoke(app, ["buscar", "frios", path, "--json"])
    assert result.exit_code == 0, result.output
    assert [p["nome"] for p in json.loads(result.stdout)] == ["Queijo"]

    result = runner.invoke(app, ["buscar", "inexistente", path])
    assert result.exit_code == 0
    assert "Nenhum produto encontrado" in result.output


def test_cli_carrinho_show_handoff_limpar(tmp_path: Path, widget):
    sessao = str(tmp_path / "venda.json")
    c = Carrinho()
    c.adicionar_item(widget)
    c.adicionar_item(widget)
    c.definir_desconto(10)
    salvar_carrinho(c, sessao)

    result = runner.invoke(app, ["carrinho", "show", "--sessao", sessao])
    assert result.exit_code == 0, result.output
    assert "Widget" in result.output

    result = runner.invoke(app, ["carrinho", "handoff", "--sessao", sessao])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["itens"][0]["produto_id"] == "1"
    assert data["total"] == str(c.totais.total)

    result = runner.invoke(app, ["carrinho", "limpar", "--sessao", sessao])
    assert result.exit_code == 0
    assert not Path(sessao).exists()


def test_cli_carrinho_sem_venda(tmp_path: Path):
    result = runner.invoke(app, ["carrinho", "show", "--sessao", str(tmp_path / "venda.json")])
    assert result.exit_code == 1
    assert "Nenhuma venda em andamento." in result.output


@pytest.mark.parametrize(
    "conteudo",
    [
        "{ isto não é json",
        json.dumps({"carrinho": {"itens": [{"quantidade": "2"}]}}),
        json.dumps({"carrinho": {"itens": [], "desconto_percentual": "150"}}),
        json.dumps(["lista"]),
    ],
)
def test_cli_venda_salva_corrompida(tmp_path: Path, conteudo):
    sessao = tmp_path / "venda.json"
    sessao.write_text(conteudo, encoding="utf-8")

    result = runner.invoke(app, ["carrinho", "show", "--sessao", str(sessao)])
    assert result.exit_code == 1
    assert "Venda salva inválida" in result.output

    result = runner.invoke(app, ["venda", "--catalogo", _catalogo(tmp_path), "--sessao", str(sessao)])
    assert result.exit_code == 1
    assert "Venda salva inválida" in result.output
