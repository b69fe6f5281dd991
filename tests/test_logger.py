import pytest
from typer.testing import CliRunner

from kontrolla.adapters.cli import app
from kontrolla.infra import logger
from kontrolla.infra.sessao import salvar_carrinho
from kontrolla.usecases.checkout import Checkout


@pytest.fixture
def logs_ligados(monkeypatch, tmp_path):
    monkeypatch.setattr(logger, "ENABLE_LOGGING", True)
    monkeypatch.setattr(logger, "LOGS_DIR", tmp_path)
    for nome, arquivo in (("carrinho_logger", "carrinho.log"),
                          ("checkout_logger", "checkout.log"),
                          ("system_logger", "system.log")):
        atual = getattr(logger, nome)
        monkeypatch.setattr(logger, nome, logger.setup_logger(atual.name, str(tmp_path / arquivo)))
    yield tmp_path
    for nome in ("carrinho_logger", "checkout_logger", "system_logger"):
        for handler in getattr(logger, nome).handlers:
            handler.close()


def test_logs_desligados_nao_geram_resumo(monkeypatch):
    monkeypatch.setattr(logger, "ENABLE_LOGGING", False)
    monkeypatch.setattr(logger, "ENABLE_OUTPUT", False)
    assert logger.get_log_summary("checkout") is None


def test_checkout_registra_tentativas(logs_ligados, produtos, widget):
    checkout = Checkout(produtos)
    checkout.escanear(widget.codigo_barras)
    checkout.escanear("nao-existe")

    resumo = logger.get_log_summary("checkout", lines=10)
    assert "CHECKOUT_OK: adicionar" in resumo
    assert "CHECKOUT_REJEITADO: escanear - produto_nao_encontrado" in resumo
    assert "CARRINHO_ADICIONAR" in logger.get_log_summary("carrinho")


def test_resumo_de_log_inexistente(logs_ligados):
    assert logger.get_log_summary("system") == "Log system não encontrado."
    assert logger.get_log_summary("outro") == "Log outro não encontrado."


def test_cli_logs(logs_ligados):
    logger.log_system_event("teste", {"origem": "cli"})
    result = CliRunner().invoke(app, ["logs", "system", "--linhas", "5"])
    assert result.exit_code == 0, result.output
    assert "SYSTEM_EVENT: teste" in result.output


def test_print_system_obedece_flag(logs_ligados, monkeypatch, capsys, produtos, widget, tmp_path):
    checkout = Checkout(produtos)
    checkout.escanear(widget.codigo_barras)

    monkeypatch.setattr(logger, "ENABLE_OUTPUT", False)
    salvar_carrinho(checkout.carrinho, str(tmp_path / "venda.json"))
    assert capsys.readouterr().out == ""

    monkeypatch.setattr(logger, "ENABLE_OUTPUT", True)
    checkout.finalizar()
    assert ">> Venda entregue ao pagamento: 1 item(ns)" in capsys.readouterr().out
