# kontrolla/adapters/cli.py
"""
CLI do PDV (Typer).

Comandos principais:
- catalogo [arquivo]          -> lista os produtos do catálogo com status de estoque
- buscar <termo> [arquivo]    -> filtra o catálogo por nome, código ou categoria
- venda                       -> abre o caixa interativo (TUI), retomando a venda salva
- carrinho show               -> mostra a venda salva com os totais
- carrinho handoff            -> imprime o JSON que seria entregue ao pagamento
- carrinho limpar             -> descarta a venda salva
- logs [tipo]                 -> últimas linhas do log (carrinho, checkout, system)
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from kontrolla.adapters.tui import main_tui, tabela_carrinho, tabela_produtos
from kontrolla.config import CATALOGO_PATH, SESSAO_PATH
from kontrolla.domain.busca import filtrar_produtos
from kontrolla.domain.erros import CheckoutError
from kontrolla.infra.catalogo import carregar_catalogo
from kontrolla.infra.logger import get_log_summary
from kontrolla.infra.sessao import carregar_carrinho, descartar_carrinho


app = typer.Typer(help="KontrollaPro — PDV")
console = Console()


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2))


def _carregar(path: str) -> Dict[str, Any]:
    try:
        info = carregar_catalogo(path)
    except FileNotFoundError:
        typer.echo(f"Catálogo não encontrado: {path}", err=True)
        raise typer.Exit(code=1)
    if info["erros"]:
        erro_table = Table(title="Linhas ignoradas no catálogo")
        erro_table.add_column("Linha")
        erro_table.add_column("Erro")
        for erro in info["erros"]:
            erro_table.add_row(str(erro["linha"]), erro["mensagem"])
        Console(stderr=True).print(erro_table)
    return info


def _ler_sessao(sessao: str):
    try:
        return carregar_carrinho(sessao)
    except (ValueError, KeyError, TypeError, AttributeError, CheckoutError) as e:
        # JSONDecodeError é ValueError
        typer.echo(f"Venda salva inválida: {sessao} ({e})", err=True)
        raise typer.Exit(code=1)


def _produtos_json(produtos) -> List[Dict[str, Any]]:
    return [p.para_dict() for p in produtos]


# -----------------------
# catálogo
# -----------------------

@app.command("catalogo")
def cmd_catalogo(
    path: str = typer.Argument(CATALOGO_PATH, help="CSV/XLSX exportado do catálogo"),
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
):
    """Lista os produtos do catálogo com o status de estoque."""
    info = _carregar(path)
    if as_json:
        _print_json(_produtos_json(info["produtos"]))
        return
    console.print(tabela_produtos(info["produtos"], title=f"Catálogo ({len(info['produtos'])} produtos)"))


@app.command("buscar")
def cmd_buscar(
    termo: str = typer.Argument(..., help="Parte do nome, código de barras ou categoria"),
    path: str = typer.Argument(CATALOGO_PATH, help="CSV/XLSX exportado do catálogo"),
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
):
    """Filtra o catálogo."""
    produtos = filtrar_produtos(_carregar(path)["produtos"], termo)
    if as_json:
        _print_json(_produtos_json(produtos))
        return
    if not produtos:
        console.print(Panel("Nenhum produto encontrado", title=termo, border_style="yellow"))
        return
    console.print(tabela_produtos(produtos, title=f"Busca: {termo}"))


# -----------------------
# venda
# -----------------------

@app.command("venda")
def cmd_venda(
    catalogo: str = typer.Option(CATALOGO_PATH, "--catalogo", help="CSV/XLSX exportado do catálogo"),
    sessao: str = typer.Option(SESSAO_PATH, "--sessao", help="Arquivo da venda em andamento"),
):
    """Abre o caixa interativo. Uma venda salva em --sessao é retomada."""
    produtos = _carregar(catalogo)["produtos"]
    carrinho = _ler_sessao(sessao)
    if carrinho is not None:
        typer.echo(f">> Retomando venda salva com {len(carrinho)} item(ns).")
    try:
        main_tui(produtos, carrinho, sessao)
    except KeyboardInterrupt:
        typer.echo("\nSaindo do caixa...")
        raise typer.Exit(0)


carrinho_app = typer.Typer(help="Venda em andamento salva em arquivo.")
app.add_typer(carrinho_app, name="carrinho")


def _carrinho_salvo(sessao: str):
    carrinho = _ler_sessao(sessao)
    if carrinho is None:
        typer.echo("Nenhuma venda em andamento.")
        raise typer.Exit(code=1)
    return carrinho


@carrinho_app.command("show")
def cmd_carrinho_show(
    sessao: str = typer.Option(SESSAO_PATH, "--sessao", help="Arquivo da venda em andamento"),
):
    """Mostra a venda salva com os totais."""
    carrinho = _carrinho_salvo(sessao)
    console.print(tabela_carrinho(carrinho, title="Venda em andamento"))
    if carrinho.cliente:
        console.print(f"[dim]Cliente: {carrinho.cliente.nome} ({carrinho.cliente.id})[/dim]")
    if carrinho.observacao:
        console.print(f"[dim]Observação: {carrinho.observacao}[/dim]")


@carrinho_app.command("handoff")
def cmd_carrinho_handoff(
    sessao: str = typer.Option(SESSAO_PATH, "--sessao", help="Arquivo da venda em andamento"),
):
    """Imprime o JSON entregue à etapa de pagamento (sem finalizar)."""
    _print_json(_carrinho_salvo(sessao).para_handoff())


@carrinho_app.command("limpar")
def cmd_carrinho_limpar(
    sessao: str = typer.Option(SESSAO_PATH, "--sessao", help="Arquivo da venda em andamento"),
):
    """Descarta a venda salva."""
    if descartar_carrinho(sessao):
        typer.echo(">> Venda descartada.")
    else:
        typer.echo("Nenhuma venda em andamento.")


# -----------------------
# logs
# -----------------------

@app.command("logs")
def cmd_logs(
    tipo: str = typer.Argument("checkout", help="carrinho | checkout | system"),
    linhas: int = typer.Option(50, "--linhas", help="Quantidade de linhas recentes"),
):
    """Mostra as últimas linhas de um log."""
    conteudo = get_log_summary(tipo, lines=linhas)
    if conteudo is None:
        typer.echo("Logging desligado (defina KONTROLLA_LOGGING=1).")
        return
    typer.echo(conteudo)


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
