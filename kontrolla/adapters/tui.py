"""
TUI (Text User Interface) do checkout usando Rich.

Interface interativa baseada em menus para o caixa:
- Leitura de código de barras e busca de produtos
- Entrada de peso/volume (g/kg, mL/L) para produtos fracionados
- Edição de quantidades, remoção de itens, desconto e cliente
- Finalização (entrega ao pagamento) e venda salva para retomar depois
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Iterable, List, Optional

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich import box

from kontrolla.adapters.parsers import parse_quantidade_operador, unidade_compativel
from kontrolla.domain.carrinho import Carrinho
from kontrolla.domain.conversao import FATOR, para_quantidade_exibicao, rotulo_unidade
from kontrolla.domain.models import Cliente, Denominacao, ModoPreco, Produto
from kontrolla.domain.politicas import status_estoque
from kontrolla.infra.logger import log_system_event
from kontrolla.infra.sessao import descartar_carrinho, salvar_carrinho
from kontrolla.usecases.checkout import Checkout, EstadoCheckout, Notificacao, Resultado


# -----------------------
# formatação
# -----------------------

def formatar_moeda(valor) -> str:
    """R$ no padrão brasileiro: 1.234,56."""
    v = Decimal(valor).quantize(Decimal("0.01"))
    return "R$ " + f"{v:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def formatar_quantidade(modo: ModoPreco, quantidade) -> str:
    """Quantidade de uma linha: '2 un', '500 g', '1,2 kg'."""
    if modo is ModoPreco.UNIDADE:
        return f"{int(quantidade)} un"
    q = Decimal(quantidade)
    den = Denominacao.PEQUENA if q < 1 else Denominacao.GRANDE
    exib = para_quantidade_exibicao(modo, q, den)
    return f"{exib}".replace(".", ",") + " " + rotulo_unidade(modo, den)


def tabela_produtos(produtos: Iterable[Produto], title: str = "Produtos") -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID")
    table.add_column("Nome")
    table.add_column("Cód. barras")
    table.add_column("Tipo")
    table.add_column("Preço", justify="right")
    table.add_column("Estoque", justify="right")
    table.add_column("Status")
    cores = {"SEM_ESTOQUE": "bold red", "BAIXO": "bold yellow", "OK": "bold green"}
    for p in produtos:
        status = status_estoque(p)
        table.add_row(
            p.id,
            p.nome,
            p.codigo_barras or "",
            p.modo_preco.value,
            f"{formatar_moeda(p.preco_unitario)}/{rotulo_unidade(p.modo_preco)}",
            f"{p.estoque_disponivel} {rotulo_unidade(p.modo_preco)}",
            f"[{cores[status]}]{status}[/]",
        )
    return table


def tabela_carrinho(carrinho: Carrinho, title: str = "Carrinho") -> Table:
    table = Table(title=title, box=box.ROUNDED, show_footer=True)
    table.add_column("ID")
    table.add_column("Produto", footer="Subtotal\nDesconto\nTotal")
    table.add_column("Qtd", justify="right")
    table.add_column("Preço", justify="right")
    totais = carrinho.totais
    table.add_column(
        "Total",
        justify="right",
        footer="\n".join([
            formatar_moeda(totais.subtotal),
            f"- {formatar_moeda(totais.valor_desconto)} ({carrinho.desconto_percentual}%)",
            formatar_moeda(totais.total),
        ]),
    )
    for item in carrinho.itens:
        modo = item.produto.modo_preco
        table.add_row(
            item.produto_id,
            item.produto.nome,
            formatar_quantidade(modo, item.quantidade),
            f"{formatar_moeda(item.preco_unitario)}/{rotulo_unidade(modo)}",
            formatar_moeda(item.total),
        )
    return table


class CheckoutTUI:
    """Caixa interativo no terminal."""

    def __init__(self, produtos: Iterable[Produto], carrinho: Optional[Carrinho] = None,
                 sessao_path: Optional[str] = None, console: Optional[Console] = None):
        self.console = console or Console()
        self.checkout = Checkout(produtos, carrinho)
        self.sessao_path = sessao_path

    def run(self) -> None:
        """Inicia a interface principal."""
        self.show_banner()
        log_system_event("tui_start", {"produtos": len(self.checkout.produtos)})

        while True:
            try:
                self.console.print(tabela_carrinho(self.checkout.carrinho))
                choice = self.show_main_menu()
                if choice == "1":
                    self.ler_codigo()
                elif choice == "2":
                    self.buscar_produto()
                elif choice == "3":
                    self.alterar_quantidade()
                elif choice == "4":
                    self.editar_fracionado()
                elif choice == "5":
                    self.remover_item()
                elif choice == "6":
                    self.aplicar_desconto()
                elif choice == "7":
                    self.informar_cliente()
                elif choice == "8":
                    self.informar_observacao()
                elif choice == "9":
                    self.finalizar()
                elif choice == "l":
                    self.limpar_venda()
                elif choice == "s":
                    self.salvar()
                    break
                elif choice == "0":
                    self.console.print("\n[green]Saindo do caixa...[/green]")
                    break
            except KeyboardInterrupt:
                self.console.print("\n[red]Saindo...[/red]")
                break

    def show_banner(self) -> None:
        banner = Panel.fit(
            "[bold blue]KONTROLLAPRO — PDV[/bold blue]\n"
            "[cyan]Nova venda[/cyan]",
            border_style="blue"
        )
        self.console.print("\n")
        self.console.print(Align.center(banner))
        self.console.print("\n")

    def show_main_menu(self) -> str:
        menu = Panel(
            "[yellow]1.[/yellow] Ler código de barras   "
            "[yellow]2.[/yellow] Buscar produto   "
            "[yellow]3.[/yellow] Alterar quantidade\n"
            "[yellow]4.[/yellow] Editar peso/volume     "
            "[yellow]5.[/yellow] Remover item     "
            "[yellow]6.[/yellow] Desconto\n"
            "[yellow]7.[/yellow] Cliente                "
            "[yellow]8.[/yellow] Observação       "
            "[yellow]9.[/yellow] Finalizar venda\n"
            "[yellow]l.[/yellow] Limpar venda           "
            "[yellow]s.[/yellow] Salvar e sair    "
            "[yellow]0.[/yellow] Sair",
            title="Opções",
            border_style="green"
        )
        self.console.print(menu)
        return Prompt.ask(
            "Escolha uma opção",
            choices=["0", "1", "2", "3", "4", "5", "6", "7", "8", "9", "l", "s"],
            console=self.console,
        )

    # -----------------------
    # saída de notificações
    # -----------------------

    def mostrar(self, resultado: Resultado) -> None:
        n: Optional[Notificacao] = resultado.notificacao
        if n is not None:
            cor = {"erro": "red", "aviso": "yellow"}.get(n.tipo, "green")
            self.console.print(f"[{cor}]{n.mensagem}[/{cor}]")
        elif resultado.produto is not None and resultado.estado is EstadoCheckout.ADICIONADO:
            self.console.print(f"[green]✓ {resultado.produto.nome} adicionado[/green]")

    def _tratar(self, resultado: Resultado) -> None:
        self.mostrar(resultado)
        if self.checkout.aguardando_quantidade:
            self.entrada_quantidade()

    # -----------------------
    # ações
    # -----------------------

    def ler_codigo(self) -> None:
        codigo = Prompt.ask("Código de barras", console=self.console)
        self._tratar(self.checkout.escanear(codigo))

    def buscar_produto(self) -> None:
        termo = Prompt.ask("Buscar (nome, código ou categoria)", default="", console=self.console)
        encontrados: List[Produto] = self.checkout.buscar(termo)
        if not encontrados:
            self.console.print("[yellow]Nenhum produto encontrado[/yellow]")
            return
        self.console.print(tabela_produtos(encontrados, title="Resultado da busca"))
        escolha = Prompt.ask("ID do produto (vazio para voltar)", default="", console=self.console)
        if escolha.strip():
            self._tratar(self.checkout.selecionar_produto(escolha.strip()))

    def entrada_quantidade(self) -> None:
        """Formulário de peso/volume: denominação + valor."""
        produto = self.checkout.fluxo.produto
        modo = produto.modo_preco
        pequena = rotulo_unidade(modo, Denominacao.PEQUENA)
        grande = rotulo_unidade(modo, Denominacao.GRANDE)
        titulo = "Editar" if self.checkout.fluxo.edicao else "Quantidade de"
        self.console.print(Panel(
            f"{titulo} [bold]{produto.nome}[/bold] — {formatar_moeda(produto.preco_unitario)}/{grande}\n"
            f"Digite o valor em {pequena} ou {grande} (ex.: 500 {pequena}, 1,2 {grande}). Vazio cancela.",
            border_style="cyan",
        ))
        while self.checkout.aguardando_quantidade:
            rotulo = rotulo_unidade(modo, self.checkout.fluxo.denominacao)
            atual = self.checkout.fluxo.valor
            # sem default: Enter vazio precisa continuar cancelando na edição
            texto = Prompt.ask(
                f"Quantidade ({rotulo}, atual: {atual} {rotulo})" if atual is not None else f"Quantidade ({rotulo})",
                console=self.console,
            )
            if not texto.strip():
                self.mostrar(self.checkout.cancelar_quantidade())
                return
            valor, unidade, denominacao = parse_quantidade_operador(texto)
            if not unidade_compativel(modo, unidade):
                self.console.print(f"[red]Unidade {unidade} não vale para {produto.nome}: use {pequena} ou {grande}.[/red]")
                continue
            res = self.checkout.informar_quantidade(valor if valor is not None else texto, denominacao)
            if res.notificacao is not None:
                self.mostrar(res)
                continue
            self.mostrar(self.checkout.confirmar_quantidade())

    def _pedir_item(self) -> Optional[str]:
        if self.checkout.carrinho.vazio:
            self.console.print("[yellow]Carrinho vazio[/yellow]")
            return None
        return Prompt.ask("ID do item", console=self.console).strip()

    def alterar_quantidade(self) -> None:
        produto_id = self._pedir_item()
        if produto_id is None:
            return
        texto = Prompt.ask("Nova quantidade (0 remove)", console=self.console)
        valor, unidade, denominacao = parse_quantidade_operador(texto)
        item = self.checkout.carrinho.item(produto_id)
        if item is not None:
            modo = item.produto.modo_preco
            if not unidade_compativel(modo, unidade):
                self.console.print(f"[red]Unidade {unidade} não vale para {item.produto.nome}.[/red]")
                return
            # a linha guarda kg/L; "500 g" vira 0,5
            if modo.fracionado and valor is not None and denominacao is Denominacao.PEQUENA:
                valor = valor / FATOR
        self.mostrar(self.checkout.definir_quantidade(produto_id, valor if valor is not None else texto))

    def editar_fracionado(self) -> None:
        produto_id = self._pedir_item()
        if produto_id is None:
            return
        self._tratar(self.checkout.editar_item(produto_id))

    def remover_item(self) -> None:
        produto_id = self._pedir_item()
        if produto_id is None:
            return
        self.mostrar(self.checkout.remover_item(produto_id))

    def aplicar_desconto(self) -> None:
        texto = Prompt.ask("Desconto (%)", default="0", console=self.console)
        self.mostrar(self.checkout.definir_desconto(texto))

    def informar_cliente(self) -> None:
        cliente_id = Prompt.ask("ID do cliente (vazio remove)", default="", console=self.console).strip()
        if not cliente_id:
            self.mostrar(self.checkout.definir_cliente(None))
            return
        nome = Prompt.ask("Nome", console=self.console)
        documento = Prompt.ask("CPF/CNPJ (opcional)", default="", console=self.console).strip() or None
        self.mostrar(self.checkout.definir_cliente(Cliente(cliente_id, nome, documento)))

    def informar_observacao(self) -> None:
        texto = Prompt.ask("Observação", default="", console=self.console)
        self.mostrar(self.checkout.definir_observacao(texto))

    def limpar_venda(self) -> None:
        if Confirm.ask("Descartar a venda em andamento?", console=self.console):
            self.mostrar(self.checkout.limpar())
            if self.sessao_path:
                descartar_carrinho(self.sessao_path)

    def salvar(self) -> None:
        if not self.sessao_path:
            self.console.print("[yellow]Nenhum arquivo de sessão configurado[/yellow]")
            return
        destino = salvar_carrinho(self.checkout.carrinho, self.sessao_path)
        self.console.print(f"[green]✓ Venda salva em {destino}[/green]")

    def finalizar(self) -> None:
        resultado = self.checkout.finalizar()
        if resultado.handoff is None:
            self.mostrar(resultado)
            return
        self.console.print(Panel(
            json.dumps(resultado.handoff, ensure_ascii=False, indent=2),
            title=f"Venda enviada ao pagamento — {formatar_moeda(resultado.handoff['total'])}",
            border_style="green",
        ))
        if self.sessao_path:
            descartar_carrinho(self.sessao_path)


def main_tui(produtos: Iterable[Produto], carrinho: Optional[Carrinho] = None,
             sessao_path: Optional[str] = None) -> None:
    """Ponto de entrada principal da TUI."""
    tui = CheckoutTUI(produtos, carrinho, sessao_path)
    tui.run()
