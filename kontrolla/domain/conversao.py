# kontrolla/domain/conversao.py
"""
Conversão entre a quantidade digitada pelo operador e a quantidade
canônica usada em preço e estoque.

A quantidade canônica está sempre na unidade base do produto: 1 item,
1 kg ou 1 litro. Peso e volume são guardados em ponto fixo
(``DEFAULTS.casas_quantidade`` casas decimais), de modo que
``para_quantidade_exibicao(resolver_quantidade_canonica(m, a, d), d)``
devolve ``a`` com erro menor que 0,001.

Todas as funções são puras.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from kontrolla.config import DEFAULTS
from kontrolla.domain.erros import QuantidadeInvalidaError
from kontrolla.domain.models import Denominacao, ModoPreco, Quantidade, para_decimal

QUANTUM = Decimal(1).scaleb(-DEFAULTS.casas_quantidade)
FATOR = Decimal(DEFAULTS.fator_denominacao)


def _valor_positivo(valor: Any) -> Decimal:
    """Valida o valor digitado: número finito e positivo."""
    if valor is None or isinstance(valor, bool):
        raise QuantidadeInvalidaError(f"Quantidade inválida: {valor!r}")
    if isinstance(valor, float) and not math.isfinite(valor):
        raise QuantidadeInvalidaError(f"Quantidade inválida: {valor!r}")
    try:
        d = para_decimal(valor)
    except ValueError:
        raise QuantidadeInvalidaError(f"Quantidade inválida: {valor!r}") from None
    if not d.is_finite() or d <= 0:
        raise QuantidadeInvalidaError(f"Quantidade deve ser maior que zero: {valor!r}")
    return d


def arredondar_unidades(valor: Decimal) -> int:
    try:
        return int(valor.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise QuantidadeInvalidaError(f"Quantidade muito grande: {valor}") from None


def quantizar(valor: Decimal) -> Decimal:
    """Ponto fixo de kg/L. Valores que não cabem na precisão do contexto
    decimal (mais de ~22 dígitos inteiros) são rejeitados."""
    try:
        return valor.quantize(QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise QuantidadeInvalidaError(f"Quantidade muito grande: {valor}") from None


def _sem_zeros(valor: Decimal) -> Decimal:
    # normalize() sozinho transformaria 500 em 5E+2
    if valor == valor.to_integral_value():
        return valor.quantize(Decimal(1))
    return valor.normalize()


def resolver_quantidade_canonica(modo: ModoPreco, valor: Any,
                                 denominacao: Optional[Denominacao] = None) -> Quantidade:
    """Converte a quantidade digitada para a quantidade canônica.

    Regras:
        - ``UNIDADE``: a denominação é ignorada; o valor é arredondado
          (meio para cima) para um inteiro.
        - ``KG``/``LITROS``: ``PEQUENA`` (g/mL) divide por 1000;
          ``GRANDE`` (kg/L) mantém o valor.

    Raises:
        QuantidadeInvalidaError: valor não numérico, infinito, zero ou
        negativo, ou que vira zero depois do arredondamento.
    """
    modo = ModoPreco.de_codigo(modo)
    d = _valor_positivo(valor)
    if modo is ModoPreco.UNIDADE:
        unidades = arredondar_unidades(d)
        if unidades <= 0:
            raise QuantidadeInvalidaError(f"Quantidade deve ser pelo menos 1 unidade: {valor!r}")
        return unidades
    if modo in (ModoPreco.KG, ModoPreco.LITROS):
        try:
            denominacao = Denominacao.de_codigo(denominacao)
        except ValueError:
            raise QuantidadeInvalidaError(f"Denominação inválida: {denominacao!r}") from None
        if denominacao is Denominacao.PEQUENA:
            canonica = quantizar(d / FATOR)
        elif denominacao is Denominacao.GRANDE:
            canonica = quantizar(d)
        else:
            raise QuantidadeInvalidaError(f"Denominação inválida: {denominacao!r}")
        if canonica <= 0:
            raise QuantidadeInvalidaError(f"Quantidade muito pequena: {valor!r}")
        return canonica
    raise ValueError(f"modo de preço não suportado: {modo!r}")


def para_quantidade_exibicao(modo: ModoPreco, quantidade: Quantidade,
                             denominacao: Optional[Denominacao] = None) -> Quantidade:
    """Inverso de :func:`resolver_quantidade_canonica`."""
    modo = ModoPreco.de_codigo(modo)
    denominacao = Denominacao.de_codigo(denominacao)
    if modo is ModoPreco.UNIDADE:
        return int(quantidade)
    if modo in (ModoPreco.KG, ModoPreco.LITROS):
        q = para_decimal(quantidade)
        if denominacao is Denominacao.PEQUENA:
            return _sem_zeros(q * FATOR)
        if denominacao is Denominacao.GRANDE:
            return _sem_zeros(q)
        raise ValueError(f"denominação inválida: {denominacao!r}")
    raise ValueError(f"modo de preço não suportado: {modo!r}")


def denominacao_padrao(modo: ModoPreco) -> Optional[Denominacao]:
    """Denominação pré-selecionada na entrada de quantidade (g/mL)."""
    return Denominacao.PEQUENA if modo.fracionado else None


def rotulo_unidade(modo: ModoPreco, denominacao: Optional[Denominacao] = None) -> str:
    """Abreviação para exibição: un, g, kg, mL ou L."""
    if modo is ModoPreco.UNIDADE:
        return "un"
    rotulos = {
        (ModoPreco.KG, Denominacao.PEQUENA): "g",
        (ModoPreco.KG, Denominacao.GRANDE): "kg",
        (ModoPreco.LITROS, Denominacao.PEQUENA): "mL",
        (ModoPreco.LITROS, Denominacao.GRANDE): "L",
    }
    return rotulos[(modo, denominacao or Denominacao.GRANDE)]
