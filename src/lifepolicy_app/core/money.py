"""Exact decimal helpers for money and rate values."""

from __future__ import annotations

import decimal
from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterator

ZERO = Decimal("0")
ONE = Decimal("1")
CENT = Decimal("0.01")


def to_decimal(value: Decimal | int | str) -> Decimal:
    """Convert a value to Decimal, refusing binary floats."""
    if isinstance(value, (bool, float)):
        raise TypeError(f"Money values must not be {type(value).__name__}: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as error:
            raise ValueError(f"Not a decimal number: {value!r}") from error
    else:
        raise TypeError(f"Unsupported money type: {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"Money values must be finite: {value!r}")
    return result


def round_money(value: Decimal) -> Decimal:
    """Round to cents using half-up, whatever the number of integer digits."""
    with decimal.localcontext() as ctx:
        ctx.prec = decimal.MAX_PREC
        ctx.Emax = decimal.MAX_EMAX
        ctx.Emin = decimal.MIN_EMIN
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


@contextmanager
def exact_arithmetic() -> Iterator[decimal.Context]:
    """Run a block with unbounded precision and Inexact trapped."""
    with decimal.localcontext() as ctx:
        ctx.prec = decimal.MAX_PREC
        ctx.Emax = decimal.MAX_EMAX
        ctx.Emin = decimal.MIN_EMIN
        ctx.traps[decimal.Inexact] = True
        yield ctx
