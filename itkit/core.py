from typing import Sequence

import polars as pl
import sympy as sp

from .expression import ITExpression


def default_symbols(nvars: int):
    return sp.symbols([f"X{i}" for i in range(nvars)])


def to_sympy(expr: ITExpression, symbols: Sequence[sp.Symbol] = None) -> sp.Expr:
    if symbols is None:
        symbols = default_symbols(expr.nvars)
    if len(symbols) != expr.nvars:
        raise ValueError(f"expected {expr.nvars} symbols, got {len(symbols)}")
    args = list()
    for exponents, func, coeff in expr:
        interaction = sp.Mul(*(sym ** k for sym, k in zip(symbols, exponents) if k))
        args.append(sp.Float(coeff) * func.sympy(interaction))
    return sp.Add(*args)


def to_polars(expr: ITExpression, columns: Sequence[str]) -> pl.Expr:
    """
    columnar equivalent of `expression.predict`, to be used as `df.select(to_polars(...))`
    """
    if len(columns) != expr.nvars:
        raise ValueError(f"expected {expr.nvars} columns, got {len(columns)}")
    pl_expr = pl.lit(0.0)
    for exponents, func, coeff in expr:
        interaction = pl.lit(1.0)
        for col, k in zip(columns, exponents):
            if k:
                interaction = interaction * pl.col(col).cast(pl.Float64).pow(k)
        pl_expr = pl_expr + func.polars(interaction) * coeff
    return pl_expr
