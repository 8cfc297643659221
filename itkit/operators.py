from enum import Enum

import numpy as np
import polars as pl
from sympy import Abs, Function as SympyFunction, Id, S, cos, exp, log, sin, sqrt, tan

EXP_LIMIT = 300


class psqrt(SympyFunction):
    @classmethod
    def eval(cls, x):
        if x.is_Number:
            if x < 0:
                return S.Zero
            return sqrt(x)


class pexp(SympyFunction):
    @classmethod
    def eval(cls, x):
        if x.is_Number:
            if x >= EXP_LIMIT:
                return exp(EXP_LIMIT)
            return exp(x)


class plog(SympyFunction):
    @classmethod
    def eval(cls, x):
        if x.is_Number:
            if x <= 0:
                return S.Zero
            return log(x)
        if x.is_positive:
            return log(x)


class Function(Enum):
    """
    The fixed set of unary transformations an IT term can apply.

    Members are callable on scalars and numpy arrays. ``sqrt`` and ``log`` are
    protected (0 outside of their domain) and ``exp`` saturates at ``EXP_LIMIT``.
    """

    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ABS = "abs"
    ID = "id"
    SQRT = "sqrt"
    EXP = "exp"
    LOG = "log"

    def __call__(self, x):
        with np.errstate(all="ignore"):
            return _NUMPY[self](np.asarray(x, dtype=float))

    def polars(self, x: pl.Expr) -> pl.Expr:
        return _POLARS[self](x)

    @property
    def sympy(self):
        return _SYMPY[self]


_NUMPY = {
    Function.SIN: np.sin,
    Function.COS: np.cos,
    Function.TAN: np.tan,
    Function.ABS: np.abs,
    Function.ID: lambda x: x,
    Function.SQRT: lambda x: np.where(x < 0, 0.0, np.sqrt(x)),
    Function.EXP: lambda x: np.exp(np.minimum(x, EXP_LIMIT)),
    Function.LOG: lambda x: np.where(x <= 0, 0.0, np.log(x)),
}

_POLARS = {
    Function.SIN: pl.Expr.sin,
    Function.COS: pl.Expr.cos,
    Function.TAN: pl.Expr.tan,
    Function.ABS: pl.Expr.abs,
    Function.ID: lambda x: x,
    Function.SQRT: lambda x: pl.when(x < 0).then(pl.lit(0.0)).otherwise(x.sqrt()),
    Function.EXP: lambda x: x.clip(upper_bound=EXP_LIMIT).exp(),
    Function.LOG: lambda x: pl.when(x <= 0).then(pl.lit(0.0)).otherwise(x.log()),
}

_SYMPY = {
    Function.SIN: sin,
    Function.COS: cos,
    Function.TAN: tan,
    Function.ABS: Abs,
    Function.ID: Id,
    Function.SQRT: psqrt,
    Function.EXP: pexp,
    Function.LOG: plog,
}

FUNCTIONS = tuple(Function)
