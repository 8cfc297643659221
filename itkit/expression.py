"""
The Interaction-Transformation (IT) representation

An IT expression is a weighted sum of terms, each term being a unary function
applied to a product of the input variables raised to integer powers:

    f(x) = sum_i coeffs[i] * funcs[i](prod_v x[v] ** terms[i][v])

All operators in this module are pure: they never modify their input and
return a new ``ITExpression`` (or the input itself when nothing changed).
"""
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from loguru import logger
from sklearn.utils import check_random_state

from .operators import FUNCTIONS, Function


class Term(NamedTuple):
    exponents: Tuple[int, ...]
    func: Function = Function.ID
    coeff: float = 1.0


@dataclass(eq=False)
class ITExpression:
    terms: np.ndarray
    funcs: List[Function]
    coeffs: np.ndarray
    score: Optional[float] = None

    def __post_init__(self):
        self.terms = np.asarray(self.terms, dtype=int)
        self.funcs = list(self.funcs)
        self.coeffs = np.asarray(self.coeffs, dtype=float)
        if self.terms.ndim != 2:
            raise ValueError(f"terms should be a 2D array, got shape {self.terms.shape}")
        if not len(self.terms) == len(self.funcs) == len(self.coeffs):
            raise ValueError(
                f"terms, funcs and coeffs should have the same length, got "
                f"{len(self.terms)}, {len(self.funcs)} and {len(self.coeffs)}"
            )

    @property
    def length(self) -> int:
        return len(self.funcs)

    @property
    def nvars(self) -> int:
        return self.terms.shape[1]

    def __len__(self):
        return self.length

    def copy(self) -> "ITExpression":
        return ITExpression(
            self.terms.copy(), list(self.funcs), self.coeffs.copy(), self.score
        )

    def take(self, indices: Sequence[int]) -> "ITExpression":
        """new (unscored) expression made of the terms at `indices`"""
        indices = list(indices)
        return ITExpression(
            self.terms[indices].reshape(len(indices), self.nvars),
            [self.funcs[i] for i in indices],
            self.coeffs[indices],
        )

    def __iter__(self):
        for term, func, coeff in zip(self.terms, self.funcs, self.coeffs):
            yield Term(tuple(int(t) for t in term), func, float(coeff))


def check_expolim(expolim: int):
    if expolim < 0:
        raise ValueError(f"expolim should be positive, got {expolim}")
    return expolim


def _random_exponents(size, expolim, random_state):
    return random_state.randint(-expolim - 1, expolim + 1, size=size)


def _random_function(random_state) -> Function:
    return FUNCTIONS[random_state.randint(len(FUNCTIONS))]


def random_expression(n_terms: int, nvars: int, expolim: int, random_state=None):
    """
    Draw `n_terms` random terms, with exponents uniform in [-expolim - 1, expolim]
    (never all zero), a random function and a unit coefficient
    """
    check_expolim(expolim)
    random_state = check_random_state(random_state)
    terms = list()
    for _ in range(n_terms):
        term = _random_exponents(nvars, expolim, random_state)
        while not term.any():
            term = _random_exponents(nvars, expolim, random_state)
        terms.append(term)
    funcs = [_random_function(random_state) for _ in range(n_terms)]
    return ITExpression(
        np.array(terms, dtype=int).reshape(n_terms, nvars), funcs, np.ones(n_terms)
    )


def root_expression(nvars: int) -> ITExpression:
    """linear model in the raw variables: x0 + x1 + ... + x(nvars-1)"""
    return ITExpression(
        np.eye(nvars, dtype=int), [Function.ID] * nvars, np.ones(nvars)
    )


def term_values(expr: ITExpression, Xs) -> np.ndarray:
    """
    Evaluate every term of `expr` (without its coefficient) on every sample of `Xs`.
    Returns an array of shape (n_samples, len(expr)).

    Domain errors (eg. 0 ** -1) give non-finite values instead of raising.
    """
    Xs = np.asarray(Xs, dtype=float)
    with np.errstate(all="ignore"):
        products = np.prod(Xs[:, np.newaxis, :] ** expr.terms[np.newaxis, :, :], axis=2)
    values = np.empty_like(products)
    for idx, func in enumerate(expr.funcs):
        values[:, idx] = func(products[:, idx])
    return values


def predict(expr: ITExpression, Xs) -> np.ndarray:
    values = term_values(expr, Xs)
    with np.errstate(all="ignore"):
        return values @ expr.coeffs


def evaluate(expr: ITExpression, X) -> float:
    X = np.asarray(X, dtype=float)
    return float(predict(expr, X[np.newaxis, :])[0])


def sanitize(expr: ITExpression) -> ITExpression:
    """
    Remove constant terms (all-zero exponents) and repeated (exponents, function)
    pairs, keeping the first occurrence.
    If nothing would be left, `expr` is returned as is.
    """
    seen = set()
    keep = list()
    for idx, term in enumerate(expr):
        if not any(term.exponents):
            continue
        key = term.exponents, term.func
        if key in seen:
            continue
        seen.add(key)
        keep.append(idx)

    if not keep:
        logger.debug("sanitize would empty the expression, keeping it unchanged")
        return expr
    if len(keep) == len(expr):
        return expr
    return expr.take(keep)


def mutate_function(expr: ITExpression, random_state=None) -> ITExpression:
    random_state = check_random_state(random_state)
    mutant = expr.copy()
    mutant.funcs[random_state.randint(len(mutant))] = _random_function(random_state)
    mutant.score = None
    return mutant


def mutate_exponent(expr: ITExpression, expolim: int, random_state=None) -> ITExpression:
    """
    Redraw a single exponent. If this leaves a constant term,
    a brand new random expression of the same length is returned instead.
    """
    check_expolim(expolim)
    random_state = check_random_state(random_state)
    mutant = expr.copy()
    term_idx = random_state.randint(len(mutant))
    var_idx = random_state.randint(mutant.nvars)
    mutant.terms[term_idx, var_idx] = _random_exponents(None, expolim, random_state)
    mutant.score = None
    if not mutant.terms.any(axis=1).all():
        logger.debug("degenerate term after exponent mutation, rebuilding expression")
        return random_expression(len(expr), expr.nvars, expolim, random_state)
    return mutant


def compose(expr: ITExpression, term: Term) -> ITExpression:
    """append `term` to a copy of `expr`"""
    exponents = np.asarray(term.exponents, dtype=int).reshape(1, expr.nvars)
    return ITExpression(
        np.vstack([expr.terms, exponents]),
        expr.funcs + [term.func],
        np.append(expr.coeffs, term.coeff),
    )
