from typing import Tuple

import pandas as pd
import polars as pl
import sympy as sp
from loguru import logger
from sklearn.base import BaseEstimator, RegressorMixin
from sklearn.exceptions import NotFittedError
from sklearn.metrics import r2_score
from sklearn.utils import check_array, check_X_y
from sklearn.utils.validation import check_random_state

from .core import to_polars, to_sympy
from .expression import predict
from .search import evolutionary_search, local_search, tree_expansion_search

STRATEGIES = ("ites", "itls", "symtree")


class ITRegressor(BaseEstimator, RegressorMixin):
    """
    Symbolic regression with Interaction-Transformation expressions

    Parameters
    ----------
    strategy: str
        one of "ites" (evolutionary search), "itls" (local search)
        or "symtree" (tree expansion)
    population_size: int
        size of the population (ites, itls)
    selection_size: int
        number of parents selected at every generation (ites)
    init_size: tuple of int
        (min, max) number of terms of the initial expressions (ites, itls)
    expolim: int
        exponents are drawn in [-expolim - 1, expolim] (ites, itls)
    n_iter: int
        number of generations / iterations
    threshold: float
        terms with a lower absolute coefficient are pruned from children (symtree)
    min_i: int
        iteration from which exponent differences are tried (symtree)
    min_t: int
        iteration from which function swaps are tried (symtree)
    stop_score: float
        stop as soon as an expression scores at least this, with score = 1 / (1 + MAE)
    verbose: bool
        log the search progress
    """

    def __init__(
        self,
        strategy: str = "ites",
        population_size: int = 100,
        selection_size: int = 30,
        init_size: Tuple[int, int] = (1, 3),
        expolim: int = 3,
        n_iter: int = 50,
        threshold: float = 0.05,
        min_i: int = 2,
        min_t: int = 2,
        stop_score: float = 0.99,
        random_state=None,
        verbose: bool = False,
    ):
        self.strategy = strategy
        self.population_size = population_size
        self.selection_size = selection_size
        self.init_size = init_size
        self.expolim = expolim
        self.n_iter = n_iter
        self.threshold = threshold
        self.min_i = min_i
        self.min_t = min_t
        self.stop_score = stop_score
        self.random_state = random_state
        self.verbose = verbose

    def _check_input(self, X, y=None):
        columns = None
        if isinstance(X, pl.DataFrame):
            columns = X.columns
            X = X.to_numpy()
        elif isinstance(X, pd.DataFrame):
            columns = [str(c) for c in X.columns]
        if y is not None:
            X, y = check_X_y(X, y, y_numeric=True)
        else:
            X = check_array(X)
        if columns is None:
            columns = ["X" + str(i) for i in range(X.shape[1])]
        return X.astype(float), y, columns

    def fit(self, X, y):
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"unknown strategy {self.strategy}, should be one of {STRATEGIES}"
            )
        if not isinstance(self.init_size, tuple) or len(self.init_size) != 2:
            raise ValueError(f"init_size should be a (min, max) tuple, got {self.init_size}")
        X, y, columns = self._check_input(X, y)
        random_state = check_random_state(self.random_state)
        min_size, max_size = self.init_size
        history = list()

        if self.verbose:
            logger.enable("itkit")
        try:
            model = self._search(X, y, min_size, max_size, random_state, history)
        finally:
            if self.verbose:
                logger.disable("itkit")

        self.n_features_in_ = X.shape[1]
        self.model_ = model
        self.symbols_ = sp.symbols(columns)
        self.expression_ = to_sympy(model, self.symbols_)
        self.history_ = pd.DataFrame(history)
        return self

    def _search(self, X, y, min_size, max_size, random_state, history):
        if self.strategy == "ites":
            return evolutionary_search(
                X,
                y,
                self.population_size,
                self.selection_size,
                min_size,
                max_size,
                self.expolim,
                self.n_iter,
                stop_score=self.stop_score,
                random_state=random_state,
                history=history,
            )
        elif self.strategy == "itls":
            return local_search(
                X,
                y,
                self.population_size,
                min_size,
                max_size,
                self.expolim,
                self.n_iter,
                stop_score=self.stop_score,
                random_state=random_state,
                history=history,
            )
        return tree_expansion_search(
            X,
            y,
            self.n_iter,
            self.threshold,
            self.min_i,
            self.min_t,
            stop_score=self.stop_score,
            history=history,
        )

    def predict(self, X):
        model = getattr(self, "model_", None)
        if model is None:
            raise NotFittedError(
                "This ITRegressor instance is not fitted yet, call `fit` first"
            )
        if isinstance(X, pl.DataFrame):
            return X.select(to_polars(model, X.columns)).to_series().to_numpy()
        X, _, _ = self._check_input(X, y=None)
        return predict(model, X)

    def score(self, X, y):
        y_pred = self.predict(X)
        return r2_score(y, y_pred)
