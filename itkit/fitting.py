import numpy as np
from loguru import logger

from .expression import ITExpression, term_values
from .metrics import mae, score_from_mae


def least_squares(A: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    solve the normal equations (A^T A) w = A^T y

    Raises `np.linalg.LinAlgError` if A^T A can't be inverted
    or if the solution is not finite
    """
    with np.errstate(all="ignore"):
        q1 = np.linalg.inv(A.T @ A)
        ws = q1 @ (A.T @ y)
    if not np.isfinite(ws).all():
        raise np.linalg.LinAlgError("least-squares solution is not finite")
    return ws


def fit(expr: ITExpression, Xs, ys) -> ITExpression:
    """
    Estimate the coefficients of `expr` on (Xs, ys) by ordinary least squares,
    then score it with 1 / (1 + MAE).

    A singular design matrix is not an error, the current coefficients are kept.
    Returns a new expression, `expr` is left untouched.
    """
    Xs = np.asarray(Xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    A = term_values(expr, Xs)
    fitted = expr.copy()
    try:
        fitted.coeffs = least_squares(A, ys)
    except np.linalg.LinAlgError as e:
        logger.debug("could not fit coefficients ({}), keeping {}", e, fitted.coeffs)

    with np.errstate(all="ignore"):
        y_pred = A @ fitted.coeffs
    fitted.score = score_from_mae(mae(ys, y_pred))
    return fitted


def simplify(expr: ITExpression, Xs, ys, threshold: float) -> ITExpression:
    """
    Iteratively drop terms with |coeff| <= `threshold` and refit,
    until a pass removes nothing. A pass that would remove every term is skipped.
    """
    if threshold < 0:
        raise ValueError(f"threshold should be positive, got {threshold}")
    current = expr
    while True:
        keep = np.flatnonzero(np.abs(current.coeffs) > threshold)
        if len(keep) == len(current):
            return current
        if not len(keep):
            logger.debug("simplify would empty the expression, stopping here")
            return current
        current = fit(current.take(keep), Xs, ys)
