import numpy as np


def mae(y_true, y_pred) -> float:
    with np.errstate(all="ignore"):
        return float(np.mean(np.abs(np.asarray(y_pred) - np.asarray(y_true))))


def score_from_mae(error: float) -> float:
    """map a mean absolute error to a fitness in [0, 1], non-finite errors score 0"""
    if not np.isfinite(error):
        return 0.0
    return 1.0 / (1.0 + error)
