import numpy as np
import pytest
from sklearn.utils import check_random_state


@pytest.fixture
def linear_dataset():
    rs = check_random_state(0)
    Xs = rs.uniform(1, 3, size=(30, 2))
    ys = 2 * Xs[:, 0] + 3 * Xs[:, 1]
    return Xs, ys


@pytest.fixture
def interaction_dataset():
    rs = check_random_state(1)
    Xs = rs.uniform(1, 3, size=(30, 2))
    ys = Xs[:, 0] * Xs[:, 1]
    return Xs, ys


@pytest.fixture
def pressure_dataset():
    # density, height difference -> pressure difference
    Xs = np.array(
        [
            [0.95, 3.75],
            [0.8, 7.75],
            [0.55, 5.25],
            [0.25, 4.5],
            [0.9, 7.5],
            [0.4, 3.25],
            [0.15, 2.25],
            [0.75, 2.5],
            [0.2, 4],
            [0.45, 2.75],
            [0.3, 0.75],
            [0.65, 1.5],
            [0.05, 0.5],
            [0.5, 6.5],
            [0, 0.25],
            [0.6, 1.25],
            [0.85, 4.25],
            [0.1, 7.25],
            [0.7, 5.75],
            [0.35, 5.5],
        ]
    )
    ys = np.array(
        [
            34.9374375,
            60.8034,
            28.3177125,
            11.032875,
            66.19725,
            12.7491,
            3.3098625,
            18.388125,
            7.8456,
            12.1361625,
            2.206575,
            9.561825,
            0.245175,
            31.87275,
            0,
            7.35525,
            35.4277875,
            7.110075,
            39.473175,
            18.878475,
        ]
    )
    return Xs, ys
