import numpy as np
import pytest
from sklearn.utils import check_random_state

from ..expression import ITExpression, root_expression
from ..fitting import fit
from ..operators import FUNCTIONS, Function
from ..population import populate
from ..search import (
    evolutionary_search,
    expand,
    expansion_candidates,
    local_search,
    neighborhood,
    scan_neighborhood,
    tree_expansion_search,
)


def check_history(history, n_max):
    assert 0 < len(history) <= n_max
    scores = [h["best_score"] for h in history]
    assert scores == sorted(scores), "best score should never decrease"


def test_evolutionary_search(pressure_dataset):
    Xs, ys = pressure_dataset
    history = list()
    best = evolutionary_search(
        Xs, ys, 50, 15, 1, 3, 2, 10, stop_score=0.99, random_state=12, history=history
    )
    check_history(history, 10)
    assert len(best.terms) == len(best.funcs) == len(best.coeffs) == best.length > 0
    assert 0.0 <= best.score <= 1.0


def test_evolutionary_search_reproducible(linear_dataset):
    Xs, ys = linear_dataset
    a = evolutionary_search(Xs, ys, 20, 6, 1, 2, 1, 3, random_state=3)
    b = evolutionary_search(Xs, ys, 20, 6, 1, 2, 1, 3, random_state=3)
    np.testing.assert_array_equal(a.terms, b.terms)
    assert a.funcs == b.funcs
    assert a.score == b.score


def test_evolutionary_search_invalid(linear_dataset):
    Xs, ys = linear_dataset
    with pytest.raises(ValueError):
        evolutionary_search(Xs, ys, 0, 10, 1, 2, 1, 3)
    with pytest.raises(ValueError):
        evolutionary_search(Xs[:5], ys, 10, 10, 1, 2, 1, 3)
    with pytest.raises(ValueError):
        evolutionary_search(Xs, ys, 10, 10, 1, 2, -1, 3)


def test_neighborhood():
    expr = root_expression(2)
    expr.score = 0.5
    neighbors = list(neighborhood(expr))
    # 2 terms * 8 functions * 2 variables * 3 deltas, minus the moves zeroing a term
    assert len(neighbors) == 2 * len(FUNCTIONS) * 2 * 3 - 2 * len(FUNCTIONS)
    for neighbor in neighbors:
        assert neighbor.terms.any(axis=1).all()
        assert neighbor.score is None
        n_changed = (neighbor.terms != expr.terms).any(axis=1).sum()
        assert n_changed <= 1
    assert expr.terms.tolist() == [[1, 0], [0, 1]]


def test_local_search_linear(linear_dataset):
    Xs, ys = linear_dataset
    history = list()
    best = local_search(
        Xs, ys, 150, 2, 4, 1, 50, stop_score=0.99, random_state=12, history=history
    )
    check_history(history, 50)
    assert best.score >= 0.99


@pytest.fixture
def inverse_cube_dataset():
    Xs = np.linspace(1, 3, 20)[:, np.newaxis]
    return Xs, Xs[:, 0] ** -3


def test_local_search_single_step(inverse_cube_dataset):
    Xs, ys = inverse_cube_dataset
    start = populate(Xs, ys, 1, (1, 1), 0, check_random_state(7))[0]
    assert start.terms.tolist() == [[-1]]
    neighbors = list(neighborhood(start))
    # 8 functions * 2 deltas, the +1 shift gives a constant term
    assert len(neighbors) == 2 * len(FUNCTIONS)

    history = list()
    best = local_search(
        Xs, ys, 1, 1, 1, 0, 1, stop_score=1.1, random_state=7, history=history
    )
    assert len(history) == 1
    assert history[0]["neighborhood_size"] == len(neighbors)
    # a single pass over the neighborhood of `start`, nothing further away
    assert best.terms.tolist() in ([[-2]], [[-1]])
    scores = [fit(n, Xs, ys).score for n in neighbors]
    assert best.score == pytest.approx(max(scores))


def test_scan_neighborhood_first_improvement(inverse_cube_dataset):
    Xs, ys = inverse_cube_dataset
    start = fit(ITExpression([[-1]], [Function.ID], [1.0]), Xs, ys)
    neighbors = list(neighborhood(start))
    fitted = [fit(n, Xs, ys) for n in neighbors]
    first = next(n for n in fitted if n.score > start.score)

    adopted = scan_neighborhood(start, neighbors, Xs, ys, stop_score=first.score)
    assert adopted.terms.tolist() == first.terms.tolist()
    assert adopted.funcs == first.funcs

    # later neighbors are compared to the updated best
    best = scan_neighborhood(start, neighbors, Xs, ys, stop_score=1.1)
    assert best.score == pytest.approx(max(n.score for n in fitted))
    assert best.score >= first.score
    assert start.terms.tolist() == [[-1]]


def test_local_search_invalid(linear_dataset):
    Xs, ys = linear_dataset
    with pytest.raises(ValueError):
        local_search(Xs, ys, 0, 1, 2, 1, 3)
    with pytest.raises(ValueError):
        local_search(Xs, ys, 10, 1, 2, -1, 3)


def test_expansion_candidates():
    leaf = root_expression(2)
    terms = [c.exponents for c in expansion_candidates(leaf, 0, 2, 2)]
    assert terms == [(2, 0), (1, 1), (0, 2)]
    assert all(c.func is Function.ID for c in expansion_candidates(leaf, 0, 2, 2))

    terms = [c.exponents for c in expansion_candidates(leaf, 2, 2, 5)]
    assert terms == [(2, 0), (0, 0), (1, 1), (1, -1), (0, 2), (0, 0)]

    candidates = expansion_candidates(leaf, 2, 5, 2)
    assert len(candidates) == 3 + 2 * (len(FUNCTIONS) - 1)
    swaps = candidates[2 : 2 + len(FUNCTIONS) - 1]
    assert all(c.exponents == (1, 0) for c in swaps)
    assert {c.func for c in swaps} == set(FUNCTIONS) - {Function.ID}


def test_expand(interaction_dataset):
    Xs, ys = interaction_dataset
    leaf = fit(root_expression(2), Xs, ys)
    children = expand(leaf, Xs, ys, 0, 0.05, 2, 2)
    assert children
    assert max(c.score for c in children) > leaf.score
    assert [1, 1] in children[0].terms.tolist()
    assert leaf.terms.tolist() == [[1, 0], [0, 1]]


def test_tree_expansion_interaction(interaction_dataset):
    Xs, ys = interaction_dataset
    history = list()
    best = tree_expansion_search(Xs, ys, 3, 0.05, 2, 2, 0.99, history=history)
    check_history(history, 3)
    assert [1, 1] in best.terms.tolist()
    assert best.score >= 0.99


def test_tree_expansion_pressure(pressure_dataset):
    Xs, ys = pressure_dataset
    best = tree_expansion_search(Xs, ys, 5, 0.05, 2, 2, 0.99)
    assert best.terms.tolist() == [[1, 1]]
    assert best.coeffs[0] == pytest.approx(9.807, rel=1e-3)


def test_tree_expansion_requires_stop_score(interaction_dataset):
    Xs, ys = interaction_dataset
    with pytest.raises(TypeError):
        tree_expansion_search(Xs, ys, 1, 0.05, 2, 2)
