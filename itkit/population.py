"""
Helpers to build and select populations of IT expressions
"""
from operator import attrgetter
from typing import List, Tuple

from sklearn.utils import check_random_state

from .expression import ITExpression, random_expression, sanitize
from .fitting import fit

Population = List[ITExpression]


def check_size_bounds(size_bounds: Tuple[int, int]):
    min_size, max_size = size_bounds
    if min_size < 1 or min_size > max_size:
        raise ValueError(
            f"expression size bounds should verify 1 <= min <= max, got {size_bounds}"
        )
    return min_size, max_size


def populate(
    Xs,
    ys,
    population_size: int,
    expression_size_bounds: Tuple[int, int],
    expolim: int,
    random_state=None,
) -> Population:
    """
    Random, sanitized and fitted expressions, the same number for every size
    in `expression_size_bounds` (inclusive)
    """
    random_state = check_random_state(random_state)
    min_size, max_size = check_size_bounds(expression_size_bounds)
    nvars = Xs.shape[1]
    n_per_size = max(1, round(population_size / (max_size - min_size + 1)))

    pop = list()
    for size in range(min_size, max_size + 1):
        for _ in range(n_per_size):
            expr = random_expression(size, nvars, expolim, random_state)
            pop.append(fit(sanitize(expr), Xs, ys))
    return pop


def tournament(population: Population, size: int, random_state=None) -> Population:
    """
    `size` tournaments of 2, individuals are drawn with replacement.
    Winners are copied so they can be mutated independently.
    """
    random_state = check_random_state(random_state)
    winners = list()
    for _ in range(size):
        a = population[random_state.randint(len(population))]
        b = population[random_state.randint(len(population))]
        winners.append((a if a.score > b.score else b).copy())
    return winners


def best_of(population: Population) -> ITExpression:
    return max(population, key=attrgetter("score"))
