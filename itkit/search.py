"""
Search strategies over IT expressions

- `evolutionary_search` (ITES) : mutation-only evolution with tournament selection
- `local_search` (ITLS) : first-improvement hill climbing on a fixed neighborhood
- `tree_expansion_search` (SYMTREE) : greedy expansion of a tree of expressions,
  starting from a linear model

Every strategy returns its best expression, simplified with `FINAL_THRESHOLD`.
When a `history` list is given, one record per generation / iteration is
appended to it.
"""
from typing import Iterator, List, Optional

import numpy as np
from loguru import logger
from sklearn.utils import check_random_state

from .expression import (
    ITExpression,
    Term,
    check_expolim,
    compose,
    mutate_exponent,
    mutate_function,
    root_expression,
    sanitize,
)
from .fitting import fit, simplify
from .operators import FUNCTIONS
from .population import best_of, populate, tournament

FINAL_THRESHOLD = 0.005


def _check_dataset(Xs, ys):
    Xs = np.asarray(Xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    if Xs.ndim != 2 or ys.ndim != 1 or len(Xs) != len(ys) or not len(ys):
        raise ValueError(
            f"expected Xs of shape (n_samples, nvars) and ys of shape (n_samples,), "
            f"got {Xs.shape} and {ys.shape}"
        )
    return Xs, ys


def evolutionary_search(
    Xs,
    ys,
    pop_size: int,
    selection_size: int,
    min_size: int,
    max_size: int,
    expolim: int,
    generations: int,
    stop_score: float = 0.99,
    random_state=None,
    history: Optional[List[dict]] = None,
) -> ITExpression:
    Xs, ys = _check_dataset(Xs, ys)
    if pop_size < 1 or selection_size < 1:
        raise ValueError("pop_size and selection_size should be strictly positive")
    check_expolim(expolim)
    random_state = check_random_state(random_state)

    population = populate(Xs, ys, pop_size, (min_size, max_size), expolim, random_state)
    best = best_of(population).copy()

    for generation in range(generations):
        parents = tournament(population, selection_size, random_state)
        offspring = list()
        for parent in parents:
            if random_state.rand() > 0.5:
                child = mutate_function(parent, random_state)
            else:
                child = mutate_exponent(parent, expolim, random_state)
            offspring.append(fit(sanitize(child), Xs, ys))

        population = tournament(offspring, pop_size, random_state)

        candidate = best_of(offspring)
        if candidate.score > best.score:
            best = candidate.copy()

        logger.info("[ITES] generation {} best score {:.6f}", generation, best.score)
        if history is not None:
            history.append(
                dict(
                    iteration=generation,
                    best_score=best.score,
                    population_size=len(population),
                )
            )
        if best.score >= stop_score:
            logger.info("[ITES] stop score reached at generation {}", generation)
            break

    return simplify(best, Xs, ys, FINAL_THRESHOLD)


def neighborhood(expr: ITExpression) -> Iterator[ITExpression]:
    """
    every expression obtained by changing the function of one term and
    shifting one of its exponents by -1, 0 or +1.
    Neighbors with a constant term are skipped.
    """
    for term_idx in range(len(expr)):
        for func in FUNCTIONS:
            for var_idx in range(expr.nvars):
                for delta in (-1, 0, 1):
                    neighbor = expr.copy()
                    neighbor.terms[term_idx, var_idx] += delta
                    neighbor.funcs[term_idx] = func
                    neighbor.score = None
                    if neighbor.terms[term_idx].any():
                        yield neighbor


def scan_neighborhood(
    best: ITExpression, neighbors: List[ITExpression], Xs, ys, stop_score: float
) -> ITExpression:
    """
    Scan `neighbors` once, in order. Any neighbor scoring better than the
    current best replaces it right away, and the remaining neighbors are
    compared to this new best. Stops early once `stop_score` is reached.
    """
    for neighbor in neighbors:
        candidate = fit(sanitize(neighbor), Xs, ys)
        if candidate.score > best.score:
            best = candidate
            if best.score >= stop_score:
                break
    return best


def local_search(
    Xs,
    ys,
    pop_size: int,
    min_size: int,
    max_size: int,
    expolim: int,
    iterations: int,
    stop_score: float = 0.99,
    random_state=None,
    history: Optional[List[dict]] = None,
) -> ITExpression:
    Xs, ys = _check_dataset(Xs, ys)
    if pop_size < 1:
        raise ValueError("pop_size should be strictly positive")
    check_expolim(expolim)
    random_state = check_random_state(random_state)

    population = populate(Xs, ys, pop_size, (min_size, max_size), expolim, random_state)
    best = best_of(population)

    for iteration in range(iterations):
        neighbors = list(neighborhood(best))
        best = scan_neighborhood(best, neighbors, Xs, ys, stop_score)

        logger.info("[ITLS] iteration {} best score {:.6f}", iteration, best.score)
        if history is not None:
            history.append(
                dict(
                    iteration=iteration,
                    best_score=best.score,
                    neighborhood_size=len(neighbors),
                )
            )
        if best.score >= stop_score:
            logger.info("[ITLS] stop score reached at iteration {}", iteration)
            break

    return simplify(best, Xs, ys, FINAL_THRESHOLD)


def expansion_candidates(
    leaf: ITExpression, iteration: int, min_i: int, min_t: int
) -> List[Term]:
    """
    New terms to try on `leaf`:
     - sums of the exponents of every pair of terms (interactions)
     - differences of those exponents, once `iteration` >= `min_i`
     - every term with another function, once `iteration` >= `min_t`
    """
    candidates = list()
    terms = leaf.terms
    for j in range(len(leaf)):
        for k in range(j, len(leaf)):
            candidates.append(Term(tuple(int(t) for t in terms[j] + terms[k])))
            if iteration >= min_i:
                candidates.append(Term(tuple(int(t) for t in terms[j] - terms[k])))
        if iteration >= min_t:
            exponents = tuple(int(t) for t in terms[j])
            candidates.extend(
                Term(exponents, func) for func in FUNCTIONS if func is not leaf.funcs[j]
            )
    return candidates


def _absorb(expr: ITExpression, term: Term, Xs, ys) -> ITExpression:
    return fit(sanitize(compose(expr, term)), Xs, ys)


def expand(
    leaf: ITExpression, Xs, ys, iteration: int, threshold: float, min_i: int, min_t: int
) -> List[ITExpression]:
    """
    Children of `leaf`, built by greedy absorption of the candidate terms that
    improve it. Each absorption round starts back from `leaf`, absorbs every
    remaining candidate improving the running expression and yields one child.
    """
    candidates = [
        term
        for term in expansion_candidates(leaf, iteration, min_i, min_t)
        if _absorb(leaf, term, Xs, ys).score > leaf.score
    ]

    children = list()
    while candidates:
        greedy_best = leaf
        remaining = list()
        for term in candidates:
            attempt = _absorb(greedy_best, term, Xs, ys)
            if attempt.score > greedy_best.score:
                greedy_best = attempt
            else:
                remaining.append(term)
        if len(remaining) == len(candidates):
            break
        candidates = remaining
        children.append(simplify(greedy_best, Xs, ys, threshold))

    return children or [leaf]


def tree_expansion_search(
    Xs,
    ys,
    iterations: int,
    threshold: float,
    min_i: int,
    min_t: int,
    stop_score: float,
    history: Optional[List[dict]] = None,
) -> ITExpression:
    Xs, ys = _check_dataset(Xs, ys)
    if threshold < 0:
        raise ValueError(f"threshold should be positive, got {threshold}")

    best = fit(root_expression(Xs.shape[1]), Xs, ys)
    leaves = [best]

    for iteration in range(iterations):
        children = list()
        for leaf in leaves:
            children.extend(expand(leaf, Xs, ys, iteration, threshold, min_i, min_t))
        leaves = children

        candidate = best_of(leaves)
        if candidate.score > best.score:
            best = candidate

        logger.info(
            "[SYMTREE] iteration {} : {} leaves, best score {:.6f}",
            iteration,
            len(leaves),
            best.score,
        )
        if history is not None:
            history.append(
                dict(iteration=iteration, best_score=best.score, n_leaves=len(leaves))
            )
        if best.score >= stop_score:
            logger.info("[SYMTREE] stop score reached at iteration {}", iteration)
            break

    return simplify(best, Xs, ys, FINAL_THRESHOLD)
