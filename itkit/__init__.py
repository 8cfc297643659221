"""
itkit searches for closed-form expressions in the Interaction-Transformation (IT) representation.

An IT expression is a weighted sum of unary functions applied to products of the input
variables raised to integer powers, eg. `2.1 * sin(X0 * X1 ** 2) + 0.3 * log(X1 / X0)`.
Coefficients are estimated by least squares, so the search only has to find the structure:
 - ITES : an evolutionary search, mutating functions and exponents
 - ITLS : a local search exploring every small change of the current best expression
 - SYMTREE : a greedy expansion starting from a linear model, adding interactions step by step
"""
from loguru import logger

from .expression import ITExpression, Term, evaluate, predict
from .fitting import fit, simplify
from .operators import Function
from .search import evolutionary_search, local_search, tree_expansion_search

__version__ = "0.1.0"

logger.disable(__name__)
