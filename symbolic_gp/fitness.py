"""
symbolic_gp/fitness.py - Error-based fitness against labeled training cases
"""
import math
from typing import Callable, Iterable, List, Tuple

import numpy as np

from .ast_nodes import ASTNode, Bindings

Case = Tuple[Bindings, float]
Cases = List[Case]


def fitness(cases: Iterable[Case], tree: ASTNode) -> float:
    """Sum of absolute errors of tree over all cases (lower is better).

    A non-finite total (overflow in a deep product) is reported as inf so
    that scored populations always sort.
    """
    total = 0.0
    for bindings, expected in cases:
        actual = tree.evaluate(bindings)
        total += abs(expected - actual)
    if math.isnan(total):
        return math.inf
    return total


def build_cases(func: Callable[[float], float], start: float, stop: float,
                step: float, variable: str = 'x') -> Cases:
    """Sample func over the inclusive range [start, stop] in increments of step"""
    count = int(np.floor((stop - start) / step + 1e-9)) + 1
    xs = start + np.arange(count) * step
    return [({variable: float(x)}, float(func(float(x)))) for x in np.round(xs, 10)]


class FitnessEvaluator:
    """Scores trees against a fixed set of training cases"""

    def __init__(self, cases: Iterable[Case]):
        self.cases: Cases = [(dict(bindings), float(expected)) for bindings, expected in cases]

    def evaluate(self, tree: ASTNode) -> float:
        return fitness(self.cases, tree)

    def score(self, trees: Iterable[ASTNode]) -> List[Tuple[ASTNode, float]]:
        """(tree, fitness) pairs in input order"""
        return [(tree, self.evaluate(tree)) for tree in trees]

    def __len__(self):
        return len(self.cases)
