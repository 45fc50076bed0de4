"""
symbolic_gp/generator.py - Random tree construction (full, grow, ramped half-and-half)
"""
import random
from typing import List, Sequence

from .ast_nodes import ASTNode, BinaryOp

# Consecutive duplicate trees tolerated before ramp_half_half gives up
MAX_DUPLICATE_ATTEMPTS = 10000


class PopulationExhaustedError(ValueError):
    """The requested number of distinct trees cannot be generated"""


def full(depth: int, functions: Sequence[str], terminals: Sequence[ASTNode],
         rng=random) -> ASTNode:
    """Tree whose leaves all sit exactly `depth` levels below the root"""
    if depth <= 0:
        return rng.choice(terminals)
    op = rng.choice(functions)
    left = full(depth - 1, functions, terminals, rng)
    right = full(depth - 1, functions, terminals, rng)
    return BinaryOp(op, left, right)


def grow(depth: int, functions: Sequence[str], terminals: Sequence[ASTNode],
         rng=random) -> ASTNode:
    """Irregular tree of depth at most `depth`.

    Every level above the depth limit stops early with a terminal with
    probability len(terminals) / (len(terminals) + len(functions)).
    """
    stop_probability = len(terminals) / (len(terminals) + len(functions))

    def build(remaining: int) -> ASTNode:
        if remaining <= 0 or rng.random() < stop_probability:
            return rng.choice(terminals)
        op = rng.choice(functions)
        left = build(remaining - 1)
        right = build(remaining - 1)
        return BinaryOp(op, left, right)

    return build(depth)


def ramp_half_half(count: int, max_depth: int, functions: Sequence[str],
                   terminals: Sequence[ASTNode], rng=random,
                   max_attempts: int = MAX_DUPLICATE_ATTEMPTS) -> List[ASTNode]:
    """Initial population of `count` structurally distinct trees.

    Even slots use full, odd slots use grow. The depth cursor cycles
    1..max_depth and advances on every attempt, including rejected
    duplicates, so exhausted depths are skipped over.
    """
    trees: List[ASTNode] = []
    seen = set()
    depth = 1
    failures = 0

    while len(trees) < count:
        if len(trees) % 2 == 0:
            tree = full(depth, functions, terminals, rng)
        else:
            tree = grow(depth, functions, terminals, rng)
        depth = 1 if depth >= max_depth else depth + 1

        if tree in seen:
            failures += 1
            if failures >= max_attempts:
                raise PopulationExhaustedError(
                    f"could not generate {count} distinct trees "
                    f"(stuck at {len(trees)} after {failures} duplicates)")
            continue

        failures = 0
        seen.add(tree)
        trees.append(tree)

    return trees
