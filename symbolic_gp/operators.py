"""
symbolic_gp/operators.py - Crossover and mutation over immutable trees

Nodes are located by path (tuple of child indices from the root) so that one
occurrence of a repeated subexpression can be replaced without touching the
others.
"""
import random
from typing import List, Optional, Tuple

from .ast_nodes import ASTNode, BinaryOp, Path
from .generator import grow

# Probability that a biased pick targets an operator node
OPERATOR_PICK_PROBABILITY = 0.9

Located = Tuple[Path, ASTNode]


def collect(tree: ASTNode) -> List[Located]:
    """All (path, node) pairs, pre-order"""
    return list(tree.iter_paths())


def collect_ops(tree: ASTNode) -> List[Located]:
    return [(path, node) for path, node in tree.iter_paths() if not node.is_terminal()]


def collect_terminals(tree: ASTNode) -> List[Located]:
    return [(path, node) for path, node in tree.iter_paths() if node.is_terminal()]


def biased_pick(tree: ASTNode, rng=random) -> Located:
    """Pick an operator node 90% of the time, otherwise a terminal"""
    ops = collect_ops(tree)
    if rng.random() > OPERATOR_PICK_PROBABILITY or not ops:
        return rng.choice(collect_terminals(tree))
    return rng.choice(ops)


def replace_subtree(tree: ASTNode, path: Path, replacement: ASTNode) -> ASTNode:
    """New tree with the node at `path` swapped for `replacement`.

    Subtrees off the path are shared with `tree`.
    """
    if not path:
        return replacement
    if not isinstance(tree, BinaryOp):
        raise IndexError(f"path {path} descends below leaf {tree}")

    index, rest = path[0], path[1:]
    if index == 0:
        return tree.with_children(replace_subtree(tree.left, rest, replacement), tree.right)
    elif index == 1:
        return tree.with_children(tree.left, replace_subtree(tree.right, rest, replacement))
    raise IndexError(f"invalid child index {index} in path")


def subtree_at(tree: ASTNode, path: Path) -> ASTNode:
    node = tree
    for index in path:
        if index >= len(node.children):
            raise IndexError(f"path {path} does not exist in {tree}")
        node = node.children[index]
    return node


def crossover(left: ASTNode, right: ASTNode, rng=random,
              max_depth: Optional[int] = None) -> Optional[ASTNode]:
    """Graft a biased pick of `left` over a biased pick of `right`.

    Returns None when the offspring would exceed max_depth.
    """
    _, donor = biased_pick(left, rng)
    target_path, _ = biased_pick(right, rng)
    offspring = replace_subtree(right, target_path, donor)
    if max_depth is not None and offspring.get_depth() > max_depth:
        return None
    return offspring


def mutate(tree: ASTNode, config, rng=random) -> ASTNode:
    """Replace a uniformly random node with a freshly grown subtree.

    The new subtree is grown no deeper than mutation_depth and no deeper
    than the room left under config.max_tree_depth at the chosen position.
    """
    target_path, _ = rng.choice(collect(tree))
    room = max(0, config.max_tree_depth - len(target_path))
    depth = min(config.mutation_depth, room)
    replacement = grow(depth, config.function_set, config.terminal_set, rng)
    return replace_subtree(tree, target_path, replacement)
