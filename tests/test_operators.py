import random

import pytest

from symbolic_gp import Constant, Variable, add, mul, full, grow
from symbolic_gp.operators import (
    biased_pick, collect, collect_ops, collect_terminals, crossover, mutate,
    replace_subtree, subtree_at
)


def well_formed(tree):
    for node in tree.get_all_nodes():
        if not node.is_terminal():
            assert len(node.children) == 2
    return True


def test_collect_partitions_nodes(quadratic_tree):
    nodes = collect(quadratic_tree)
    ops = collect_ops(quadratic_tree)
    leaves = collect_terminals(quadratic_tree)
    assert len(nodes) == 7
    assert len(ops) == 3
    assert len(leaves) == 4
    assert {path for path, _ in ops} | {path for path, _ in leaves} == {path for path, _ in nodes}


def test_replace_targets_single_occurrence(x):
    square = mul(x, x)
    tree = add(square, mul(x, x))
    result = replace_subtree(tree, (1,), Constant(3))
    assert result == add(mul(x, x), Constant(3))
    assert tree == add(mul(x, x), mul(x, x))


def test_replace_with_shared_leaf_objects(x):
    # the same Variable object sits at both positions
    tree = add(x, x)
    result = replace_subtree(tree, (0,), Constant(9))
    assert str(result) == "(9 + x)"


def test_replace_root_and_deep_path(quadratic_tree, x):
    assert replace_subtree(quadratic_tree, (), x) is x
    result = replace_subtree(quadratic_tree, (0, 0, 1), Constant(4))
    assert str(result) == "(((x * 4) - x) - 2)"
    assert subtree_at(result, (0, 0)) == mul(x, Constant(4))


def test_replace_invalid_path(x):
    with pytest.raises(IndexError):
        replace_subtree(add(x, x), (0, 1), Constant(1))
    with pytest.raises(IndexError):
        replace_subtree(add(x, x), (2,), Constant(1))


def test_biased_pick_on_leaf(x, rng):
    assert biased_pick(x, rng) == ((), x)


def test_biased_pick_prefers_operators(quadratic_tree):
    rng = random.Random(11)
    picks = [biased_pick(quadratic_tree, rng)[1] for _ in range(2000)]
    share = sum(1 for node in picks if not node.is_terminal()) / len(picks)
    assert 0.85 < share < 0.95


def test_crossover_of_leaves(x, rng):
    # the donor always replaces the whole leaf-only right parent
    assert crossover(Constant(1), x, rng) == Constant(1)


def test_crossover_closure(functions, terminals):
    rng = random.Random(21)
    for _ in range(200):
        left = grow(4, functions, terminals, rng)
        right = full(3, functions, terminals, rng)
        before = (left.to_dict(), right.to_dict())
        child = crossover(left, right, rng)
        assert well_formed(child)
        assert isinstance(child.evaluate({'x': 1.5}), float)
        assert (left.to_dict(), right.to_dict()) == before


def test_crossover_depth_limit(functions, terminals):
    rng = random.Random(8)
    rejected = 0
    for _ in range(300):
        left = full(4, functions, terminals, rng)
        right = full(4, functions, terminals, rng)
        child = crossover(left, right, rng, max_depth=4)
        if child is None:
            rejected += 1
        else:
            assert child.get_depth() <= 4
    assert rejected > 0


def test_mutate_closure(make_config):
    config = make_config(max_depth=3)
    rng = random.Random(2)
    for _ in range(200):
        tree = full(3, config.function_set, config.terminal_set, rng)
        mutant = mutate(tree, config, rng)
        assert well_formed(mutant)
        assert mutant.get_depth() <= tree.get_depth() + config.mutation_depth
        mutant.evaluate({'x': -0.5})
        assert tree.get_depth() == 3


def test_mutate_uses_configured_sets(make_config):
    y = Variable('y')
    config = make_config(
        cases=[({'x': 1.0, 'y': 2.0}, 3.0)],
        terminal_set=[y],
        function_set=['mul'],
    )
    rng = random.Random(4)
    mutant = mutate(Constant(1), config, rng)
    for node in mutant.get_all_nodes():
        if node.is_terminal():
            assert node == y
        else:
            assert node.op == 'mul'


def test_mutate_stays_within_max_tree_depth(make_config):
    config = make_config(max_depth=3, max_tree_depth=4)
    rng = random.Random(5)
    for _ in range(300):
        tree = full(4, config.function_set, config.terminal_set, rng)
        mutant = mutate(tree, config, rng)
        assert mutant.get_depth() <= 4


def test_mutate_at_depth_limit_inserts_terminal(make_config, x):
    config = make_config(max_depth=1, max_tree_depth=1, mutation_depth=1)
    rng = random.Random(9)
    for _ in range(50):
        mutant = mutate(add(x, Constant(2)), config, rng)
        assert mutant.get_depth() <= 1
