import pytest

from symbolic_gp import Constant, GPConfig, Variable, add, below


def test_defaults(quadratic_cases, terminals):
    config = GPConfig(cases=quadratic_cases, terminal_set=terminals)
    assert config.function_set == ('add', 'sub', 'mul', 'div')
    assert config.max_depth == 5
    assert config.population_size == 200
    assert config.max_generations == 1000
    assert config.mutation_depth == 5
    assert config.max_tree_depth == 10
    assert config.pool_sizes() == (38, 2, 160)
    assert config.criteria(0.001)
    assert not config.criteria(0.01)


def test_below_threshold():
    criteria = below(0.5)
    assert criteria(0.49)
    assert not criteria(0.5)
    assert criteria.threshold == 0.5


def test_cases_are_normalised(terminals):
    config = GPConfig(cases=[({'x': 1}, 2)], terminal_set=terminals)
    assert config.cases == [({'x': 1}, 2.0)]
    assert isinstance(config.cases[0][1], float)


def test_variable_missing_from_cases_fails_fast(quadratic_cases):
    with pytest.raises(ValueError, match="y"):
        GPConfig(cases=quadratic_cases, terminal_set=[Variable('x'), Variable('y')])


def test_variable_missing_from_one_case(terminals):
    cases = [({'x': 0.0}, 1.0), ({'z': 1.0}, 2.0)]
    with pytest.raises(ValueError):
        GPConfig(cases=cases, terminal_set=terminals)


@pytest.mark.parametrize("overrides", [
    {'function_set': []},
    {'function_set': ['add', 'pow']},
    {'terminal_set': []},
    {'max_depth': 0},
    {'population_size': 0},
    {'max_generations': 0},
    {'elite_ratio': 1.5},
    {'elite_ratio': 0.6, 'mutation_ratio': 0.5},
    {'max_tree_depth': 2},
    {'mutation_depth': 11},
    {'max_depth': 3, 'max_tree_depth': 4, 'mutation_depth': 5},
    {'max_crossover_attempts': 0},
    {'cases': []},
])
def test_invalid_settings(quadratic_cases, terminals, overrides):
    settings = dict(cases=quadratic_cases, terminal_set=terminals)
    settings.update(overrides)
    with pytest.raises(ValueError):
        GPConfig(**settings)


def test_terminal_set_rejects_operators(quadratic_cases, x):
    with pytest.raises(ValueError):
        GPConfig(cases=quadratic_cases, terminal_set=[x, add(x, Constant(1))])


def test_describe_mentions_settings(quadratic_cases, terminals):
    text = GPConfig(cases=quadratic_cases, terminal_set=terminals, seed=3).describe()
    assert "population=200" in text
    assert "threshold=0.01" in text
    assert "seed=3" in text


def test_max_tree_depth_follows_max_depth(quadratic_cases, terminals):
    config = GPConfig(cases=quadratic_cases, terminal_set=terminals, max_depth=3)
    assert config.max_tree_depth == 6
    explicit = GPConfig(cases=quadratic_cases, terminal_set=terminals, max_depth=3, max_tree_depth=3)
    assert explicit.max_tree_depth == 3
