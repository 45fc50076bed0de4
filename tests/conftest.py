import random

import pytest

from symbolic_gp import Constant, GPConfig, Variable, build_cases, sub, mul, below


def quadratic(x):
    return x ** 2 - x - 2


@pytest.fixture
def x():
    return Variable('x')


@pytest.fixture
def terminals():
    return [Variable('x')] + [Constant(float(c)) for c in range(1, 6)]


@pytest.fixture
def functions():
    return ['add', 'sub', 'mul', 'div']


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def quadratic_tree(x):
    # (x * x - x) - 2
    return sub(sub(mul(x, x), x), Constant(2))


@pytest.fixture
def quadratic_cases():
    return build_cases(quadratic, -1.0, 1.0, 0.25)


@pytest.fixture
def make_config(quadratic_cases, terminals):
    def factory(**overrides):
        settings = dict(
            cases=quadratic_cases,
            terminal_set=terminals,
            max_depth=4,
            population_size=50,
            max_generations=10,
            criteria=below(0.01),
            seed=7,
        )
        settings.update(overrides)
        return GPConfig(**settings)
    return factory
