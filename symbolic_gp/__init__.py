"""
symbolic_gp - Symbolic regression by genetic programming

Evolves populations of binary arithmetic expression trees until one of them
approximates a function known only through sampled input/output cases.
"""

__version__ = "0.1.0"
__author__ = "Symbolic GP Project"

from .ast_nodes import (
    ASTNode, Variable, Constant, BinaryOp, UnboundVariableError,
    evaluate, node_from_dict, add, sub, mul, div,
    BINARY_OPS, INVALID_RESULT
)
from .generator import full, grow, ramp_half_half, PopulationExhaustedError
from .fitness import FitnessEvaluator, fitness, build_cases
from .operators import crossover, mutate, replace_subtree, biased_pick
from .config import GPConfig, below
from .genome import Genome
from .population import Population, tournament, run

__all__ = [
    'ASTNode', 'Variable', 'Constant', 'BinaryOp', 'UnboundVariableError',
    'evaluate', 'node_from_dict', 'add', 'sub', 'mul', 'div',
    'BINARY_OPS', 'INVALID_RESULT',
    'full', 'grow', 'ramp_half_half', 'PopulationExhaustedError',
    'FitnessEvaluator', 'fitness', 'build_cases',
    'crossover', 'mutate', 'replace_subtree', 'biased_pick',
    'GPConfig', 'below',
    'Genome',
    'Population', 'tournament', 'run'
]
