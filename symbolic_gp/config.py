"""
symbolic_gp/config.py - Run configuration
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from .ast_nodes import ASTNode, BINARY_OPS, Variable
from .fitness import Cases

DEFAULT_THRESHOLD = 0.01


def below(threshold: float) -> Callable[[float], bool]:
    """Success predicate: fitness strictly below threshold"""
    def criteria(fitness: float) -> bool:
        return fitness < threshold
    criteria.threshold = threshold
    return criteria


@dataclass
class GPConfig:
    cases: Cases
    terminal_set: Sequence[ASTNode]
    function_set: Sequence[str] = tuple(BINARY_OPS)
    max_depth: int = 5
    population_size: int = 200
    max_generations: int = 1000
    criteria: Callable[[float], bool] = field(default_factory=lambda: below(DEFAULT_THRESHOLD))

    # operators
    mutation_depth: Optional[int] = None    # defaults to max_depth
    max_tree_depth: Optional[int] = None    # defaults to 2 * max_depth; deeper offspring are rejected

    # next generation split, crossovers take the remainder
    elite_ratio: float = 0.19
    mutation_ratio: float = 0.01
    unique_crossovers: bool = True
    max_crossover_attempts: int = 100

    seed: Optional[int] = None

    def __post_init__(self):
        self.cases = [(dict(bindings), float(expected)) for bindings, expected in self.cases]
        self.terminal_set = tuple(self.terminal_set)
        self.function_set = tuple(self.function_set)
        if self.mutation_depth is None:
            self.mutation_depth = self.max_depth
        if self.max_tree_depth is None:
            self.max_tree_depth = 2 * self.max_depth
        self.validate()

    def validate(self) -> None:
        """Raise ValueError on any inconsistent setting"""
        if not self.function_set:
            raise ValueError("function_set must not be empty")
        for op in self.function_set:
            if op not in BINARY_OPS:
                raise ValueError(f"Unknown binary operator in function_set: {op}")
        if not self.terminal_set:
            raise ValueError("terminal_set must not be empty")
        for terminal in self.terminal_set:
            if not isinstance(terminal, ASTNode) or not terminal.is_terminal():
                raise ValueError(f"terminal_set entries must be leaves, got {terminal!r}")

        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        if self.mutation_depth < 0:
            raise ValueError("mutation_depth must be non-negative")
        if self.max_tree_depth < self.max_depth:
            raise ValueError("max_tree_depth must not be smaller than max_depth")
        if self.mutation_depth > self.max_tree_depth:
            raise ValueError("mutation_depth must not exceed max_tree_depth")
        if self.population_size < 1:
            raise ValueError("population_size must be positive")
        if self.max_generations < 1:
            raise ValueError("max_generations must be positive")
        if self.max_crossover_attempts < 1:
            raise ValueError("max_crossover_attempts must be positive")
        for name in ('elite_ratio', 'mutation_ratio'):
            ratio = getattr(self, name)
            if not 0.0 <= ratio <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {ratio}")
        if self.elite_ratio + self.mutation_ratio > 1.0:
            raise ValueError("elite_ratio + mutation_ratio must not exceed 1")

        if not self.cases:
            raise ValueError("cases must not be empty")
        missing = self._unbound_variables()
        if missing:
            raise ValueError(f"terminal variables missing from case bindings: {', '.join(missing)}")

    def _unbound_variables(self) -> List[str]:
        names = [t.name for t in self.terminal_set if isinstance(t, Variable)]
        missing = []
        for name in names:
            if name in missing:
                continue
            if any(name not in bindings for bindings, _ in self.cases):
                missing.append(name)
        return missing

    def pool_sizes(self) -> Tuple[int, int, int]:
        """(elites, mutants, crossovers) for one generation"""
        # epsilon keeps e.g. 100 * 0.29 from flooring to 28
        elites = int(self.population_size * self.elite_ratio + 1e-9)
        mutants = int(self.population_size * self.mutation_ratio + 1e-9)
        return elites, mutants, self.population_size - elites - mutants

    def describe(self) -> str:
        threshold = getattr(self.criteria, 'threshold', None)
        parts = [
            f"population={self.population_size}",
            f"max_depth={self.max_depth}",
            f"max_tree_depth={self.max_tree_depth}",
            f"max_generations={self.max_generations}",
            f"functions={','.join(self.function_set)}",
            f"terminals={','.join(str(t) for t in self.terminal_set)}",
            f"cases={len(self.cases)}",
        ]
        if threshold is not None:
            parts.append(f"threshold={threshold}")
        if self.seed is not None:
            parts.append(f"seed={self.seed}")
        return ' '.join(parts)
