"""
symbolic_gp/population.py - Tournament selection and the generational loop
"""
import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .ast_nodes import ASTNode
from .config import GPConfig
from .fitness import FitnessEvaluator
from .generator import ramp_half_half
from .genome import Genome
from .operators import crossover, mutate

logger = logging.getLogger(__name__)

Scored = Tuple[ASTNode, float]


def tournament(a: Scored, b: Scored) -> ASTNode:
    """Tree with strictly lower fitness; ties go to the first candidate"""
    a_tree, a_fitness = a
    b_tree, b_fitness = b
    return b_tree if b_fitness < a_fitness else a_tree


class Population:
    """Owns the current generation and evolves it until termination"""

    def __init__(self, config: GPConfig, trees: Optional[Sequence[ASTNode]] = None):
        self.config = config
        self.rng = random.Random(config.seed)
        self.evaluator = FitnessEvaluator(config.cases)
        self.generation = 1
        self.history: List[Dict[str, Any]] = []
        self.champion: Optional[Genome] = None

        if trees is None:
            trees = ramp_half_half(config.population_size, config.max_depth,
                                   config.function_set, config.terminal_set, self.rng)
        elif len(trees) != config.population_size:
            raise ValueError(f"expected {config.population_size} trees, got {len(trees)}")
        self.trees: List[ASTNode] = list(trees)

    @property
    def done(self) -> bool:
        return self.champion is not None

    def score(self) -> List[Scored]:
        """Current trees with fitness, best first (stable for ties)"""
        scored = self.evaluator.score(self.trees)
        scored.sort(key=lambda pair: pair[1])
        return scored

    def step(self) -> Optional[Genome]:
        """Score one generation; return the champion if the run is over.

        Otherwise the population is replaced by the next generation and
        None is returned.
        """
        if self.done:
            return self.champion

        scored = self.score()
        top_tree, min_fitness = scored[0]
        stats = self.get_stats(scored)
        self.history.append(stats)
        logger.debug("generation=%d best=%g mean=%g unique=%d",
                     self.generation, min_fitness, stats['fitness']['mean'],
                     stats['unique_trees'])

        if self.config.criteria(min_fitness) or self.generation >= self.config.max_generations:
            self.champion = Genome(top_tree, min_fitness, self.generation)
            logger.info("finished at generation %d with fitness %g: %s",
                        self.generation, min_fitness, top_tree)
            return self.champion

        self.trees = self.next_generation(scored)
        self.generation += 1
        return None

    def run(self) -> Genome:
        """Evolve until the criteria holds or the generation budget is spent"""
        logger.info("starting run: %s", self.config.describe())
        champion = self.step()
        while champion is None:
            champion = self.step()
        return champion

    def next_generation(self, scored: List[Scored]) -> List[ASTNode]:
        """Elites, mutants and crossover offspring drawn from a scored generation"""
        n_elites, n_mutants, n_crossovers = self.config.pool_sizes()
        sorted_trees = [tree for tree, _ in scored]

        elites = sorted_trees[:n_elites]
        mutants = [mutate(self.rng.choice(sorted_trees), self.config, self.rng)
                   for _ in range(n_mutants)]
        crossovers = self._crossover_pool(scored, n_crossovers)

        return crossovers + elites + mutants

    def _crossover_pool(self, scored: List[Scored], size: int) -> List[ASTNode]:
        pool: List[ASTNode] = []
        seen = set()
        while len(pool) < size:
            child = self._offspring(scored, seen)
            seen.add(child)
            pool.append(child)
        return pool

    def _offspring(self, scored: List[Scored], seen: set) -> ASTNode:
        """One crossover child, retried with fresh parents on a failed graft"""
        fallback = None
        for _ in range(self.config.max_crossover_attempts):
            mother = self._select(scored)
            father = self._select(scored)
            child = crossover(mother, father, self.rng, self.config.max_tree_depth)
            if child is None:
                fallback = fallback or father
                continue
            if self.config.unique_crossovers and child in seen:
                fallback = child
                continue
            return child

        logger.debug("no fresh crossover after %d attempts at generation %d",
                     self.config.max_crossover_attempts, self.generation)
        return fallback

    def _select(self, scored: List[Scored]) -> ASTNode:
        return tournament(self.rng.choice(scored), self.rng.choice(scored))

    def get_best(self, n: int = 1) -> List[Genome]:
        """Get the best n trees of the current generation"""
        return [Genome(tree, value, self.generation) for tree, value in self.score()[:n]]

    def get_stats(self, scored: Optional[List[Scored]] = None) -> Dict[str, Any]:
        """Get population statistics"""
        if scored is None:
            scored = self.score()

        fitnesses = np.array([value for _, value in scored], dtype=float)
        sizes = np.array([tree.size() for tree, _ in scored])
        depths = np.array([tree.get_depth() for tree, _ in scored])
        finite = fitnesses[np.isfinite(fitnesses)]
        unique_trees = len(set(tree for tree, _ in scored))

        return {
            'generation': self.generation,
            'population_size': len(scored),
            'fitness': {
                'min': float(fitnesses.min()),
                'max': float(fitnesses.max()),
                'mean': float(np.mean(finite)) if finite.size else float('inf'),
                'std': float(np.std(finite)) if finite.size else 0.0
            },
            'size': {
                'mean': float(np.mean(sizes)),
                'max': int(sizes.max())
            },
            'depth': {
                'mean': float(np.mean(depths)),
                'max': int(depths.max())
            },
            'unique_trees': unique_trees,
            'structural_diversity': unique_trees / len(scored)
        }


def run(config: GPConfig) -> ASTNode:
    """Evolve a population for `config` and return the champion tree"""
    return Population(config).run().tree
