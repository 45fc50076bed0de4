"""
symbolic_gp/genome.py - Champion record and JSON serialization
"""
import json
from typing import Dict, Any, Iterable, List, Tuple

from .ast_nodes import ASTNode, node_from_dict
from .fitness import Case


class Genome:
    """A scored tree together with the generation that produced it"""

    def __init__(self, tree: ASTNode, fitness: float = 0.0, generation: int = 0):
        self.tree = tree
        self.fitness = fitness
        self.generation = generation

    def evaluate(self, bindings: Dict[str, float]) -> float:
        return self.tree.evaluate(bindings)

    def compare(self, cases: Iterable[Case]) -> List[Tuple[float, float]]:
        """(expected, actual) rows for each training case"""
        return [(expected, self.tree.evaluate(bindings)) for bindings, expected in cases]

    def get_complexity(self) -> int:
        """Number of nodes in the tree"""
        return self.tree.size()

    def get_depth(self) -> int:
        return self.tree.get_depth()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize genome to dictionary"""
        return {
            'tree': self.tree.to_dict(),
            'expression': str(self.tree),
            'fitness': self.fitness,
            'generation': self.generation,
            'complexity': self.get_complexity(),
            'depth': self.get_depth()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Genome':
        """Deserialize genome from dictionary"""
        tree = node_from_dict(data['tree'])
        return cls(tree, data.get('fitness', 0.0), data.get('generation', 0))

    def to_json(self, filename: str = None) -> str:
        """Serialize to JSON string or file"""
        json_str = json.dumps(self.to_dict(), indent=2)
        if filename:
            with open(filename, 'w') as f:
                f.write(json_str)
        return json_str

    @classmethod
    def from_json(cls, json_data: str = None, filename: str = None) -> 'Genome':
        """Deserialize from JSON string or file"""
        if filename:
            with open(filename, 'r') as f:
                json_data = f.read()

        data = json.loads(json_data)
        return cls.from_dict(data)

    def __eq__(self, other):
        if not isinstance(other, Genome):
            return NotImplemented
        return (self.tree == other.tree and self.fitness == other.fitness
                and self.generation == other.generation)

    def __repr__(self):
        return f"Genome({self.tree!r}, fitness={self.fitness!r}, generation={self.generation})"

    def __str__(self) -> str:
        """String representation of the genome"""
        lines = [f"Genome (generation {self.generation}):"]
        lines.append(f"  Fitness: {self.fitness:.6f}")
        lines.append(f"  Complexity: {self.get_complexity()}, Depth: {self.get_depth()}")
        lines.append(f"  Expression: {self.tree}")
        return '\n'.join(lines)
