"""
symbolic_gp/ast_nodes.py - Expression tree nodes and safe evaluation
"""
import math
from abc import ABC, abstractmethod
from typing import Dict, Any, List, Iterator, Tuple

Bindings = Dict[str, float]
Path = Tuple[int, ...]

# Fixed binary vocabulary: op name -> infix symbol
BINARY_OPS = {
    'add': '+',
    'sub': '-',
    'mul': '*',
    'div': '/',
}

# Result of any operation that would otherwise be non-finite (division by zero included)
INVALID_RESULT = 1.0


class UnboundVariableError(KeyError):
    """Raised when a variable has no value in the bindings table"""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"variable '{self.name}' is not bound"


class ASTNode(ABC):
    """Base class for all expression tree nodes.

    Nodes are immutable once built. Equality and hashing are structural so
    trees can be deduplicated with sets; positions inside a tree are
    addressed by paths (tuples of child indices) rather than by value.
    """
    children: Tuple['ASTNode', ...] = ()

    @abstractmethod
    def evaluate(self, bindings: Bindings) -> float:
        """Evaluate the node against a variable bindings table"""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary"""
        pass

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ASTNode':
        """Deserialize from dictionary"""
        pass

    @abstractmethod
    def _key(self) -> tuple:
        pass

    def is_terminal(self) -> bool:
        return not self.children

    def get_all_nodes(self) -> List['ASTNode']:
        """Get all nodes in this subtree, pre-order"""
        return [node for _, node in self.iter_paths()]

    def iter_paths(self, prefix: Path = ()) -> Iterator[Tuple[Path, 'ASTNode']]:
        """Yield (path, node) pairs for this subtree, pre-order"""
        yield prefix, self
        for index, child in enumerate(self.children):
            yield from child.iter_paths(prefix + (index,))

    def get_depth(self) -> int:
        """Edges on the longest root-to-leaf path (a leaf has depth 0)"""
        return self._depth

    def size(self) -> int:
        """Number of nodes in this subtree"""
        return self._size

    def __eq__(self, other):
        if not isinstance(other, ASTNode):
            return NotImplemented
        return self is other or self._key() == other._key()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return self._hash

    def __setattr__(self, name, value):
        if getattr(self, '_frozen', False):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    def _freeze(self):
        self._depth = 1 + max(child._depth for child in self.children) if self.children else 0
        self._size = 1 + sum(child._size for child in self.children)
        self._hash = hash(self._key())
        self._frozen = True


class Variable(ASTNode):
    """Input variable, resolved by name at evaluation time"""

    def __init__(self, name: str):
        self.name = name
        self._freeze()

    def evaluate(self, bindings: Bindings) -> float:
        try:
            return bindings[self.name]
        except KeyError:
            raise UnboundVariableError(self.name) from None

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'Variable', 'name': self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Variable':
        return cls(data['name'])

    def _key(self) -> tuple:
        return ('Variable', self.name)

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"Variable({self.name!r})"


class Constant(ASTNode):
    """Numeric constant"""

    def __init__(self, value: float):
        self.value = float(value)
        self._freeze()

    def evaluate(self, bindings: Bindings) -> float:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'Constant', 'value': self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Constant':
        return cls(data['value'])

    def _key(self) -> tuple:
        return ('Constant', self.value)

    def __str__(self):
        return f"{self.value:g}"

    def __repr__(self):
        return f"Constant({self.value!r})"


class BinaryOp(ASTNode):
    """Binary operations: add, sub, mul and protected div"""

    def __init__(self, op: str, left: ASTNode, right: ASTNode):
        if op not in BINARY_OPS:
            raise ValueError(f"Unknown binary operator: {op}")
        self.op = op
        self.left = left
        self.right = right
        self.children = (left, right)
        self._freeze()

    def evaluate(self, bindings: Bindings) -> float:
        left_val = self.left.evaluate(bindings)
        right_val = self.right.evaluate(bindings)

        if self.op == 'add':
            return finite_or_invalid(left_val + right_val)
        elif self.op == 'sub':
            return finite_or_invalid(left_val - right_val)
        elif self.op == 'mul':
            return finite_or_invalid(left_val * right_val)
        # Protected division
        return safe_divide(left_val, right_val)

    def with_children(self, left: ASTNode, right: ASTNode) -> 'BinaryOp':
        """Same operator over new children"""
        return BinaryOp(self.op, left, right)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'BinaryOp',
            'op': self.op,
            'left': self.left.to_dict(),
            'right': self.right.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BinaryOp':
        left = node_from_dict(data['left'])
        right = node_from_dict(data['right'])
        return cls(data['op'], left, right)

    def _key(self) -> tuple:
        return ('BinaryOp', self.op, self.left._key(), self.right._key())

    def __str__(self):
        return f"({self.left} {BINARY_OPS[self.op]} {self.right})"

    def __repr__(self):
        return f"BinaryOp({self.op!r}, {self.left!r}, {self.right!r})"


def finite_or_invalid(value: float) -> float:
    """value itself when finite, otherwise INVALID_RESULT"""
    if not math.isfinite(value):
        return INVALID_RESULT
    return value


def safe_divide(numerator: float, divisor: float) -> float:
    """Division that yields INVALID_RESULT instead of failing"""
    if divisor == 0:
        return INVALID_RESULT
    return finite_or_invalid(numerator / divisor)


def evaluate(tree: ASTNode, bindings: Bindings) -> float:
    """Evaluate an expression tree for one bindings table"""
    return tree.evaluate(bindings)


# Node creation helpers
def node_from_dict(data: Dict[str, Any]) -> ASTNode:
    """Create node from dictionary representation"""
    node_type = data['type']

    if node_type == 'Variable':
        return Variable.from_dict(data)
    elif node_type == 'Constant':
        return Constant.from_dict(data)
    elif node_type == 'BinaryOp':
        return BinaryOp.from_dict(data)
    else:
        raise ValueError(f"Unknown node type: {node_type}")


def add(left: ASTNode, right: ASTNode) -> BinaryOp:
    return BinaryOp('add', left, right)


def sub(left: ASTNode, right: ASTNode) -> BinaryOp:
    return BinaryOp('sub', left, right)


def mul(left: ASTNode, right: ASTNode) -> BinaryOp:
    return BinaryOp('mul', left, right)


def div(left: ASTNode, right: ASTNode) -> BinaryOp:
    return BinaryOp('div', left, right)
