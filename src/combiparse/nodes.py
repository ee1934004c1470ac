import logging
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .errors import ConstructionError, UnresolvedRecursionError

logger = logging.getLogger(__name__)


class Captured:
    """Result of a capture node. Never equal to a plain tuple."""

    __slots__ = ("label", "value")

    def __init__(self, label: str, value: Any):
        object.__setattr__(self, "label", label)
        object.__setattr__(self, "value", value)

    def __setattr__(self, name, value):
        raise AttributeError("Captured results are immutable")

    def __eq__(self, other):
        if not isinstance(other, Captured):
            return NotImplemented
        return self.label == other.label and self.value == other.value

    def __hash__(self):
        return hash((Captured, self.label, self.value))

    def __repr__(self) -> str:
        return f"Captured({self.label!r}, {self.value!r})"


# ---------------- grammar nodes ----------------
class Node:
    """Base class of every grammar construct.

    ``kind`` is the tag the engine dispatches on. Nodes are read-only once
    ``__init__`` returns; the only exception is ``Recursion.target``, which
    its resolver binds exactly once.
    """

    kind = "node"
    __slots__ = ()

    def _set(self, **fields):
        for name, value in fields.items():
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} nodes are immutable")

    def __repr__(self) -> str:
        return describe(self)


class Literal(Node):
    kind = "literal"
    __slots__ = ("text",)

    def __init__(self, text: str):
        self._set(text=text)


class Range(Node):
    kind = "range"
    __slots__ = ("low", "high")

    def __init__(self, low: int, high: int):
        self._set(low=low, high=high)


class Sequence(Node):
    kind = "sequence"
    __slots__ = ("nodes",)

    def __init__(self, nodes: Tuple[Node, ...]):
        self._set(nodes=tuple(nodes))


class Choice(Node):
    kind = "choice"
    __slots__ = ("nodes",)

    def __init__(self, nodes: Tuple[Node, ...]):
        self._set(nodes=tuple(nodes))


class Repeat(Node):
    kind = "repeat"
    __slots__ = ("node",)

    def __init__(self, node: Node):
        self._set(node=node)


class Exclusion(Node):
    kind = "exclusion"
    __slots__ = ("node", "forbidden")

    def __init__(self, node: Node, forbidden: Node):
        self._set(node=node, forbidden=forbidden)


class Capture(Node):
    kind = "capture"
    __slots__ = ("label", "node")

    def __init__(self, label: str, node: Node):
        self._set(label=label, node=node)


class Recursion(Node):
    kind = "recursion"
    __slots__ = ("target", "name")

    def __init__(self, name: Optional[str] = None):
        self._set(target=None, name=name)

    @property
    def resolved(self) -> bool:
        return self.target is not None

    def _bind(self, node: Node):
        if self.target is not None:
            raise UnresolvedRecursionError(
                f"recursion {describe(self)} is already resolved"
            )
        self._set(target=node)


class Action(Node):
    kind = "action"
    __slots__ = ("node", "func")

    def __init__(self, node: Node, func: Callable[[Any], Any]):
        self._set(node=node, func=func)


class Empty(Node):
    kind = "empty"
    __slots__ = ()


EMPTY = Empty()


def describe(node: Node, depth: int = 2) -> str:
    """Short human-readable form of a node, used in reprs and error messages."""
    kind = node.kind
    if kind == "literal":
        return f"Literal({node.text!r})"
    if kind == "range":
        return f"Range({chr(node.low)!r}..{chr(node.high)!r})"
    if kind == "empty":
        return "Empty"
    if kind == "recursion":
        state = "" if node.resolved else ", unresolved"
        return f"Recursion({node.name or hex(id(node))}{state})"
    if depth <= 0:
        return f"{type(node).__name__}(...)"
    if kind in ("sequence", "choice"):
        inner = ", ".join(describe(n, depth - 1) for n in node.nodes)
        return f"{type(node).__name__}({inner})"
    if kind == "capture":
        return f"Capture({node.label!r}, {describe(node.node, depth - 1)})"
    if kind == "exclusion":
        return (
            f"Exclusion({describe(node.node, depth - 1)}, "
            f"{describe(node.forbidden, depth - 1)})"
        )
    if kind == "action":
        name = getattr(node.func, "__name__", "func")
        return f"Action({describe(node.node, depth - 1)}, {name})"
    if kind == "repeat":
        return f"Repeat({describe(node.node, depth - 1)})"
    return type(node).__name__


# ---------------- builder API ----------------
def _check_node(value, what: str) -> Node:
    if not isinstance(value, Node):
        raise ConstructionError(f"{what} must be a grammar node, got {value!r}")
    return value


def _single_char(value, what: str) -> int:
    if not isinstance(value, str) or len(value) != 1:
        raise ConstructionError(f"{what} must be a single character, got {value!r}")
    return ord(value)


def literal(text: str) -> Literal:
    if not isinstance(text, str):
        raise ConstructionError(f"literal text must be a str, got {text!r}")
    return Literal(text)


def literal_choice(*texts: str) -> Choice:
    """Ordered choice between literals: ``literal_choice('e', 'E')``."""
    return Choice(tuple(literal(t) for t in texts))


def char_range(low: str, high: str) -> Range:
    """Single character whose code point lies in ``[low, high]``."""
    low_code = _single_char(low, "range lower bound")
    high_code = _single_char(high, "range upper bound")
    if low_code > high_code:
        raise ConstructionError(
            f"range lower bound {low!r} is greater than upper bound {high!r}"
        )
    return Range(low_code, high_code)


def sequence(*nodes: Node) -> Sequence:
    return Sequence(tuple(_check_node(n, "sequence item") for n in nodes))


def _flatten(items: Iterable[Any]) -> List[Any]:
    flat = []
    for item in items:
        if isinstance(item, (list, tuple)):
            flat.extend(item)
        else:
            flat.append(item)
    return flat


def choice(*nodes) -> Choice:
    """Ordered choice. List/tuple arguments are flattened one level."""
    return Choice(tuple(_check_node(n, "choice alternative") for n in _flatten(nodes)))


def optional(node: Node) -> Choice:
    return Choice((_check_node(node, "optional item"), EMPTY))


def repeat(node: Node) -> Repeat:
    return Repeat(_check_node(node, "repeat item"))


def repeat_at_least_once(node: Node) -> Sequence:
    _check_node(node, "repeat item")
    return Sequence((node, Repeat(node)))


def repeat_exact(node: Node, count: int) -> Sequence:
    _check_node(node, "repeat item")
    if not isinstance(count, int) or isinstance(count, bool) or count < 0:
        raise ConstructionError(f"repeat count must be a non-negative int, got {count!r}")
    return Sequence((node,) * count)


def repeat_alternating(first: Node, second: Node) -> Sequence:
    """``first (second first)*``, e.g. comma separated lists."""
    _check_node(first, "repeated item")
    _check_node(second, "separator")
    return Sequence((first, Repeat(Sequence((second, first)))))


def capture(label: str, node: Node) -> Capture:
    if not isinstance(label, str):
        raise ConstructionError(f"capture label must be a str, got {label!r}")
    return Capture(label, _check_node(node, "captured item"))


def exclusion(base: Node, forbidden: Node) -> Exclusion:
    return Exclusion(
        _check_node(base, "exclusion base"), _check_node(forbidden, "excluded item")
    )


def with_action(node: Node, func: Callable[[Any], Any]) -> Action:
    if not callable(func):
        raise ConstructionError(f"semantic action must be callable, got {func!r}")
    return Action(_check_node(node, "action item"), func)


def create_recursion(
    name: Optional[str] = None,
) -> Tuple[Recursion, Callable[[Node], Node]]:
    """Forward-declared node for self-referential grammars.

    Returns ``(placeholder, resolve)``. The placeholder can be used in other
    nodes right away; ``resolve(node)`` must be called once, before any
    parse can reach the placeholder, and returns ``node`` unchanged.
    """
    placeholder = Recursion(name)

    def resolve(node: Node) -> Node:
        _check_node(node, "recursion target")
        placeholder._bind(node)
        logger.debug("resolved %s to %s", describe(placeholder), describe(node, 1))
        return node

    return placeholder, resolve
