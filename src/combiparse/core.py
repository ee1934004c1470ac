import logging
from typing import Any, Optional, Set, Tuple, Union

from .errors import (
    ChoiceExhaustedError,
    ExclusionViolationError,
    GrammarConfigError,
    IncompleteConsumptionError,
    LeftRecursionError,
    MatchError,
    NestingTooDeepError,
    ParseError,
    TransformError,
    UnresolvedRecursionError,
)
from .nodes import Captured, Node, describe

logger = logging.getLogger(__name__)


class Failure:
    """Unsuccessful attempt. Carries the ParseError that explains it."""

    __slots__ = ("error",)

    def __init__(self, error: ParseError):
        self.error = error

    def __repr__(self) -> str:
        return f"Failure({self.error.message!r}, pos={self.error.pos})"


Attempt = Union[Tuple[Any, int], Failure]


# ---------------- engine ----------------
def _match(node: Node, text: str, pos: int, active: Set[Tuple[int, int]]) -> Attempt:
    """Match ``node`` at ``pos``; return ``(value, end_pos)`` or a Failure.

    ``active`` holds the (recursion node, position) pairs currently being
    expanded, so a placeholder re-entered without consuming input is
    reported instead of overflowing the stack.
    """
    kind = node.kind

    if kind == "literal":
        lit = node.text
        if text.startswith(lit, pos):
            return lit, pos + len(lit)
        return Failure(MatchError(repr(lit), text[pos : pos + len(lit)], pos))

    elif kind == "range":
        if pos >= len(text):
            return Failure(MatchError(describe(node), None, pos))
        ch = text[pos]
        if node.low <= ord(ch) <= node.high:
            return ch, pos + 1
        return Failure(MatchError(describe(node), ch, pos))

    elif kind == "sequence":
        values = []
        cur = pos
        for child in node.nodes:
            res = _match(child, text, cur, active)
            if isinstance(res, Failure):
                return res
            val, cur = res
            values.append(val)
        return tuple(values), cur

    elif kind == "choice":
        errors = []
        for alt in node.nodes:
            res = _match(alt, text, pos, active)
            if not isinstance(res, Failure):
                return res
            errors.append(res.error)
        return Failure(ChoiceExhaustedError(errors, pos))

    elif kind == "repeat":
        items = []
        cur = pos
        while True:
            res = _match(node.node, text, cur, active)
            if isinstance(res, Failure):
                break
            val, new_pos = res
            # a zero-length match would loop forever
            if new_pos == cur:
                break
            items.append(val)
            cur = new_pos
        return items, cur

    elif kind == "exclusion":
        res = _match(node.node, text, pos, active)
        if isinstance(res, Failure):
            return res
        if isinstance(_match(node.forbidden, text, pos, active), Failure):
            return res
        return Failure(ExclusionViolationError(describe(node.forbidden), pos))

    elif kind == "capture":
        res = _match(node.node, text, pos, active)
        if isinstance(res, Failure):
            res.error.labels.append(node.label)
            return res
        val, end = res
        return Captured(node.label, val), end

    elif kind == "recursion":
        target = node.target
        if target is None:
            raise UnresolvedRecursionError(
                f"parse reached {describe(node)} before it was resolved"
            )
        key = (id(node), pos)
        if key in active:
            raise LeftRecursionError(
                f"{describe(node)} re-entered at position {pos} without consuming input"
            )
        active.add(key)
        try:
            return _match(target, text, pos, active)
        finally:
            active.discard(key)

    elif kind == "action":
        res = _match(node.node, text, pos, active)
        if isinstance(res, Failure):
            return res
        val, end = res
        try:
            return node.func(val), end
        except (GrammarConfigError, RecursionError):
            raise
        except Exception as e:
            err = TransformError(e, pos)
            err.__cause__ = e
            return Failure(err)

    elif kind == "empty":
        return None, pos

    raise TypeError(f"not a grammar node: {node!r}")


def attempt(node: Node, text: str, pos: int = 0) -> Attempt:
    """Run ``node`` against ``text`` starting at ``pos``.

    Returns ``(raw_value, consumed_length)`` on success and a ``Failure`` on
    a parse failure; the input does not have to be consumed completely.
    Configuration errors (unresolved or left recursion) are raised, and so
    is NestingTooDeepError when the input exhausts the recursion limit.
    """
    if not isinstance(text, str):
        raise TypeError(f"input must be a str, got {type(text).__name__}")
    try:
        res = _match(node, text, pos, set())
    except RecursionError:
        # one stack frame per node walked; deep nesting exhausts the limit
        raise NestingTooDeepError(pos).attach(text) from None
    if isinstance(res, Failure):
        res.error.attach(text)
        return res
    val, end = res
    return val, end - pos


# ---------------- public entrypoints ----------------
def _run(node: Node, text: str) -> Any:
    res = attempt(node, text)
    if isinstance(res, Failure):
        raise res.error
    val, consumed = res
    if consumed != len(text):
        raise IncompleteConsumptionError(val, consumed, consumed).attach(text)
    return val


def parse(node: Node, text: str) -> Any:
    """Parse the whole of ``text`` with ``node``; raise ParseError otherwise."""
    return _run(node, text)


def validate(node: Node, text: str) -> bool:
    try:
        _run(node, text)
    except ParseError:
        return False
    return True


class Grammar:
    """A start node plus a name, with ``parse``/``validate`` bound to it."""

    def __init__(self, start: Node, name: Optional[str] = None):
        if not isinstance(start, Node):
            raise TypeError(f"start must be a grammar node, got {start!r}")
        self.start = start
        self.name = name or getattr(start, "name", None) or type(start).__name__

    def parse(self, text: str) -> Any:
        logger.debug("parsing %d characters with grammar %s", len(text), self.name)
        try:
            val = _run(self.start, text)
        except ParseError as e:
            logger.debug(
                "grammar %s failed at position %d: %s", self.name, e.pos, e.message
            )
            raise
        logger.debug("grammar %s parsed input successfully", self.name)
        return val

    def validate(self, text: str) -> bool:
        try:
            self.parse(text)
        except ParseError:
            return False
        return True

    def __repr__(self) -> str:
        return f"Grammar({self.name!r})"
