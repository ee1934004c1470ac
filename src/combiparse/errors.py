from typing import Any, List, Optional


class CombiparseError(Exception):
    pass


# ---------------- build-time / configuration errors ----------------
class ConstructionError(CombiparseError, ValueError):
    """Invalid arguments to a grammar builder function."""


class GrammarConfigError(CombiparseError):
    """A grammar that cannot be run at all. Never treated as a parse failure."""


class UnresolvedRecursionError(GrammarConfigError):
    pass


class LeftRecursionError(GrammarConfigError):
    pass


# ---------------- location helpers ----------------
def _loc(text: str, pos: int):
    if pos < 0:
        pos = 0
    line = text.count("\n", 0, pos) + 1
    last_n = text.rfind("\n", 0, pos)
    if last_n == -1:
        col = pos + 1
        line_start = 0
    else:
        col = pos - last_n
        line_start = last_n + 1
    return line, col, line_start


def format_location(text: str, pos: int, lookahead_len: int = 20) -> str:
    line, col, line_start = _loc(text, pos)
    line_end = text.find("\n", line_start)
    if line_end == -1:
        line_end = len(text)
    snippet = text[line_start:line_end]
    caret = " " * (col - 1) + "^"
    found_disp = text[pos : pos + lookahead_len].replace("\n", "\\n")
    found_part = f"\nFound: '{found_disp}'" if found_disp else "\nFound: end of input"
    return f"Line {line}, Column {col}:{found_part}\n{snippet}\n{caret}"


# ---------------- parse failures ----------------
class ParseError(CombiparseError):
    """A recoverable failure of some node at some position.

    ``pos`` is the absolute offset into the input where the failing node
    started. ``text`` is attached by the top-level entry points so that
    ``str()`` can render a line/column view of the input. ``labels`` is the
    trail of capture labels the failure propagated through, innermost first.
    """

    def __init__(self, message: str, pos: int = 0, text: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.pos = pos
        self.text = text
        self.labels: List[str] = []

    def attach(self, text: str) -> "ParseError":
        self.text = text
        return self

    def children(self) -> List["ParseError"]:
        return []

    def furthest(self) -> "ParseError":
        """Leaf error that started furthest into the input."""
        best = self
        for child in self.children():
            cand = child.furthest()
            if cand.pos > best.pos or (best is self and cand.pos == best.pos):
                best = cand
        return best

    def _headline(self) -> str:
        if self.labels:
            trail = ".".join(reversed(self.labels))
            return f"({trail}) {self.message}"
        return self.message

    def __str__(self) -> str:
        if self.text is None:
            return self._headline()
        return f"{self._headline()}\n{format_location(self.text, self.pos)}"


class MatchError(ParseError):
    def __init__(self, expected: str, found: Optional[str], pos: int):
        self.expected = expected
        self.found = found
        got = repr(found) if found else "end of input"
        super().__init__(f"expected {expected}, but got {got}", pos)


class ChoiceExhaustedError(ParseError):
    def __init__(self, errors: List[ParseError], pos: int):
        self.errors = errors
        super().__init__(
            f"none of {len(errors)} alternatives matched", pos
        )

    def children(self) -> List[ParseError]:
        return list(self.errors)

    def _headline(self) -> str:
        lines = [super()._headline()]
        for err in self.errors:
            sub = err._headline().replace("\n", "\n    ")
            lines.append(f"  - {sub}")
        return "\n".join(lines)


class ExclusionViolationError(ParseError):
    def __init__(self, forbidden: str, pos: int):
        self.forbidden = forbidden
        super().__init__(f"excluded pattern {forbidden} matched", pos)


class TransformError(ParseError):
    def __init__(self, original: Exception, pos: int):
        self.original = original
        super().__init__(
            f"error in semantic action: {type(original).__name__}: {original}", pos
        )


class IncompleteConsumptionError(ParseError):
    def __init__(self, value: Any, consumed: int, pos: int):
        self.value = value
        self.consumed = consumed
        super().__init__(f"unconsumed input after {consumed} characters", pos)


class NestingTooDeepError(ParseError):
    """The input nests deeper than the interpreter's recursion limit allows."""

    def __init__(self, pos: int):
        super().__init__("input is nested too deeply to parse", pos)
