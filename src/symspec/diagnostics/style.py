from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING, Protocol

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

if TYPE_CHECKING:
    from symspec.diagnostics.result import EvaluationResult


class TraceStyle(Protocol):
    """
    Protocol for evaluation result rendering.
    """

    def render(self, result: EvaluationResult) -> str:
        """
        Render the evaluation result into a string representation.
        """
        ...


class DefaultTraceStyle(TraceStyle):
    """
    Plain text rendering.

    Examples:
        ```text
        Result: FAILED
        Details:
          - price > 200: PASSED
          - category == 'Furniture': FAILED (actual: 'Electronics')
        ```
    """

    def __init__(self, indent: str = "  "):
        self.indent = indent

    def render(self, result: EvaluationResult) -> str:
        lines = [f"Result: {result.summary}"]
        if result.details:
            lines.append("Details:")
            lines.extend(f"{self.indent}- {detail}" for detail in result.details)
        return "\n".join(lines)


class RichTraceStyle(TraceStyle):
    """
    Tree rendering for terminals, built with rich.
    """

    def __init__(self, *, width: int = 100, color: bool = False):
        self.width = width
        self.color = color

    def render(self, result: EvaluationResult) -> str:
        tree = Tree(Text(f"Result: {result.summary}", style="bold green" if result.is_satisfied else "bold red"))
        for detail in result.details:
            tree.add(Text(str(detail), style="green" if detail.passed else "red"))

        buffer = StringIO()
        console = Console(
            file=buffer,
            width=self.width,
            force_terminal=self.color,
            color_system="standard" if self.color else None,
        )
        console.print(tree)
        return buffer.getvalue().rstrip("\n")
