from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from symspec.diagnostics.style import TraceStyle


class EvaluationDetail(BaseModel):
    """
    Outcome of one condition of a traced evaluation.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    condition: str = Field(description="Rendered form of the condition.")
    passed: bool
    actual: Any = Field(default=None, description="Left operand value of a failed comparison, when known.")

    def __str__(self) -> str:
        if self.passed:
            return f"{self.condition}: PASSED"
        if self.actual is not None:
            return f"{self.condition}: FAILED (actual: {self.actual!r})"
        return f"{self.condition}: FAILED"


class EvaluationResult(BaseModel):
    """
    Outcome of a traced evaluation, with one detail per evaluated condition in evaluation order.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    is_satisfied: bool
    details: tuple[EvaluationDetail, ...] = ()

    @property
    def summary(self) -> Literal["PASSED", "FAILED"]:
        return "PASSED" if self.is_satisfied else "FAILED"

    def failure_reasons(self) -> tuple[str, ...]:
        """
        Rendered details of the conditions that failed.
        """
        return tuple(str(detail) for detail in self.details if not detail.passed)

    def passed_conditions(self) -> tuple[str, ...]:
        """
        Conditions that passed.
        """
        return tuple(detail.condition for detail in self.details if detail.passed)

    def render(self, style: TraceStyle | None = None) -> str:
        """
        Render the result with ``style``, plain text by default.
        """
        from symspec.diagnostics.style import DefaultTraceStyle  # noqa: PLC0415

        return (style or DefaultTraceStyle()).render(self)

    def __bool__(self) -> bool:
        return self.is_satisfied

    def __str__(self) -> str:
        return self.render()
