from __future__ import annotations

import calendar
from collections.abc import Callable
from datetime import datetime, time, timedelta, tzinfo
from typing import Any, TypeVar

from symspec.expr.nodes import And, Call, Compare, Conditional, Const, Lambda, Node, Var
from symspec.expr.substitute import rebind
from symspec.expr.symbol import Symbol
from symspec.properties.base import PropertyAccessor
from symspec.specification import ExpressionSpecification, Specification
from symspec.types import CompareOp

T_contra = TypeVar("T_contra", contravariant=True)

Clock = Callable[[], datetime]

# Smallest step of datetime, used to close half-open periods.
RESOLUTION = timedelta(microseconds=1)
WEEKEND = (calendar.SATURDAY, calendar.SUNDAY)


class TemporalSpecification(PropertyAccessor[T_contra]):
    """
    Generate leaf specifications about a datetime path of the entity.

    Helpers relative to "now" read ``clock`` once, when the specification is built, and embed the instant as a
    constant. Calendar helpers build their bounds with ``tz``.
    """

    def __init__(self, param: Var, path: Node, *, clock: Clock = datetime.now, tz: tzinfo | None = None):
        super().__init__(param, path)
        self.clock = clock
        self.tz = tz

    def _compare(self, op: CompareOp, value: Any) -> Specification[T_contra]:  # noqa: ANN401
        return self._build(Compare(op, self.path, Const(value)))

    def before(self, moment: datetime) -> Specification[T_contra]:
        return self._compare("<", moment)

    def after(self, moment: datetime) -> Specification[T_contra]:
        return self._compare(">", moment)

    def on_or_before(self, moment: datetime) -> Specification[T_contra]:
        return self._compare("<=", moment)

    def on_or_after(self, moment: datetime) -> Specification[T_contra]:
        return self._compare(">=", moment)

    def between(self, start: datetime, end: datetime) -> Specification[T_contra]:
        """Inclusive on both ends."""
        return self.on_or_after(start).and_(self.on_or_before(end))

    def within(self, delta: timedelta) -> Specification[T_contra]:
        """Within ``delta`` of now, in either direction."""
        now = self.clock()
        return self.between(now - delta, now + delta)

    def in_the_past(self) -> Specification[T_contra]:
        return self.before(self.clock())

    def in_the_future(self) -> Specification[T_contra]:
        return self.after(self.clock())

    def today(self) -> Specification[T_contra]:
        start = self.clock().replace(hour=0, minute=0, second=0, microsecond=0)
        return self.between(start, start + timedelta(days=1) - RESOLUTION)

    def in_year(self, year: int) -> Specification[T_contra]:
        start = datetime(year, 1, 1, tzinfo=self.tz)
        return self.between(start, datetime(year + 1, 1, 1, tzinfo=self.tz) - RESOLUTION)

    def in_month(self, year: int, month: int) -> Specification[T_contra]:
        start = datetime(year, month, 1, tzinfo=self.tz)
        next_start = datetime(year + month // 12, month % 12 + 1, 1, tzinfo=self.tz)
        return self.between(start, next_start - RESOLUTION)

    def on_day_of_week(self, weekday: int) -> Specification[T_contra]:
        """
        ``weekday`` counts from Monday as 0, like ``datetime.weekday`` and the ``calendar`` constants.
        """
        return self._build(Compare("==", Call("weekday", target=self.path), Const(weekday)))

    def on_weekend(self) -> Specification[T_contra]:
        saturday, sunday = WEEKEND
        return self.on_day_of_week(saturday).or_(self.on_day_of_week(sunday))

    def on_weekday(self) -> Specification[T_contra]:
        return self.on_weekend().not_()

    def within_last_days(self, days: int) -> Specification[T_contra]:
        return self.after(self.clock() - timedelta(days=days))

    def within_next_days(self, days: int) -> Specification[T_contra]:
        now = self.clock()
        return self.after(now).and_(self.before(now + timedelta(days=days)))

    def time_between(self, start: time, end: time) -> Specification[T_contra]:
        """Time of day between ``start`` and ``end``, inclusive, on any date."""
        time_of_day = Call("time", target=self.path)
        return self._build(And(Compare(">=", time_of_day, Const(start)), Compare("<=", time_of_day, Const(end))))


class NullableTemporalSpecification(PropertyAccessor[T_contra]):
    """
    Generate leaf specifications about a datetime path that may be ``None``.
    """

    def __init__(self, param: Var, path: Node, *, clock: Clock = datetime.now, tz: tzinfo | None = None):
        super().__init__(param, path)
        self.clock = clock
        self.tz = tz

    def has_value(self) -> Specification[T_contra]:
        return self._build(Compare("is not", self.path, Const(None)))

    def is_null(self) -> Specification[T_contra]:
        return self.has_value().not_()

    def has_value_and(
        self,
        configure: Callable[[TemporalSpecification[T_contra]], Specification[T_contra]],
    ) -> Specification[T_contra]:
        """
        Not ``None`` and satisfying the specification built by ``configure``.

        The inner specification sits in the true branch of a conditional, so it is never evaluated against ``None``,
        even by a trace that evaluates every condition.

        Examples:
            ```python
            expires_soon = Temporal.optional(lambda c: c.expires_at).has_value_and(lambda t: t.within_next_days(7))
            ```
        """
        inner = configure(TemporalSpecification(self.param, self.path, clock=self.clock, tz=self.tz))
        param, (guard, body) = rebind([self.has_value().to_symbolic(), inner.to_symbolic()])
        return ExpressionSpecification(expression=Lambda(param, Conditional(guard, body, Const(False))))


class Temporal:
    """
    Entry point for temporal specifications.
    """

    @staticmethod
    def of(
        selector: Callable[[Symbol], Any],
        *,
        clock: Clock = datetime.now,
        tz: tzinfo | None = None,
        entity_type: Any = None,  # noqa: ANN401
    ) -> TemporalSpecification[Any]:
        """
        Select a datetime path of the entity, e.g. ``Temporal.of(lambda o: o.created_at)``.
        """
        return TemporalSpecification.select(selector, entity_type=entity_type, clock=clock, tz=tz)

    @staticmethod
    def optional(
        selector: Callable[[Symbol], Any],
        *,
        clock: Clock = datetime.now,
        tz: tzinfo | None = None,
        entity_type: Any = None,  # noqa: ANN401
    ) -> NullableTemporalSpecification[Any]:
        return NullableTemporalSpecification.select(selector, entity_type=entity_type, clock=clock, tz=tz)
