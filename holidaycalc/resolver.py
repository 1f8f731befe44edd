"""Resolve a single holiday rule to its next date."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from types import MappingProxyType

from holidaycalc.calendar_utils import (
    add_days,
    add_months,
    add_years,
    anniversary,
    day_of_week,
    days_in_month,
    first_day_of_month,
    is_weekend,
)
from holidaycalc.domain import (
    DayOfWeekOnOrAfterRule,
    DaysAfterHolidayRule,
    EasterRule,
    FixedDateRule,
    HolidayRule,
    LastFullWeekOfMonthRule,
    UnrecognizedRule,
    WeekdayOnOrAfterRule,
    WeekOfMonthRule,
)
from holidaycalc.easter import next_easter_on_or_after

logger = logging.getLogger(__name__)


class RuleResolutionError(ValueError):
    def __init__(self, rule_name: str, message: str) -> None:
        super().__init__(f"{rule_name}: {message}")
        self.rule_name = rule_name


class InvalidWeekdayError(RuleResolutionError):
    pass


class InvalidRuleDateError(RuleResolutionError):
    pass


class UnknownHolidayError(RuleResolutionError):
    pass


class CyclicReferenceError(RuleResolutionError):
    pass


class ReferenceDepthError(RuleResolutionError):
    pass


class DateOutOfRangeError(RuleResolutionError):
    pass


class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    NO_DATE = "no_date"
    FAILED = "failed"


@dataclass(frozen=True)
class Resolution:
    rule_name: str
    status: ResolutionStatus
    date: date | None = None
    error: str | None = None


@dataclass(frozen=True)
class ResolutionContext:
    start_date: date
    rules_by_name: Mapping[str, HolidayRule] = field(default_factory=dict)
    max_reference_depth: int = 32

    @classmethod
    def build(
        cls,
        start_date: date,
        rules: Iterable[HolidayRule],
        max_reference_depth: int = 32,
    ) -> "ResolutionContext":
        by_name: dict[str, HolidayRule] = {}
        for rule in rules:
            # the first definition of a name is the one references see
            by_name.setdefault(rule.name, rule)
        return cls(
            start_date=start_date,
            rules_by_name=MappingProxyType(by_name),
            max_reference_depth=max_reference_depth,
        )


def _check_weekday(rule_name: str, weekday: int) -> None:
    if not 0 <= weekday <= 6:
        raise InvalidWeekdayError(
            rule_name, f"day of week must be between 0 (Sunday) and 6, got {weekday}"
        )


def _anniversary_on_or_after(
    rule_name: str, month: int, day: int, start: date
) -> date:
    year = start.year
    try:
        candidate = anniversary(year, month, day)
        if candidate < start and year < date.max.year:
            year += 1
            candidate = anniversary(year, month, day)
    except ValueError as exc:
        raise InvalidRuleDateError(
            rule_name, f"{month:02d}-{day:02d} does not exist in {year}"
        ) from exc
    if candidate < start:
        raise DateOutOfRangeError(
            rule_name, f"no {month:02d}-{day:02d} on or after {start.isoformat()}"
        )
    return candidate


def _first_of_target_month(basis: date, month: int) -> date:
    work = first_day_of_month(basis)
    while work.month != month:
        work = add_months(work, 1)
    return work


def nth_weekday_of_month(
    month: int, week: int, weekday: int, window_start: date, basis: date | None = None
) -> date:
    """Return the ``week``-th ``weekday`` of ``month`` on or after ``window_start``.

    Months are scanned forward from ``basis`` (the window start by default).
    Week 5 means the last occurrence: when a fifth one does not exist the
    fourth is returned.
    """
    basis = basis or window_start
    while True:
        work = _first_of_target_month(basis, month)
        while day_of_week(work) != weekday:
            work = add_days(work, 1)
        day = work.day + (week - 1) * 7
        if day > days_in_month(work.year, work.month):
            day -= 7
        result = work.replace(day=day)
        if result >= window_start:
            return result
        basis = add_years(basis, 1)


def weekday_on_or_after(
    weekday: int, month: int, day: int, window_start: date, basis: date | None = None
) -> date:
    """Return the first ``weekday`` on or after ``month``/``day`` within the window."""
    basis = basis or window_start
    while True:
        work = add_days(_first_of_target_month(basis, month), day - 1)
        while day_of_week(work) != weekday:
            work = add_days(work, 1)
        if work >= window_start:
            return work
        basis = add_years(basis, 1)


def last_full_week_of_month(month: int, weekday: int, window_start: date) -> date:
    basis = window_start
    while True:
        result = nth_weekday_of_month(month, 5, weekday, window_start, basis)
        # the week (Sunday-Saturday) containing result spills into next month
        if add_days(result, 6 - weekday).month != month:
            result = add_days(result, -7)
        if result >= window_start:
            return result
        basis = add_years(basis, 1)


def _resolve_week_of_month(rule: WeekOfMonthRule, context: ResolutionContext) -> date:
    _check_weekday(rule.name, rule.weekday)
    return nth_weekday_of_month(rule.month, rule.week, rule.weekday, context.start_date)


def _resolve_day_of_week_on_or_after(
    rule: DayOfWeekOnOrAfterRule, context: ResolutionContext
) -> date:
    _check_weekday(rule.name, rule.weekday)
    return weekday_on_or_after(rule.weekday, rule.month, rule.day, context.start_date)


def _resolve_weekday_on_or_after(
    rule: WeekdayOnOrAfterRule, context: ResolutionContext
) -> date:
    result = _anniversary_on_or_after(rule.name, rule.month, rule.day, context.start_date)
    while is_weekend(result):
        result = add_days(result, 1)
    return result


def _resolve_last_full_week(
    rule: LastFullWeekOfMonthRule, context: ResolutionContext
) -> date:
    _check_weekday(rule.name, rule.weekday)
    return last_full_week_of_month(rule.month, rule.weekday, context.start_date)


def _resolve_days_after(
    rule: DaysAfterHolidayRule,
    context: ResolutionContext,
    chain: tuple[str, ...],
) -> date | None:
    basis = context.rules_by_name.get(rule.holiday)
    if basis is None:
        raise UnknownHolidayError(rule.name, f"referenced holiday {rule.holiday!r} is not defined")
    if basis.name in chain:
        cycle = " -> ".join([*chain, basis.name])
        raise CyclicReferenceError(rule.name, f"circular holiday reference: {cycle}")
    if len(chain) > context.max_reference_depth:
        raise ReferenceDepthError(
            rule.name,
            f"holiday references nested deeper than {context.max_reference_depth}",
        )
    basis_date = _resolve(basis, context, (*chain, basis.name))
    if basis_date is None:
        logger.debug("%s: referenced holiday %r has no date", rule.name, rule.holiday)
        return None
    return add_days(basis_date, rule.days)


def _resolve_fixed_date(rule: FixedDateRule, context: ResolutionContext) -> date | None:
    result = _anniversary_on_or_after(rule.name, rule.month, rule.day, context.start_date)
    if rule.is_periodic and (result.year - rule.start_year) % rule.every_x_years != 0:
        logger.debug(
            "%s: not observed in %d (every %d years from %d)",
            rule.name,
            result.year,
            rule.every_x_years,
            rule.start_year,
        )
        return None
    return result


def _dispatch(rule: HolidayRule, context: ResolutionContext, chain: tuple[str, ...]) -> date | None:
    if isinstance(rule, WeekOfMonthRule):
        return _resolve_week_of_month(rule, context)
    if isinstance(rule, DayOfWeekOnOrAfterRule):
        return _resolve_day_of_week_on_or_after(rule, context)
    if isinstance(rule, WeekdayOnOrAfterRule):
        return _resolve_weekday_on_or_after(rule, context)
    if isinstance(rule, LastFullWeekOfMonthRule):
        return _resolve_last_full_week(rule, context)
    if isinstance(rule, DaysAfterHolidayRule):
        return _resolve_days_after(rule, context, chain)
    if isinstance(rule, EasterRule):
        return next_easter_on_or_after(context.start_date)
    if isinstance(rule, FixedDateRule):
        return _resolve_fixed_date(rule, context)
    if isinstance(rule, UnrecognizedRule):
        logger.warning(
            "%s: unrecognized rule shape (markers: %s), skipped",
            rule.name,
            ", ".join(rule.markers) or "none",
        )
        return None
    raise TypeError(f"Unsupported rule type: {type(rule).__name__}")


def _resolve(rule: HolidayRule, context: ResolutionContext, chain: tuple[str, ...]) -> date | None:
    try:
        return _dispatch(rule, context, chain)
    except RuleResolutionError:
        raise
    except (OverflowError, ValueError) as exc:
        # roll-forward or offset left the range datetime.date can represent
        raise DateOutOfRangeError(
            rule.name, f"date outside the supported calendar range ({exc})"
        ) from exc


def resolve_date(rule: HolidayRule, context: ResolutionContext) -> date | None:
    """Return the next date of ``rule`` or ``None`` when it has none this cycle.

    Raises ``RuleResolutionError`` when the rule cannot be resolved.
    """
    return _resolve(rule, context, (rule.name,))


def resolve(rule: HolidayRule, context: ResolutionContext) -> Resolution:
    try:
        result = resolve_date(rule, context)
    except RuleResolutionError as exc:
        return Resolution(rule.name, ResolutionStatus.FAILED, error=str(exc))
    if result is None:
        return Resolution(rule.name, ResolutionStatus.NO_DATE)
    return Resolution(rule.name, ResolutionStatus.RESOLVED, date=result)
