"""Holiday engine: resolve a rule set and order the results."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from holidaycalc.domain import HolidayRule, Settings
from holidaycalc.resolver import (
    Resolution,
    ResolutionContext,
    ResolutionStatus,
    resolve,
    resolve_date,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedHoliday:
    name: str
    date: date


@dataclass(frozen=True)
class HolidayReport:
    start_date: date
    holidays: list[ResolvedHoliday]
    failures: list[Resolution] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def resolve_all(
    rules: Iterable[HolidayRule],
    start_date: date,
    settings: Settings | None = None,
) -> HolidayReport:
    if settings is None:
        settings = Settings()

    rules = list(rules)
    context = ResolutionContext.build(
        start_date, rules, max_reference_depth=settings.max_reference_depth
    )

    holidays: list[ResolvedHoliday] = []
    failures: list[Resolution] = []
    skipped: list[str] = []
    for rule in rules:
        if settings.fail_fast:
            result = resolve_date(rule, context)
            resolution = (
                Resolution(rule.name, ResolutionStatus.NO_DATE)
                if result is None
                else Resolution(rule.name, ResolutionStatus.RESOLVED, date=result)
            )
        else:
            resolution = resolve(rule, context)

        if resolution.status is ResolutionStatus.FAILED:
            logger.error("Could not resolve holiday %s", resolution.error)
            failures.append(resolution)
            continue
        if resolution.date is None or resolution.date.year <= 1:
            skipped.append(rule.name)
            continue
        logger.debug("%s -> %s", rule.name, resolution.date.isoformat())
        holidays.append(ResolvedHoliday(name=rule.name, date=resolution.date))

    # sorted() is stable, so holidays sharing a date keep their input order
    holidays = sorted(holidays, key=lambda item: item.date)
    return HolidayReport(
        start_date=start_date,
        holidays=holidays,
        failures=failures,
        skipped=skipped,
    )


def compute_holidays(
    rules: Iterable[HolidayRule],
    start_date: date,
    settings: Settings | None = None,
) -> list[ResolvedHoliday]:
    """Return the holidays of the year following ``start_date`` in date order.

    Rules that fail to resolve are logged and left out; pass a ``Settings``
    with ``fail_fast=True`` to have the first failure raised instead.
    """
    return resolve_all(rules, start_date, settings).holidays
