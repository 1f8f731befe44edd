"""Holiday rule models and engine settings."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator


class RuleKind(str, Enum):
    """Recognized rule shapes, listed in dispatch precedence order."""

    WEEK_OF_MONTH = "week_of_month"
    DAY_OF_WEEK_ON_OR_AFTER = "day_of_week_on_or_after"
    WEEKDAY_ON_OR_AFTER = "weekday_on_or_after"
    LAST_FULL_WEEK_OF_MONTH = "last_full_week_of_month"
    DAYS_AFTER_HOLIDAY = "days_after_holiday"
    EASTER = "easter"
    FIXED_DATE = "fixed_date"
    UNRECOGNIZED = "unrecognized"


_KIND_ALIASES = {
    "weekofmonth": RuleKind.WEEK_OF_MONTH,
    "nthweekday": RuleKind.WEEK_OF_MONTH,
    "nthweekdayofmonth": RuleKind.WEEK_OF_MONTH,
    "dayofweekonorafter": RuleKind.DAY_OF_WEEK_ON_OR_AFTER,
    "weekdayonorafter": RuleKind.WEEKDAY_ON_OR_AFTER,
    "businessday": RuleKind.WEEKDAY_ON_OR_AFTER,
    "lastfullweekofmonth": RuleKind.LAST_FULL_WEEK_OF_MONTH,
    "lastfullweek": RuleKind.LAST_FULL_WEEK_OF_MONTH,
    "daysafterholiday": RuleKind.DAYS_AFTER_HOLIDAY,
    "daysafter": RuleKind.DAYS_AFTER_HOLIDAY,
    "offset": RuleKind.DAYS_AFTER_HOLIDAY,
    "easter": RuleKind.EASTER,
    "fixeddate": RuleKind.FIXED_DATE,
    "fixed": RuleKind.FIXED_DATE,
}


def normalize_kind(value: Any) -> RuleKind:
    if isinstance(value, RuleKind):
        return value
    if value is None:
        raise ValueError("Rule kind is required")
    text = "".join(char for char in str(value).casefold() if char not in {" ", "-", "_"})
    if text in _KIND_ALIASES:
        return _KIND_ALIASES[text]
    raise ValueError(f"Unknown rule kind: {value!r}")


class _Rule(BaseModel):
    name: str = Field(min_length=1)

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class WeekOfMonthRule(_Rule):
    """The ``week``-th ``weekday`` of ``month`` (week 5 means the last one)."""

    kind: Literal["week_of_month"] = "week_of_month"
    month: int = Field(ge=1, le=12)
    week: int = Field(ge=1, le=5)
    weekday: int


class DayOfWeekOnOrAfterRule(_Rule):
    """First ``weekday`` on or after ``month``/``day``."""

    kind: Literal["day_of_week_on_or_after"] = "day_of_week_on_or_after"
    weekday: int
    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)


class WeekdayOnOrAfterRule(_Rule):
    """First business day (Monday-Friday) on or after ``month``/``day``."""

    kind: Literal["weekday_on_or_after"] = "weekday_on_or_after"
    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)


class LastFullWeekOfMonthRule(_Rule):
    """``weekday`` of the last Sunday-Saturday week lying entirely inside ``month``."""

    kind: Literal["last_full_week_of_month"] = "last_full_week_of_month"
    month: int = Field(ge=1, le=12)
    weekday: int


class DaysAfterHolidayRule(_Rule):
    kind: Literal["days_after_holiday"] = "days_after_holiday"
    holiday: str = Field(min_length=1)
    days: int


class EasterRule(_Rule):
    kind: Literal["easter"] = "easter"


class FixedDateRule(_Rule):
    """Same month/day every year, optionally only every ``every_x_years`` years."""

    kind: Literal["fixed_date"] = "fixed_date"
    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)
    every_x_years: int | None = Field(default=None, ge=1)
    start_year: int | None = None

    @model_validator(mode="after")
    def _validate_periodicity(self) -> "FixedDateRule":
        if (self.every_x_years is None) != (self.start_year is None):
            raise ValueError("every_x_years and start_year must be given together")
        return self

    @property
    def is_periodic(self) -> bool:
        return self.every_x_years is not None


class UnrecognizedRule(_Rule):
    """A record whose fields match none of the known rule shapes."""

    kind: Literal["unrecognized"] = "unrecognized"
    markers: tuple[str, ...] = ()


HolidayRule = Annotated[
    Union[
        WeekOfMonthRule,
        DayOfWeekOnOrAfterRule,
        WeekdayOnOrAfterRule,
        LastFullWeekOfMonthRule,
        DaysAfterHolidayRule,
        EasterRule,
        FixedDateRule,
        UnrecognizedRule,
    ],
    Field(discriminator="kind"),
]

HOLIDAY_RULE_ADAPTER: TypeAdapter[HolidayRule] = TypeAdapter(HolidayRule)


def parse_rule(record: dict[str, Any]) -> HolidayRule:
    return HOLIDAY_RULE_ADAPTER.validate_python(record)


class Settings(BaseModel):
    max_reference_depth: int = Field(default=32, ge=1)
    fail_fast: bool = False
    date_format: str = "%A, %B %d, %Y"
    excel_sheet: str = "holidays"

    model_config = {
        "extra": "ignore",
    }
