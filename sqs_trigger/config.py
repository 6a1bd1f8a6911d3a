from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from sqs_trigger.errors import ConfigurationError, ValidationError

# Largest delay the host timer accepts (signed 32-bit milliseconds)
MAX_TIMER_DELAY_MS = 2**31 - 1

VISIBILITY_TIMEOUT_RANGE = (0, 43200)  # 12 hours
MAX_NUMBER_OF_MESSAGES_RANGE = (1, 10)
WAIT_TIME_SECONDS_RANGE = (0, 20)


class IntervalUnit(str, Enum):
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"

    @property
    def factor_ms(self) -> int:
        return _UNIT_FACTORS_MS[self]

    @classmethod
    def parse(cls, value: Union[str, "IntervalUnit"]) -> "IntervalUnit":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(u.value for u in cls)
            raise ConfigurationError(f"Unknown interval unit '{value}'. Expected one of: {allowed}") from None


_UNIT_FACTORS_MS = {
    IntervalUnit.SECONDS: 1000,
    IntervalUnit.MINUTES: 60 * 1000,
    IntervalUnit.HOURS: 60 * 60 * 1000,
}


@dataclass(frozen=True)
class PollOptions:
    # None means "not set": the queue's own default applies
    delete_messages: bool = False
    visibility_timeout: Optional[int] = None      # seconds, 0-43200
    max_number_of_messages: Optional[int] = None  # 1-10
    wait_time_seconds: Optional[int] = None       # long polling, 0-20


@dataclass(frozen=True)
class PollConfig:
    queue_url: str
    interval: float = 1
    unit: IntervalUnit = IntervalUnit.SECONDS
    options: PollOptions = field(default_factory=PollOptions)


def normalized_delay_ms(cfg: PollConfig, max_delay_ms: int = MAX_TIMER_DELAY_MS) -> int:
    """
    Compute the delay between two cycles in milliseconds.

    The delay is never shorter than the long-poll wait time, so a cycle never
    starts before the previous receive could have returned.

    Raises:
        ConfigurationError: missing queue, interval that is not a positive
            finite number, unknown unit, or a delay shorter than 1 ms or
            larger than the host timer can represent
    """
    if not cfg.queue_url:
        raise ConfigurationError("A queue URL is required")

    if not math.isfinite(cfg.interval) or cfg.interval <= 0:
        raise ConfigurationError("The interval has to be set to at least 1 or higher!")

    unit = IntervalUnit.parse(cfg.unit)
    delay_ms = cfg.interval * unit.factor_ms
    if delay_ms < 1:
        raise ConfigurationError(f"The interval is shorter than 1 ms ({cfg.interval} {unit.value})")

    wait_seconds = cfg.options.wait_time_seconds or 0
    delay_ms = max(delay_ms, wait_seconds * 1000)

    if delay_ms > max_delay_ms:
        raise ConfigurationError(
            f"The interval value is too large ({delay_ms} ms, maximum is {max_delay_ms} ms)"
        )

    return int(delay_ms)


def _check_range(name: str, value: int, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if value < low or value > high:
        raise ValidationError(f"{name} must be between {low} and {high}, got {value}")


def validate_options(options: PollOptions) -> None:
    """Range-check the receive options that are set. Raises ValidationError."""
    if options.visibility_timeout is not None:
        _check_range("Visibility Timeout", options.visibility_timeout, VISIBILITY_TIMEOUT_RANGE)
    if options.max_number_of_messages is not None:
        _check_range("Max Number Of Messages", options.max_number_of_messages, MAX_NUMBER_OF_MESSAGES_RANGE)
    if options.wait_time_seconds is not None:
        _check_range("Wait Time Seconds", options.wait_time_seconds, WAIT_TIME_SECONDS_RANGE)
