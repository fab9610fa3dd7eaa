"""Duration expressions such as ``1h30m``, ``15m`` or ``250ms``."""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation

# Microseconds per unit; nanoseconds are truncated to timedelta resolution.
_UNIT_MICROSECONDS = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),
    "μs": Decimal(1),
    "ms": Decimal(1_000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}

_TERM = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration expression.

    An expression is an optional sign followed by one or more decimal
    numbers, each with a unit suffix: ``ns``, ``us`` (or ``µs``), ``ms``,
    ``s``, ``m``, ``h``. ``"0"`` on its own is also accepted.

    Raises:
        ValueError: If ``text`` is not a valid duration expression.
    """
    value = text.strip()
    if not value:
        raise ValueError("invalid duration: empty string")

    sign = 1
    if value[0] in "+-":
        sign = -1 if value[0] == "-" else 1
        value = value[1:]
    if value == "0":
        return timedelta(0)
    if not value:
        raise ValueError(f"invalid duration: {text!r}")

    total = Decimal(0)
    pos = 0
    while pos < len(value):
        match = _TERM.match(value, pos)
        if match is None:
            raise ValueError(f"invalid duration: {text!r}")
        try:
            number = Decimal(match.group(1))
        except InvalidOperation:
            raise ValueError(f"invalid duration: {text!r}") from None
        total += number * _UNIT_MICROSECONDS[match.group(2)]
        pos = match.end()

    try:
        return timedelta(microseconds=sign * int(total))
    except OverflowError:
        raise ValueError(f"invalid duration: {text!r} is out of range") from None


def duration_from_seconds(seconds: float) -> timedelta:
    """Interpret a plain number as a count of seconds."""
    return timedelta(seconds=seconds)


def _trim(number: Decimal) -> str:
    return format(number.normalize(), "f")


def format_duration(value: timedelta) -> str:
    """
    Render a duration in its canonical expression form.

    Examples: ``1h30m0s``, ``15m0s``, ``1.5s``, ``250ms``, ``0s``.
    """
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_trim(Decimal(micros) / 1_000)}ms"

    hours, rest = divmod(micros, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds = _trim(Decimal(rest) / 1_000_000)

    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"
