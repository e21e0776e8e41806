"""Command-line argument parsing and validation for the simulation."""

from __future__ import annotations

import re
from dataclasses import dataclass

MIN_TIME_MS = 60
MAX_TIME_MS = 2147483647
MAX_DIGITS = 10
WARNING_PHILOSOPHERS = 200

USAGE = (
    "Correct format: philosophers <num_of_philos> <time_to_die> "
    "<time_to_eat> <time_to_sleep> [<number_of_meals>]"
)

_SIGNS = re.compile(r"[-+]*")
_NUMBER = re.compile(r"[ \t\n\v\f\r]*([-+]?)([0-9]*)")


class InputError(ValueError):
    """Raised when the command-line arguments cannot be used."""


@dataclass(frozen=True)
class Settings:
    """Parameters of one simulation run, times in milliseconds."""

    philo_count: int
    time_to_die: int
    time_to_eat: int
    time_to_sleep: int
    meals: int | None = None

    @property
    def has_meal_limit(self) -> bool:
        return self.meals is not None


def check_argument(text: str) -> bool:
    """Check the shape of one argument.

    Raises InputError when the argument carries a minus sign, more than one
    plus sign, or does not start with a digit.  Returns False when digits are
    followed by other characters, True when the argument is clean.
    """
    signs = _SIGNS.match(text).group()
    rest = text[len(signs):]
    if "-" in signs or signs.count("+") > 1 or not rest[:1].isascii() or not rest[:1].isdigit():
        raise InputError("Invalid input")
    digits = re.match(r"[0-9]*", rest).group()
    return len(digits) == len(rest)


def parse_number(text: str) -> int:
    """Read a leading decimal integer, ignoring leading whitespace.

    Raises InputError when the number has ten or more digits.
    """
    sign, digits = _NUMBER.match(text).groups()
    if len(digits) >= MAX_DIGITS:
        raise InputError("Number is too big")
    value = int(digits) if digits else 0
    return -value if sign == "-" else value


def validate(settings: Settings) -> list[str]:
    """Check the settings' limits and return any warnings.

    Raises InputError when a limit is broken.
    """
    warnings: list[str] = []
    if settings.philo_count <= 0:
        raise InputError("At least one philosopher expected")
    if settings.philo_count >= WARNING_PHILOSOPHERS:
        warnings.append(
            f"WARNING simulating with more than {WARNING_PHILOSOPHERS} "
            "philosophers may lead to unexpected behaviour"
        )
    times = (settings.time_to_die, settings.time_to_eat, settings.time_to_sleep)
    if any(t <= MIN_TIME_MS for t in times):
        raise InputError(f"Use timestamps greater than {MIN_TIME_MS}ms")
    if any(t >= MAX_TIME_MS for t in times):
        raise InputError(f"Use timestamps less than {MAX_TIME_MS}ms")
    return warnings


def parse_arguments(args: list[str] | tuple[str, ...]) -> Settings:
    """Build Settings from the four or five arguments after the program name."""
    if len(args) not in (4, 5):
        raise InputError(f"Wrong input:\n{USAGE}")
    clean = True
    values: list[int] = []
    for text in args:
        clean = check_argument(text) and clean
        values.append(parse_number(text))
    settings = Settings(*values[:4], meals=values[4] if len(values) == 5 else None)
    validate(settings)
    if not clean:
        raise InputError("Invalid input")
    return settings


def is_even(philo_count: int) -> int:
    """Return 2 for an even number of philosophers, 1 for an odd one."""
    _, remainder = divmod(philo_count, 2)
    if remainder == 0:
        return 2
    return 1