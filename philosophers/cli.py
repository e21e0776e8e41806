"""Command-line entry point for the dining philosophers simulation."""

from __future__ import annotations

import sys
import time

from philosophers.parsing import InputError, parse_arguments, validate
from philosophers.simulation import PhilosopherDied, Simulation

RST = "\033[0m"
RED = "\033[1;31m"
YELLOW = "\033[1;33m"

_WARNING_PAUSE_SECONDS = 0.996969


def main(argv: list[str] | None = None) -> int:
    """Parse the arguments, run the simulation and return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        settings = parse_arguments(args)
    except InputError as error:
        print(f"{RED}{error}{RST}", file=sys.stderr)
        return 1
    warnings = validate(settings)
    for warning in warnings:
        print(f"{YELLOW}{warning}{RST}")
    if warnings:
        time.sleep(_WARNING_PAUSE_SECONDS)
    simulation = Simulation(settings, sys.stdout)
    try:
        simulation.run()
    except PhilosopherDied:
        print(f"{RED}Philosopher died, simulation stop{RST}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())