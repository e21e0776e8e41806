# philosophers

A simulation of the dining philosophers problem. Every philosopher runs in
its own thread and shares one fork with each neighbour. Philosophers think,
pick up their right fork and then their left one, eat, put the forks down and
sleep. Even-numbered philosophers start by sleeping. A monitor watches the
table and stops the simulation when someone starves, or when the requested
number of meal rounds has been eaten.

## Installation

```
pip install .
```

## Usage

```
philosophers <num_of_philos> <time_to_die> <time_to_eat> <time_to_sleep> [<number_of_meals>]
```

The same command can be started with `python -m philosophers.cli`.
All times are in milliseconds.

- `num_of_philos`: how many philosophers sit at the table. At least one is
  required. From 200 upwards a warning is printed and the program pauses for
  about a second before it starts.
- `time_to_die`: how long a philosopher can go without eating before dying.
- `time_to_eat`: how long a meal takes.
- `time_to_sleep`: how long a philosopher sleeps after eating.
- `number_of_meals` (optional): if given, the simulation ends once
  philosopher 2 has eaten this many meals, or one more than this when the
  number of philosophers is odd.

Each time must be greater than 60 and less than 2147483647. A number may have
at most nine digits and at most one leading `+`. A minus sign or any other
stray character is rejected.

Example:

```
philosophers 5 800 200 200 7
```

Each event is printed as a line holding the milliseconds since the start, the
philosopher's number and the action, one of `is thinking`, `taken a fork`,
`is eating`, `is sleeping` and `died`:

```
0 1 is thinking
0 1 taken a fork
0 1 taken a fork
0 1 is eating
...
```

A lone philosopher has only one fork: they take it, wait and starve.

When a philosopher starves, the program prints `died` for them, writes
`Philosopher died, simulation stop` to standard error and exits with status 1.
Bad input also gives status 1, with a message on standard error saying what
went wrong. A run that ends because enough meals were eaten exits with 0.

## Using it from Python

```python
import sys

from philosophers.parsing import parse_arguments
from philosophers.simulation import PhilosopherDied, Simulation

settings = parse_arguments(["4", "410", "200", "200", "3"])
simulation = Simulation(settings, sys.stdout)
try:
    simulation.run()
except PhilosopherDied as death:
    print(death.philo_id, death.timestamp)
```

- `philosophers.parsing`: `parse_arguments` builds a `Settings` from the four
  or five arguments and raises `InputError` (a `ValueError`) when they are not
  valid. `check_argument`, `parse_number` and `validate` perform the
  individual checks; `validate` returns any warnings as a list of strings.
- `philosophers.simulation`: `Simulation` owns the forks, the `Philosopher`
  objects and their threads. `run` starts the threads, monitors them and
  stops them; `start`, `monitor` and `stop` can also be called on their own.
  Output goes to the stream given as `output`, or to standard output.
- `philosophers.clock`: `now_ms` returns a monotonic time in milliseconds and
  `sleep_ms` sleeps for a number of milliseconds, stopping early when a given
  callable returns a false value.