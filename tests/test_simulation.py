import io
import re

import pytest

from philosophers.parsing import Settings
from philosophers.simulation import Fork, PhilosopherDied, Simulation

LINE = re.compile(r"^(\d+) (\d+) (taken a fork|is eating|is thinking|is sleeping|died)$")


def _lines(output):
    return output.getvalue().splitlines()


def test_forks_are_wired_around_the_table():
    sim = Simulation(Settings(5, 400, 100, 100), io.StringIO())
    assert [p.philo_id for p in sim.philosophers] == [1, 2, 3, 4, 5]
    for index, philosopher in enumerate(sim.philosophers):
        assert philosopher.right_fork is sim.forks[index]
        assert philosopher.left_fork is sim.forks[(index + 1) % 5]
    assert [f.fork_id for f in sim.forks] == [0, 1, 2, 3, 4]


def test_fork_lock_is_independent():
    first, second = Fork(0), Fork(1)
    assert first.lock.acquire(blocking=False)
    assert second.lock.acquire(blocking=False)
    assert not first.lock.acquire(blocking=False)
    first.lock.release()
    second.lock.release()


def test_running_without_meal_limit():
    sim = Simulation(Settings(2, 400, 100, 100), io.StringIO())
    assert sim.is_running() is True
    sim.record_round()
    assert sim.is_running() is True
    sim.stop()
    assert sim.is_running() is False


def test_meal_rounds_even_table():
    sim = Simulation(Settings(2, 400, 100, 100, meals=2), io.StringIO())
    sim.record_round()
    assert sim.is_running() is True
    sim.record_round()
    assert sim.is_running() is False


def test_meal_rounds_odd_table_needs_extra_round():
    sim = Simulation(Settings(3, 400, 100, 100, meals=1), io.StringIO())
    sim.record_round()
    assert sim.is_running() is True
    sim.record_round()
    assert sim.is_running() is False


def test_zero_meals_even_table_never_runs():
    sim = Simulation(Settings(2, 400, 100, 100, meals=0), io.StringIO())
    assert sim.is_running() is False


def test_log_format():
    output = io.StringIO()
    sim = Simulation(Settings(3, 400, 100, 100), output)
    sim.log(sim.philosophers[2], "is eating")
    (line,) = _lines(output)
    match = LINE.match(line)
    assert match is not None
    assert match.group(2) == "3"
    assert match.group(3) == "is eating"


def test_pick_up_and_put_down_forks():
    output = io.StringIO()
    sim = Simulation(Settings(3, 400, 100, 100), output)
    philosopher = sim.philosophers[0]
    assert philosopher.pick_up_forks() is True
    assert philosopher.right_fork.lock.locked()
    assert philosopher.left_fork.lock.locked()
    philosopher.put_down_forks()
    assert not philosopher.right_fork.lock.locked()
    assert not philosopher.left_fork.lock.locked()
    assert [line.split(" ", 1)[1] for line in _lines(output)] == [
        "1 taken a fork",
        "1 taken a fork",
    ]


def test_lone_philosopher_cannot_take_two_forks():
    sim = Simulation(Settings(1, 70, 100, 100), io.StringIO())
    philosopher = sim.philosophers[0]
    assert philosopher.pick_up_forks() is False
    assert philosopher.right_fork.lock.locked()
    philosopher.put_down_forks()
    assert not philosopher.right_fork.lock.locked()


def test_second_philosopher_eating_completes_a_round():
    output = io.StringIO()
    sim = Simulation(Settings(2, 400, 70, 70, meals=1), output)
    philosopher = sim.philosophers[1]
    before = philosopher.last_meal_time
    philosopher.eat()
    assert philosopher.meals_eaten == 1
    assert philosopher.last_meal_time >= before
    assert sim.is_running() is False
    assert _lines(output)[0].endswith("2 is eating")


def test_first_philosopher_eating_does_not_count_a_round():
    sim = Simulation(Settings(2, 400, 70, 70, meals=1), io.StringIO())
    sim.philosophers[0].eat()
    assert sim.philosophers[0].meals_eaten == 1
    assert sim.is_running() is True


def test_monitor_detects_starvation():
    output = io.StringIO()
    sim = Simulation(Settings(2, 100, 100, 100), output)
    sim.philosophers[1].last_meal_time -= 1000
    with pytest.raises(PhilosopherDied) as info:
        sim.monitor()
    assert info.value.philo_id == 2
    assert sim.is_dead() is True
    assert _lines(output)[-1].endswith("2 died")


def test_monitor_reports_healthy_table():
    sim = Simulation(Settings(2, 10000, 100, 100), io.StringIO())
    assert sim.monitor() is True
    assert sim.is_dead() is False


def test_monitor_returns_false_when_finished():
    sim = Simulation(Settings(2, 100, 100, 100, meals=0), io.StringIO())
    sim.philosophers[0].last_meal_time -= 1000
    assert sim.monitor() is False
    assert sim.is_dead() is False


def test_lone_philosopher_dies():
    output = io.StringIO()
    sim = Simulation(Settings(1, 100, 100, 100), output)
    with pytest.raises(PhilosopherDied) as info:
        sim.run()
    assert info.value.philo_id == 1
    assert info.value.timestamp >= 100
    lines = _lines(output)
    assert lines[-1].endswith("1 died")
    assert any(line.endswith("1 taken a fork") for line in lines)


def test_run_finishes_meals_without_death():
    output = io.StringIO()
    sim = Simulation(Settings(4, 400, 50, 50, meals=2), output)
    sim.run()
    lines = _lines(output)
    assert all(LINE.match(line) for line in lines)
    assert not any(line.endswith(" died") for line in lines)
    assert sum(line.endswith("2 is eating") for line in lines) >= 2
    assert sim.philosophers[1].meals_eaten == 2
    assert sim.is_dead() is False


def test_run_odd_table_timestamps_ordered():
    output = io.StringIO()
    sim = Simulation(Settings(3, 600, 50, 50, meals=1), output)
    sim.run()
    lines = _lines(output)
    stamps = [int(LINE.match(line).group(1)) for line in lines]
    assert stamps == sorted(stamps)
    ids = {int(LINE.match(line).group(2)) for line in lines}
    assert ids <= {1, 2, 3}
    assert sim.philosophers[1].meals_eaten == 2


def test_start_twice_is_rejected():
    sim = Simulation(Settings(2, 400, 70, 70, meals=0), io.StringIO())
    sim.start()
    try:
        with pytest.raises(RuntimeError):
            sim.start()
    finally:
        sim.stop()