"""The dining philosophers: forks, philosopher threads and the monitor."""

from __future__ import annotations

import sys
import threading
import time
from dataclasses import dataclass, field
from typing import TextIO

from philosophers.clock import now_ms, sleep_ms
from philosophers.parsing import Settings

TAKEN_FORK = "taken a fork"
EATING = "is eating"
THINKING = "is thinking"
SLEEPING = "is sleeping"
DIED = "died"

_LOCK_POLL_SECONDS = 0.005
_MONITOR_POLL_SECONDS = 0.0005


class PhilosopherDied(RuntimeError):
    """Raised by the monitor when a philosopher starved."""

    def __init__(self, philo_id: int, timestamp: int) -> None:
        super().__init__(f"philosopher {philo_id} died at {timestamp}ms")
        self.philo_id = philo_id
        self.timestamp = timestamp


@dataclass(eq=False)
class Fork:
    """A fork shared by two neighbouring philosophers."""

    fork_id: int
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class Philosopher:
    """One seat at the table, run in its own thread."""

    def __init__(
        self,
        philo_id: int,
        right_fork: Fork,
        left_fork: Fork,
        simulation: Simulation,
    ) -> None:
        self.philo_id = philo_id
        self.right_fork = right_fork
        self.left_fork = left_fork
        self.simulation = simulation
        self.last_meal_time = simulation.start_time
        self.meals_eaten = 0
        self._held: list[Fork] = []

    def __repr__(self) -> str:
        return f"Philosopher({self.philo_id})"

    def _announce(self, message: str) -> None:
        sim = self.simulation
        if not sim.is_dead() and sim.is_running():
            sim.log(self, message)

    def _pause(self, duration_ms: int) -> None:
        sleep_ms(duration_ms, self.simulation._active)

    def _acquire(self, fork: Fork) -> bool:
        while not fork.lock.acquire(timeout=_LOCK_POLL_SECONDS):
            if not self.simulation._active():
                return False
        self._held.append(fork)
        return True

    def pick_up_forks(self) -> bool:
        """Take the right fork, then the left one.

        Returns True when both forks are held.  A lone philosopher holds its
        only fork until it starves and returns False.
        """
        if not self._acquire(self.right_fork):
            return False
        self._announce(TAKEN_FORK)
        if self.simulation.settings.philo_count == 1:
            self._pause(self.simulation.settings.time_to_die)
            return False
        if not self._acquire(self.left_fork):
            return False
        self._announce(TAKEN_FORK)
        return True

    def put_down_forks(self) -> None:
        """Release every fork this philosopher holds."""
        while self._held:
            self._held.pop().lock.release()

    def eat(self) -> None:
        """Record the meal time, announce it and eat for time_to_eat."""
        sim = self.simulation
        if sim.is_dead():
            return
        with sim._meal_lock:
            self.last_meal_time = now_ms()
        self._announce(EATING)
        self._pause(sim.settings.time_to_eat)
        self.meals_eaten += 1
        if self.philo_id == 2:
            sim.record_round()

    def think(self) -> None:
        """Announce thinking."""
        if not self.simulation.is_dead():
            self._announce(THINKING)

    def sleep(self) -> None:
        """Announce sleeping and sleep for time_to_sleep."""
        if not self.simulation.is_dead():
            self._announce(SLEEPING)
            self._pause(self.simulation.settings.time_to_sleep)

    def run(self) -> None:
        """Think, take forks, eat, release forks and sleep until stopped."""
        if self.philo_id % 2 == 0:
            self.sleep()
        while self.simulation._active():
            self.think()
            try:
                if self.pick_up_forks():
                    self.eat()
            finally:
                self.put_down_forks()
            self.sleep()


class Simulation:
    """The table: forks, philosophers, shared state and the monitor."""

    def __init__(self, settings: Settings, output: TextIO | None = None) -> None:
        self.settings = settings
        self.output = output if output is not None else sys.stdout
        self._status_lock = threading.Lock()
        self._dead_lock = threading.Lock()
        self._meal_lock = threading.Lock()
        self._print_lock = threading.Lock()
        self._stop = threading.Event()
        self._rounds = 0
        self._dead = False
        self._threads: list[threading.Thread] = []
        self.start_time = now_ms()
        count = settings.philo_count
        self.forks = [Fork(i) for i in range(count)]
        self.philosophers = [
            Philosopher(i + 1, self.forks[i], self.forks[(i + 1) % count], self)
            for i in range(count)
        ]

    def _active(self) -> bool:
        return self.is_running() and not self.is_dead()

    def is_running(self) -> bool:
        """False once stopped or once the required meal rounds are done."""
        if self._stop.is_set():
            return False
        if not self.settings.has_meal_limit:
            return True
        extra = 1 if self.settings.philo_count % 2 else 0
        with self._status_lock:
            rounds = self._rounds
        return rounds != self.settings.meals + extra

    def is_dead(self) -> bool:
        """True once a philosopher has died."""
        with self._dead_lock:
            return self._dead

    def record_round(self) -> None:
        """Count one completed meal round."""
        with self._status_lock:
            self._rounds += 1

    def log(self, philosopher: Philosopher, message: str) -> int:
        """Write a timestamped state line and return its timestamp."""
        with self._print_lock:
            elapsed = now_ms() - self.start_time
            print(f"{elapsed} {philosopher.philo_id} {message}", file=self.output, flush=True)
        return elapsed

    def start(self) -> None:
        """Reset the clock and start one thread per philosopher."""
        if self._threads:
            raise RuntimeError("simulation already started")
        self.start_time = now_ms()
        with self._meal_lock:
            for philosopher in self.philosophers:
                philosopher.last_meal_time = self.start_time
        self._threads = [
            threading.Thread(target=p.run, name=f"philosopher-{p.philo_id}", daemon=True)
            for p in self.philosophers
        ]
        for thread in self._threads:
            thread.start()

    def monitor(self) -> bool:
        """Check every philosopher once.

        Returns False when the simulation is no longer running, True otherwise.
        Raises PhilosopherDied when a philosopher went too long without eating.
        """
        for philosopher in self.philosophers:
            if not self.is_running():
                return False
            with self._meal_lock:
                last_meal = philosopher.last_meal_time
            if now_ms() - last_meal >= self.settings.time_to_die:
                with self._dead_lock:
                    self._dead = True
                    timestamp = self.log(philosopher, DIED)
                raise PhilosopherDied(philosopher.philo_id, timestamp)
        return True

    def stop(self) -> None:
        """Stop the philosophers and wait for their threads."""
        self._stop.set()
        for thread in self._threads:
            thread.join()
        self._threads = []

    def run(self) -> None:
        """Run until the meal rounds are done; raise PhilosopherDied on a death."""
        self.start()
        try:
            while self.is_running() and self.monitor():
                time.sleep(_MONITOR_POLL_SECONDS)
        finally:
            self.stop()