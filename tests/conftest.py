"""Shared fixtures for the companies directory tests."""

import polars as pl
import pytest


def make_companies(count):
    """`count` companies named Company 01..NN, already in name order."""
    industries = ["Tech", "Finance", "Retail"]
    locations = ["NY", "London", "Berlin", "Paris"]
    return pl.DataFrame([
        {
            "id": i,
            "name": f"Company {i:02d}",
            "industry": industries[i % len(industries)],
            "location": locations[i % len(locations)],
            "employees": (i * 37) % 100,
            "website": f"https://company{i}.example.com",
        }
        for i in range(1, count + 1)
    ])


class FakeScheduler:
    """Drives Debouncer timers from a manual clock instead of real threads."""

    def __init__(self):
        self.now = 0.0
        self.timers = []

    def timer_factory(self, interval, function, args=()):
        return FakeTimer(self, interval, function, args)

    def advance(self, seconds):
        self.now += seconds
        for timer in list(self.timers):
            if timer.started and not timer.cancelled and not timer.fired and timer.deadline <= self.now + 1e-9:
                timer.fired = True
                timer.function(*timer.args)

    @property
    def active(self):
        return [t for t in self.timers if t.started and not t.cancelled and not t.fired]


class FakeTimer:
    def __init__(self, scheduler, interval, function, args=()):
        self.scheduler = scheduler
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False
        self.fired = False
        self.deadline = None

    def start(self):
        self.started = True
        self.deadline = self.scheduler.now + self.interval
        self.scheduler.timers.append(self)

    def cancel(self):
        self.cancelled = True


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def acme_beta():
    return pl.DataFrame([
        {"id": 1, "name": "Acme", "industry": "Tech", "location": "NY", "employees": 50, "website": "a.com"},
        {"id": 2, "name": "Beta", "industry": "Finance", "location": "NY", "employees": 10, "website": "b.com"},
    ])


@pytest.fixture
def companies_25():
    return make_companies(25)


@pytest.fixture
def companies_factory():
    return make_companies
