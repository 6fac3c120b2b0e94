import random

import pytest

from tsp_erx.geometry import Point, random_points


class ScriptedRandom(random.Random):
    """``random.Random`` whose ``randrange`` replays queued values first."""

    def __init__(self, randrange_values=(), seed=0):
        super().__init__(seed)
        self.queued = list(randrange_values)

    def randrange(self, *args, **kwargs):
        if self.queued:
            return self.queued.pop(0)
        return super().randrange(*args, **kwargs)


@pytest.fixture
def square():
    return [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def cities(rng):
    return random_points(12, rng)


@pytest.fixture
def scripted_rng():
    return ScriptedRandom
