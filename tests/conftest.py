import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from domain.geo import derive_ranges
from domain.models import BoundingBox
from app.fields import FieldGenerator
from app.registry import initialize_fleet


TRUE_IMAGE = "https://example.org/img/intruder.jpg"
FALSE_IMAGE = "https://example.org/img/cat.jpg"


class FixedClock:
    def __init__(self, dt=None):
        self.dt = dt or datetime(2026, 10, 19, 12, 30, 0, 123456, tzinfo=timezone(timedelta(hours=1)))

    def now_epoch(self) -> float:
        return self.dt.timestamp()

    def now(self) -> datetime:
        return self.dt


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def whole_degree_box():
    return BoundingBox(
        max_lat=Decimal("54"),
        min_lat=Decimal("51"),
        max_long=Decimal("-0"),
        min_long=Decimal("-3"),
    )


@pytest.fixture
def make_fleet(whole_degree_box):
    def _make(count):
        ranges = derive_ranges(whole_degree_box)
        return initialize_fleet(count, ranges, random.Random(1), random.Random(2))
    return _make


@pytest.fixture
def fields():
    return FieldGenerator(
        random.Random(3),
        random.Random(4),
        weight=10,
        true_image=TRUE_IMAGE,
        false_image=FALSE_IMAGE,
    )
