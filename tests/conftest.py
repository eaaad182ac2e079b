# -*- coding: utf-8 -*-
"""测试公共夹具"""

from datetime import datetime, timedelta

import numpy as np
import pytest

from marksix_predictor.models import DrawResult, HistoricalDataset, LotteryVariant
from marksix_predictor.utils import create_default_config

START = datetime(2024, 1, 1, 21, 30)
NOW = datetime(2024, 12, 31, 23, 59)


def make_draw(day, numbers, special, variant=LotteryVariant.MACAU):
    return DrawResult(
        draw_time=START + timedelta(days=day),
        variant=variant,
        numbers=tuple(numbers),
        special_number=special,
    )


def make_dataset(rows, variant=LotteryVariant.MACAU):
    """rows: [(6个普通号码, 特码), ...]，按天递增"""
    draws = [make_draw(i, numbers, special, variant) for i, (numbers, special) in enumerate(rows)]
    return HistoricalDataset.from_draws(variant, draws, now=NOW)


def random_rows(n, seed=42):
    rng = np.random.RandomState(seed)
    rows = []
    for _ in range(n):
        drawn = [int(x) for x in rng.choice(np.arange(1, 50), 7, replace=False)]
        rows.append((sorted(drawn[:6]), drawn[6]))
    return rows


@pytest.fixture
def config():
    return create_default_config()


@pytest.fixture
def random_dataset():
    return make_dataset(random_rows(40))


@pytest.fixture
def hongkong_dataset():
    return make_dataset(random_rows(40, seed=7), variant=LotteryVariant.HONGKONG)


@pytest.fixture
def short_dataset():
    return make_dataset(random_rows(5, seed=3))
