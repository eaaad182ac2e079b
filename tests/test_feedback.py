# -*- coding: utf-8 -*-
"""反馈调权测试"""

import pytest

from marksix_predictor.analysis import PatternAnalyzer
from marksix_predictor.candidates import CandidateGenerator
from marksix_predictor.feedback import FeedbackLoop
from marksix_predictor.models import LotteryVariant, PredictionResult
from marksix_predictor.validator import Validator
from marksix_predictor.weights import DIMENSIONS, MAX_WEIGHT, MIN_WEIGHT, WeightConfig

from conftest import make_draw


@pytest.fixture
def validation():
    pred = PredictionResult(LotteryVariant.MACAU, (1, 2, 3, 4, 5, 6), 7, confidence=0.5)
    return Validator().validate(pred, make_draw(0, [1, 2, 3, 4, 20, 30], 7))


def test_apply_normalizes(config, validation):
    weights = WeightConfig.default()
    adjusted = FeedbackLoop(config).apply(validation, weights)
    assert adjusted.is_normalized()
    assert adjusted == weights.adjust_from(validation.details, validation.accuracy).normalize()


def test_apply_does_not_mutate(config, validation):
    weights = WeightConfig.default()
    FeedbackLoop(config).apply(validation, weights)
    assert weights == WeightConfig.default()


def test_optimize_short_history_returns_prior(config, short_dataset):
    weights = WeightConfig.default()
    result = FeedbackLoop(config).optimize_weights(
        short_dataset, weights, PatternAnalyzer(config), CandidateGenerator(config))
    assert result is weights


def test_optimize_respects_min_history_setting(short_dataset):
    config = {'weights': {'min_history': 3}}
    weights = WeightConfig.default()
    result = FeedbackLoop(config).optimize_weights(
        short_dataset, weights, PatternAnalyzer(config), CandidateGenerator(config))
    assert result is not weights
    assert result.is_normalized()


def test_optimize_bounds(config, random_dataset):
    result = FeedbackLoop(config).optimize_weights(
        random_dataset, WeightConfig.default(), PatternAnalyzer(config), CandidateGenerator(config))
    values = result.as_array()
    assert values.sum() == pytest.approx(1.0, abs=1e-9)
    assert values.min() >= MIN_WEIGHT - 1e-9
    assert values.max() <= MAX_WEIGHT + 1e-9


def test_dimension_accuracy(config, random_dataset):
    accuracy = FeedbackLoop(config).dimension_accuracy(
        random_dataset, PatternAnalyzer(config), CandidateGenerator(config))
    assert set(accuracy) == set(DIMENSIONS)
    assert all(v >= 0.0 for v in accuracy.values())
    # 覆盖全部49个号码的维度提升度恰为1
    assert accuracy['sum'] == pytest.approx(1.0)
