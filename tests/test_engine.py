# -*- coding: utf-8 -*-
"""预测引擎测试"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from marksix_predictor.engine import PredictionEngine
from marksix_predictor.exceptions import InsufficientCandidatesError
from marksix_predictor.models import LotteryVariant
from marksix_predictor.weights import WeightConfig

from conftest import make_dataset, make_draw


@pytest.fixture
def engine(config, random_dataset, hongkong_dataset):
    datasets = {LotteryVariant.MACAU: random_dataset, LotteryVariant.HONGKONG: hongkong_dataset}
    return PredictionEngine(config, datasets.__getitem__)


def test_prediction_shape(engine):
    prediction = engine.predict_next_draw('macau')
    assert prediction.variant is LotteryVariant.MACAU
    assert len(set(prediction.all_numbers)) == 7
    assert all(1 <= n <= 49 for n in prediction.all_numbers)
    assert 0.0 <= prediction.confidence <= 1.0
    assert not set(prediction.alternatives) & set(prediction.all_numbers)
    assert len(prediction.alternatives) == 6


def test_prediction_deterministic(engine):
    assert engine.predict_next_draw(LotteryVariant.MACAU) == engine.predict_next_draw(LotteryVariant.MACAU)


def test_concurrent_predictions_agree(engine):
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: engine.predict_next_draw('hongkong'), range(4)))
    assert all(r == results[0] for r in results)


def test_empty_history_raises(config):
    engine = PredictionEngine(config, lambda variant: make_dataset([], variant))
    with pytest.raises(InsufficientCandidatesError):
        engine.predict_next_draw('macau')


def test_missing_provider(config):
    with pytest.raises(ValueError):
        PredictionEngine(config).predict_next_draw('macau')


def test_predict_from_dataset_matches_select(engine, random_dataset):
    weights = WeightConfig.default()
    prediction = engine.predict_from_dataset(random_dataset, weights)
    assert engine.select_numbers(random_dataset, weights) == prediction.all_numbers


def test_validate_updates_only_that_variant(engine):
    prediction = engine.predict_next_draw('macau')
    actual = make_draw(100, [1, 2, 3, 4, 5, 6], 7)
    hongkong_before = engine.get_weights('hongkong')

    result = engine.validate_and_update_weights(prediction, actual)

    assert result.variant is LotteryVariant.MACAU
    updated = engine.get_weights('macau')
    assert updated.is_normalized()
    assert updated != WeightConfig.default()
    assert engine.get_weights('hongkong') is hongkong_before


def test_weights_override(config):
    custom = WeightConfig.default().normalize()
    engine = PredictionEngine(config, weights={'hongkong': custom})
    assert engine.get_weights(LotteryVariant.HONGKONG) is custom
    assert engine.get_weights(LotteryVariant.MACAU) == WeightConfig.default()


def test_optimize_weights(engine):
    optimized = engine.optimize_weights('macau')
    assert engine.get_weights('macau') is optimized
    assert optimized.is_normalized()


def test_optimize_short_history_keeps_weights(config, short_dataset):
    engine = PredictionEngine(config, lambda variant: short_dataset)
    before = engine.get_weights('macau')
    assert engine.optimize_weights('macau') is before


def test_checkpoint_roundtrip(engine, config, tmp_path):
    custom = WeightConfig.default().normalize()
    engine.set_weights('hongkong', custom)
    path = tmp_path / 'models' / 'weights.pkl'
    engine.save_checkpoint(str(path))

    restored = PredictionEngine(config)
    restored.load_checkpoint(str(path))
    assert restored.get_weights('hongkong') == custom
    assert restored.get_weights('macau') == engine.get_weights('macau')


def test_load_missing_checkpoint(config, tmp_path):
    with pytest.raises(FileNotFoundError):
        PredictionEngine(config).load_checkpoint(str(tmp_path / 'missing.pkl'))


def test_save_and_load_predictions(engine, tmp_path):
    prediction = engine.predict_next_draw('macau')
    path = tmp_path / 'reports' / 'predictions.csv'
    engine.save_predictions(prediction, str(path))
    engine.save_predictions([prediction], str(path))

    assert path.exists()
    assert len(path.read_text(encoding='utf-8').strip().splitlines()) == 3
    assert PredictionEngine.load_predictions(str(path)) == [prediction, prediction]


def test_display_prediction(engine, capsys):
    engine.display_prediction(engine.predict_next_draw('macau'))
    out = capsys.readouterr().out
    assert '普通号码' in out
    assert '整体置信度' in out
