# -*- coding: utf-8 -*-
"""回测评估测试"""

import numpy as np
import pytest

from marksix_predictor.evaluator import PredictionEvaluator, indicator_matrix
from marksix_predictor.weights import WeightConfig

from conftest import make_dataset


def test_indicator_matrix():
    matrix = indicator_matrix([(1, 2, 49)])
    assert matrix.shape == (1, 49)
    assert matrix.sum() == 3
    assert matrix[0, 0] == 1 and matrix[0, 48] == 1


@pytest.fixture
def metrics(config, random_dataset):
    return PredictionEvaluator(config).backtest(random_dataset, window=5)


def test_backtest_counts(metrics):
    assert metrics['evaluated'] == 5
    assert metrics['skipped'] == 0
    assert len(metrics['records']) == 5
    assert sum(metrics['match_distribution'].values()) == 5


def test_backtest_metrics_range(metrics):
    for key in ('avg_accuracy', 'special_hit_rate', 'avg_attribute_match_rate', 'precision', 'recall', 'f1_score'):
        assert 0.0 <= metrics[key] <= 1.0
    # 每期预测和实际都是7个号码
    assert metrics['precision'] == pytest.approx(metrics['recall'])


def test_backtest_carries_weights(metrics):
    final = WeightConfig.from_dict(metrics['final_weights'])
    assert final.is_normalized()


def test_backtest_precision_matches_hits(metrics):
    hits = [len(set(r['predicted'].replace('+', ',').split(',')) & set(r['actual'].replace('+', ',').split(',')))
            for r in metrics['records']]
    assert metrics['precision'] == pytest.approx(np.sum(hits) / (7 * len(hits)))


def test_backtest_skips_empty_history(config):
    dataset = make_dataset([([1, 2, 3, 4, 5, 6], 7), ([8, 9, 10, 11, 12, 13], 14)])
    metrics = PredictionEvaluator(config).backtest(dataset, window=5)
    # 第一期之前没有历史，无从预测
    assert metrics['evaluated'] == 1


def test_backtest_nothing_to_evaluate(config):
    metrics = PredictionEvaluator(config).backtest(make_dataset([([1, 2, 3, 4, 5, 6], 7)]), window=5)
    assert metrics['evaluated'] == 0
    assert metrics['precision'] == 0.0


def test_generate_report(metrics, config, tmp_path):
    path = tmp_path / 'reports' / 'backtest.md'
    PredictionEvaluator(config).generate_report(metrics, str(path))
    text = path.read_text(encoding='utf-8')
    assert '# 预测回测报告' in text
    assert '平均命中数' in text
    assert path.with_suffix('.csv').exists()
