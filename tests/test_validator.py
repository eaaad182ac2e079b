# -*- coding: utf-8 -*-
"""预测验证测试"""

import pytest

from marksix_predictor.models import LotteryVariant, PredictionResult
from marksix_predictor.validator import (
    Validator,
    attribute_match_rate,
    compare_numbers,
    count_consecutive_matches,
    count_distance_matches,
)

from conftest import make_draw


def prediction(numbers, special, variant=LotteryVariant.MACAU):
    return PredictionResult(variant=variant, numbers=tuple(numbers), special_number=special, confidence=0.5)


def test_partial_hit_with_special():
    result = Validator().validate(prediction([1, 2, 3, 4, 5, 6], 7),
                                  make_draw(0, [1, 2, 3, 10, 20, 30], 7))
    assert result.hit_count == 3
    assert result.special_hit
    assert result.accuracy == pytest.approx(4 / 7)
    assert result.hit_numbers == (1, 2, 3, 7)
    assert result.missed_numbers == (4, 5, 6)


def test_special_in_actual_ordinary_is_not_special_hit():
    result = Validator().validate(prediction([1, 2, 3, 4, 5, 6], 10),
                                  make_draw(0, [10, 11, 12, 13, 14, 15], 16))
    assert result.hit_count == 0
    assert not result.special_hit
    assert result.accuracy == 0.0
    assert result.missed_numbers == (1, 2, 3, 4, 5, 6, 10)


def test_total_miss():
    pred = prediction([1, 2, 3, 4, 5, 6], 7)
    result = Validator().validate(pred, make_draw(0, [10, 11, 12, 13, 14, 15], 16))
    assert result.hit_count == 0
    assert not result.special_hit
    assert result.accuracy == 0.0
    assert result.hit_numbers == ()
    assert result.missed_numbers == pred.all_numbers
    assert 0.0 <= result.attribute_match_rate <= 1.0


def test_perfect_prediction():
    result = Validator().validate(prediction([1, 2, 3, 4, 5, 6], 7),
                                  make_draw(0, [1, 2, 3, 4, 5, 6], 7))
    assert result.hit_count == 6
    assert result.accuracy == 1.0
    assert result.details.zodiac_matches == 7
    assert result.details.sum_deviation == 0.0
    assert result.details.consecutive_matches == 1
    assert result.details.distance_matches == 6
    assert result.attribute_match_rate == pytest.approx(0.95)


def test_variant_mismatch():
    with pytest.raises(ValueError):
        Validator().validate(prediction([1, 2, 3, 4, 5, 6], 7, LotteryVariant.HONGKONG),
                             make_draw(0, [1, 2, 3, 4, 5, 6], 7))


def test_hit_numbers_partition_prediction():
    pred = prediction([5, 12, 19, 26, 33, 40], 47)
    result = Validator().validate(pred, make_draw(0, [5, 19, 33, 41, 42, 43], 40))
    assert sorted(result.hit_numbers + result.missed_numbers) == sorted(pred.all_numbers)
    ordinary_missed = [n for n in result.missed_numbers if n != pred.special_number]
    assert result.hit_count + len(ordinary_missed) == 6
    assert result.hit_count == 3
    assert 0.0 <= result.attribute_match_rate <= 1.0


def test_consecutive_matches():
    assert count_consecutive_matches([1, 2, 3, 10, 11, 30, 40], [5, 6, 7, 20, 21, 33, 44]) == 2
    assert count_consecutive_matches([1, 3, 5, 7, 9, 11, 13], [5, 6, 7, 20, 21, 33, 44]) == 0


def test_distance_matches():
    assert count_distance_matches([1, 10, 20], [1, 11, 30]) == 2
    assert count_distance_matches([1, 30], [1, 2]) == 0


def test_tail_deviation_zero_actual():
    # 实际尾数和为0时偏差按0处理
    details = compare_numbers([1, 2, 3], [10, 20, 30])
    assert details.tail_deviation == 0.0
    assert details.sum_deviation == pytest.approx(abs(6 - 60) / 60)


def test_attribute_match_rate_clamped():
    details = compare_numbers([1, 2, 3, 4, 5, 6, 7], [1, 2, 3, 4, 5, 6, 7])
    assert attribute_match_rate(details) <= 1.0


def test_report_text():
    result = Validator().validate(prediction([1, 2, 3, 4, 5, 6], 7),
                                  make_draw(0, [1, 2, 3, 10, 20, 30], 8))
    report = Validator.generate_report(result)
    assert '普通号码命中: 3/6' in report
    assert '特别号码命中: 否' in report
