# -*- coding: utf-8 -*-
"""历史规律分析测试"""

import math

from marksix_predictor.analysis import PatternAnalyzer, adjacent_gaps, consecutive_runs, element_combination
from marksix_predictor.attributes import Element, Zodiac

from conftest import make_dataset


def test_consecutive_runs():
    assert consecutive_runs([3, 1, 2, 10, 11, 20]) == [[1, 2, 3], [10, 11]]
    assert consecutive_runs([1, 3, 5]) == []


def test_adjacent_gaps():
    assert adjacent_gaps([5, 1, 3]) == [2, 2]


def test_element_combination():
    assert element_combination([1, 2, 9, 10, 17, 18]) == ((Element.FIRE, 6),)


def test_periodicity_statistics(config):
    dataset = make_dataset([
        ([1, 2, 3, 4, 5, 6], 7),
        ([1, 8, 9, 10, 11, 12], 13),
        ([1, 14, 15, 16, 17, 18], 19),
    ])
    analysis = PatternAnalyzer(config).analyze(dataset)
    assert analysis.periodicity[1].appearances == 3
    assert analysis.periodicity[1].mean_interval == 1.0
    assert analysis.periodicity[1].std_interval == 0.0
    assert math.isinf(analysis.periodicity[2].std_interval)
    assert analysis.periodicity[49].appearances == 0


def test_zodiac_transitions(config):
    dataset = make_dataset([([1, 2, 3, 4, 5, 7], 6), ([8, 9, 10, 11, 12, 13], 18), ([1, 2, 3, 4, 5, 7], 13)])
    analysis = PatternAnalyzer(config).analyze(dataset)
    assert analysis.zodiac_transitions[(Zodiac.RAT, Zodiac.RAT)] == 1
    assert analysis.zodiac_transitions[(Zodiac.RAT, Zodiac.SNAKE)] == 1
    assert analysis.last_zodiac is Zodiac.SNAKE


def test_sum_and_tail_statistics(config):
    dataset = make_dataset([([1, 2, 3, 4, 5, 6], 7), ([10, 20, 30, 40, 11, 21], 31)])
    analysis = PatternAnalyzer(config).analyze(dataset)
    assert analysis.draw_sums == (28, 163)
    assert analysis.average_sum == 95.5
    assert analysis.max_sum_deviation == 67.5
    # 和值各出现一次，取较小值
    assert analysis.sum_mode == 28


def test_special_pattern(config):
    dataset = make_dataset([([3, 4, 5, 6, 7, 8], 1), ([9, 10, 11, 12, 13, 14], 2), ([15, 16, 17, 18, 19, 20], 30)])
    special = PatternAnalyzer(config).analyze(dataset).special
    assert (special.odd_count, special.even_count) == (1, 2)
    assert (special.big_count, special.small_count) == (1, 2)
    assert not special.prefer_odd
    assert not special.prefer_big


def test_empty_dataset(config):
    analysis = PatternAnalyzer(config).analyze(make_dataset([]))
    assert analysis.draw_count == 0
    assert analysis.last_zodiac is None
    assert analysis.top_element_combination is None
    assert analysis.drawn_numbers == frozenset()
