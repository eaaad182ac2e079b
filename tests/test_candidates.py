# -*- coding: utf-8 -*-
"""候选号码规则测试"""

import pytest

from marksix_predictor.analysis import PatternAnalyzer
from marksix_predictor.attributes import ELEMENT_TABLE, Element, numbers_of_zodiac, Zodiac
from marksix_predictor.candidates import (
    CandidateGenerator,
    by_consecutive_pattern,
    by_distance_pattern,
    by_element_pattern,
    by_periodicity,
    by_special_pattern,
    by_sum_pattern,
    by_tail_pattern,
    by_zodiac_pattern,
)
from marksix_predictor.weights import DIMENSIONS

from conftest import make_dataset


@pytest.fixture
def analyze(config):
    analyzer = PatternAnalyzer(config)
    return lambda rows: analyzer.analyze(make_dataset(rows))


def test_periodicity_keeps_regular_numbers(analyze):
    analysis = analyze([
        ([1, 2, 3, 4, 5, 6], 7),
        ([1, 8, 9, 10, 11, 12], 13),
        ([1, 14, 15, 16, 17, 18], 19),
        ([1, 20, 21, 22, 23, 24], 25),
    ])
    selected = by_periodicity(analysis)
    assert 1 in selected
    # 只出现一次的号码没有间隔统计
    assert 2 not in selected


def test_zodiac_pattern_needs_more_than_threshold(analyze):
    six = analyze([([1, 2, 3, 4, 5, 7], 6)] * 6)
    seven = analyze([([1, 2, 3, 4, 5, 7], 6)] * 7)
    assert by_zodiac_pattern(six) == frozenset()
    assert by_zodiac_pattern(seven) == frozenset(numbers_of_zodiac(Zodiac.RAT))


def test_element_pattern_uses_top_combination(analyze):
    analysis = analyze([
        ([1, 2, 9, 10, 17, 18], 30),
        ([1, 2, 9, 10, 17, 18], 30),
        ([3, 4, 11, 12, 25, 26], 30),
    ])
    assert by_element_pattern(analysis) == frozenset(ELEMENT_TABLE[Element.FIRE])


def test_special_pattern_tie_prefers_even_small(analyze):
    analysis = analyze([([3, 4, 5, 6, 7, 8], 1), ([9, 10, 11, 12, 13, 14], 2)])
    assert by_special_pattern(analysis) == frozenset(range(2, 25, 2))


def test_sum_pattern(analyze):
    analysis = analyze([([1, 2, 3, 4, 5, 6], 7)])
    assert by_sum_pattern(analysis) == frozenset(range(1, 23))


def test_tail_pattern(analyze):
    analysis = analyze([([10, 20, 30, 40, 11, 21], 31)])
    assert by_tail_pattern(analysis) == frozenset(n for n in range(1, 50) if n % 10 <= 3)


def test_consecutive_pattern_stays_in_range(analyze):
    analysis = analyze([([1, 2, 3, 4, 5, 6], 7)])
    assert analysis.run_length_mode == 7
    assert by_consecutive_pattern(analysis) == frozenset(range(1, 44))


def test_distance_pattern(analyze):
    analysis = analyze([([1, 10, 20, 30, 40, 45], 49)])
    assert analysis.top_gaps == (10, 4, 5)
    selected = by_distance_pattern(analysis)
    assert {11, 5, 6, 41}.issubset(selected)
    assert 2 not in selected


def test_generator_union(analyze, config):
    analysis = analyze([([1, 2, 3, 4, 5, 6], 7)])
    generator = CandidateGenerator(config)
    selections = generator.by_dimension(analysis)
    assert set(selections) == set(DIMENSIONS)
    assert generator.generate(analysis) == frozenset().union(*selections.values())


def test_generator_empty_history(analyze, config):
    assert CandidateGenerator(config).generate(analyze([])) == frozenset()


def test_generator_reads_thresholds(analyze):
    analysis = analyze([([1, 2, 3, 4, 5, 7], 6)] * 4)
    generator = CandidateGenerator({'candidates': {'zodiac_min_transitions': 2}})
    assert generator.by_dimension(analysis)['zodiac'] == frozenset(numbers_of_zodiac(Zodiac.RAT))
