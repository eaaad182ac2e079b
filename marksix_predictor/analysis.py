# -*- coding: utf-8 -*-
"""
历史规律分析模块
对一个历史数据集快照做统计汇总，产出候选号码选择和打分共用的只读分析结构
"""

from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

from .attributes import ALL_NUMBERS, MAX_NUMBER, Element, Zodiac, element_of, tail_of, zodiac_of
from .models import HistoricalDataset

logger = logging.getLogger(__name__)

ELEMENT_ORDER = tuple(Element)

ElementCombination = Tuple[Tuple[Element, int], ...]


@dataclass(frozen=True)
class NumberPeriodicity:
    """单个号码的出现间隔统计"""

    number: int
    appearances: int
    mean_interval: float
    std_interval: float  # 出现少于2次时为 inf


@dataclass(frozen=True)
class SpecialNumberPattern:
    """特码的奇偶、大小、生肖、五行分布"""

    odd_count: int
    even_count: int
    big_count: int
    small_count: int
    zodiac_counts: Mapping[Zodiac, int]
    element_counts: Mapping[Element, int]

    @property
    def prefer_odd(self) -> bool:
        # 奇偶持平时偏向双数
        return self.odd_count > self.even_count

    @property
    def prefer_big(self) -> bool:
        return self.big_count > self.small_count


@dataclass(frozen=True)
class AnalysisResults:
    """一次分析的全部结果，构造后只读"""

    draw_count: int
    periodicity: Mapping[int, NumberPeriodicity]
    zodiac_transitions: Mapping[Tuple[Zodiac, Zodiac], int]
    last_zodiac: Optional[Zodiac]
    element_combinations: Mapping[ElementCombination, int]
    special: SpecialNumberPattern
    draw_sums: Tuple[int, ...]
    sum_mode: int
    average_sum: float
    max_sum_deviation: float
    tail_sum_mode: int
    tail_counts: Mapping[int, int]
    run_length_counts: Mapping[int, int]
    run_length_mode: int
    run_member_counts: Mapping[int, int]
    gap_counts: Mapping[int, int]
    top_gaps: Tuple[int, ...]
    drawn_numbers: frozenset
    proximity: Mapping[int, float]

    @property
    def top_element_combination(self) -> Optional[ElementCombination]:
        if not self.element_combinations:
            return None
        return min(self.element_combinations.items(),
                   key=lambda kv: (-kv[1], _combination_order(kv[0])))[0]


def _combination_order(combination: ElementCombination):
    return tuple((ELEMENT_ORDER.index(e), c) for e, c in combination)


def _mode(counter: Counter, default: int = 0) -> int:
    """出现次数最多的值，次数相同取较小值"""
    if not counter:
        return default
    return min(counter.items(), key=lambda kv: (-kv[1], kv[0]))[0]


def _frozen(mapping: Dict) -> Mapping:
    return MappingProxyType(dict(mapping))


def consecutive_runs(numbers) -> list:
    """
    找出排序后号码中的连号段（长度至少为2）

    Args:
        numbers: 号码序列

    Returns:
        连号段列表，每段为升序号码列表
    """
    ordered = sorted(numbers)
    runs = []
    current = []
    for number in ordered:
        if current and number == current[-1] + 1:
            current.append(number)
        else:
            if len(current) > 1:
                runs.append(current)
            current = [number]
    if len(current) > 1:
        runs.append(current)
    return runs


def adjacent_gaps(numbers) -> list:
    """排序后相邻号码的间距"""
    ordered = sorted(numbers)
    return [b - a for a, b in zip(ordered, ordered[1:])]


def element_combination(numbers) -> ElementCombination:
    """一组号码的五行组合（五行 -> 个数），按固定五行顺序排列"""
    counts = Counter(element_of(n) for n in numbers)
    return tuple((e, counts[e]) for e in ELEMENT_ORDER if counts[e] > 0)


class PatternAnalyzer:
    """历史规律分析器"""

    def __init__(self, config: Dict[str, Any]):
        """
        初始化分析器

        Args:
            config: 配置字典
        """
        self.config = config
        analysis_config = config.get('analysis', {})
        self.distance_radius = analysis_config.get('distance_radius', 3)
        self.top_distance_count = analysis_config.get('top_distances', 3)

    def analyze(self, dataset: HistoricalDataset) -> AnalysisResults:
        """
        对历史数据集做全量统计

        Args:
            dataset: 历史数据集快照

        Returns:
            AnalysisResults
        """
        rows = dataset.number_rows()
        logger.debug(f"分析 {dataset.variant.value} 历史数据: {len(rows)} 期")

        hits = np.zeros((len(rows), MAX_NUMBER), dtype=bool)
        for i, row in enumerate(rows):
            hits[i, [n - 1 for n in row]] = True

        special_numbers = [d.special_number for d in dataset]

        return AnalysisResults(
            draw_count=len(rows),
            periodicity=_frozen(self._periodicity(hits)),
            zodiac_transitions=_frozen(self._zodiac_transitions(special_numbers)),
            last_zodiac=zodiac_of(special_numbers[-1]) if special_numbers else None,
            element_combinations=_frozen(Counter(element_combination(d.numbers) for d in dataset)),
            special=self._special_pattern(special_numbers),
            **self._sum_statistics(rows),
            **self._tail_statistics(rows),
            **self._consecutive_statistics(rows),
            **self._distance_statistics(rows, hits),
        )

    def _periodicity(self, hits: np.ndarray) -> Dict[int, NumberPeriodicity]:
        result = {}
        for number in ALL_NUMBERS:
            positions = np.flatnonzero(hits[:, number - 1])
            if len(positions) >= 2:
                intervals = np.diff(positions)
                mean_interval = float(np.mean(intervals))
                std_interval = float(np.std(intervals))
            else:
                mean_interval = float('inf')
                std_interval = float('inf')
            result[number] = NumberPeriodicity(number, int(len(positions)), mean_interval, std_interval)
        return result

    def _zodiac_transitions(self, special_numbers) -> Counter:
        zodiacs = [zodiac_of(n) for n in special_numbers]
        return Counter(zip(zodiacs, zodiacs[1:]))

    def _special_pattern(self, special_numbers) -> SpecialNumberPattern:
        odd = sum(1 for n in special_numbers if n % 2 == 1)
        big = sum(1 for n in special_numbers if n > 24)
        return SpecialNumberPattern(
            odd_count=odd,
            even_count=len(special_numbers) - odd,
            big_count=big,
            small_count=len(special_numbers) - big,
            zodiac_counts=_frozen(Counter(zodiac_of(n) for n in special_numbers)),
            element_counts=_frozen(Counter(element_of(n) for n in special_numbers)),
        )

    def _sum_statistics(self, rows) -> Dict[str, Any]:
        sums = [sum(row) for row in rows]
        if sums:
            average = float(np.mean(sums))
            max_deviation = float(np.max(np.abs(np.array(sums) - average)))
        else:
            average = 0.0
            max_deviation = 0.0
        return {
            'draw_sums': tuple(sums),
            'sum_mode': _mode(Counter(sums)),
            'average_sum': average,
            'max_sum_deviation': max_deviation,
        }

    def _tail_statistics(self, rows) -> Dict[str, Any]:
        tail_sums = Counter(sum(tail_of(n) for n in row) for row in rows)
        tails = Counter(tail_of(n) for row in rows for n in row)
        return {
            'tail_sum_mode': _mode(tail_sums),
            'tail_counts': _frozen(tails),
        }

    def _consecutive_statistics(self, rows) -> Dict[str, Any]:
        lengths = Counter()
        members = Counter()
        for row in rows:
            for run in consecutive_runs(row):
                lengths[len(run)] += 1
                members.update(run)
        return {
            'run_length_counts': _frozen(lengths),
            'run_length_mode': _mode(lengths),
            'run_member_counts': _frozen(members),
        }

    def _distance_statistics(self, rows, hits: np.ndarray) -> Dict[str, Any]:
        gaps = Counter(g for row in rows for g in adjacent_gaps(row))
        top_gaps = tuple(g for g, _ in sorted(gaps.items(), key=lambda kv: (-kv[1], kv[0]))[:self.top_distance_count])

        proximity = {}
        radius = self.distance_radius
        for number in ALL_NUMBERS:
            if len(rows) == 0:
                proximity[number] = 0.0
                continue
            low = max(0, number - 1 - radius)
            high = min(MAX_NUMBER, number + radius)
            proximity[number] = float(hits[:, low:high].any(axis=1).mean())

        return {
            'gap_counts': _frozen(gaps),
            'top_gaps': top_gaps,
            'drawn_numbers': frozenset(int(n) for n in np.flatnonzero(hits.any(axis=0)) + 1),
            'proximity': _frozen(proximity),
        }
