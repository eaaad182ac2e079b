# -*- coding: utf-8 -*-
"""
候选号码生成模块
八个维度各自按历史规律挑出一批号码，取并集作为候选集

每个维度都是分析结构上的纯函数，互不依赖。
"""

import logging
from typing import Any, Dict, FrozenSet

from .analysis import AnalysisResults
from .attributes import ALL_NUMBERS, MAX_NUMBER, element_of, tail_of, zodiac_of

logger = logging.getLogger(__name__)

# 6个号码的和值、尾数和的取值范围
MIN_REMAINING_SUM = 6 * 1
MAX_REMAINING_SUM = 6 * 49
MAX_REMAINING_TAIL_SUM = 6 * 9


def by_periodicity(analysis: AnalysisResults, max_std: float = 2.0) -> FrozenSet[int]:
    """出现间隔标准差小于阈值的号码（周期稳定）"""
    return frozenset(n for n, p in analysis.periodicity.items() if p.std_interval < max_std)


def by_zodiac_pattern(analysis: AnalysisResults, min_transitions: int = 5) -> FrozenSet[int]:
    """生肖出现在高频（次数大于阈值）特码生肖转换对中的号码"""
    zodiacs = set()
    for (source, target), count in analysis.zodiac_transitions.items():
        if count > min_transitions:
            zodiacs.update((source, target))
    return frozenset(n for n in ALL_NUMBERS if zodiac_of(n) in zodiacs)


def by_element_pattern(analysis: AnalysisResults) -> FrozenSet[int]:
    """属于出现最多的五行组合的号码"""
    combination = analysis.top_element_combination
    if combination is None:
        return frozenset()
    elements = {e for e, _ in combination}
    return frozenset(n for n in ALL_NUMBERS if element_of(n) in elements)


def by_special_pattern(analysis: AnalysisResults) -> FrozenSet[int]:
    """奇偶、大小都与历史特码多数一致的号码"""
    if analysis.draw_count == 0:
        return frozenset()
    prefer_odd = analysis.special.prefer_odd
    prefer_big = analysis.special.prefer_big
    return frozenset(n for n in ALL_NUMBERS if (n % 2 == 1) == prefer_odd and (n > 24) == prefer_big)


def by_sum_pattern(analysis: AnalysisResults) -> FrozenSet[int]:
    """选中后剩余6个号码的和仍能落在 [6, 294] 内的号码（以最常见和值为目标）"""
    if analysis.draw_count == 0:
        return frozenset()
    target = analysis.sum_mode
    return frozenset(n for n in ALL_NUMBERS if MIN_REMAINING_SUM <= target - n <= MAX_REMAINING_SUM)


def by_tail_pattern(analysis: AnalysisResults) -> FrozenSet[int]:
    """选中后剩余尾数和仍能落在 [0, 54] 内的号码（以最常见尾数和为目标）"""
    if analysis.draw_count == 0:
        return frozenset()
    target = analysis.tail_sum_mode
    return frozenset(n for n in ALL_NUMBERS if 0 <= target - tail_of(n) <= MAX_REMAINING_TAIL_SUM)


def by_consecutive_pattern(analysis: AnalysisResults) -> FrozenSet[int]:
    """能以自身开头组成最常见长度连号且不超过49的号码"""
    if analysis.draw_count == 0:
        return frozenset()
    length = analysis.run_length_mode
    return frozenset(n for n in ALL_NUMBERS if n + max(length, 1) - 1 <= MAX_NUMBER)


def by_distance_pattern(analysis: AnalysisResults) -> FrozenSet[int]:
    """与某个历史开出号码的距离恰为最常见间距之一的号码"""
    result = set()
    for drawn in analysis.drawn_numbers:
        for gap in analysis.top_gaps:
            for n in (drawn - gap, drawn + gap):
                if 1 <= n <= MAX_NUMBER:
                    result.add(n)
    return frozenset(result)


class CandidateGenerator:
    """候选号码生成器"""

    def __init__(self, config: Dict[str, Any]):
        """
        初始化候选号码生成器

        Args:
            config: 配置字典
        """
        self.config = config
        candidate_config = config.get('candidates', {})
        self.periodicity_max_std = candidate_config.get('periodicity_max_std', 2.0)
        self.zodiac_min_transitions = candidate_config.get('zodiac_min_transitions', 5)

    def by_dimension(self, analysis: AnalysisResults) -> Dict[str, FrozenSet[int]]:
        """
        各维度各自挑出的号码

        特码规律对应打分中的“特征匹配”维度。

        Returns:
            {维度名: 号码集合}
        """
        return {
            'periodicity': by_periodicity(analysis, self.periodicity_max_std),
            'zodiac': by_zodiac_pattern(analysis, self.zodiac_min_transitions),
            'element': by_element_pattern(analysis),
            'attribute': by_special_pattern(analysis),
            'sum': by_sum_pattern(analysis),
            'tail': by_tail_pattern(analysis),
            'consecutive': by_consecutive_pattern(analysis),
            'distance': by_distance_pattern(analysis),
        }

    def generate(self, analysis: AnalysisResults) -> FrozenSet[int]:
        """
        生成候选集（各维度结果的并集）

        Args:
            analysis: 历史规律分析结果

        Returns:
            去重后的候选号码集合
        """
        selections = self.by_dimension(analysis)
        candidates = frozenset().union(*selections.values())
        summary = ', '.join(f"{k}={len(v)}" for k, v in selections.items())
        logger.debug(f"候选号码: 共 {len(candidates)} 个 ({summary})")
        return candidates
