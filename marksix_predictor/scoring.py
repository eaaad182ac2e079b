# -*- coding: utf-8 -*-
"""
号码打分模块
为每个候选号码计算八个维度的子得分（均在 [0, 1] 内），再按权重加权求和排序
"""

from dataclasses import dataclass
import logging
import math
from typing import Any, Dict, Iterable, List, Tuple

import numpy as np

from .analysis import AnalysisResults
from .attributes import Element, Zodiac, element_of, tail_of, zodiac_of
from .exceptions import InsufficientCandidatesError
from .models import N_ORDINARY, N_TOTAL
from .weights import DIMENSIONS, WeightConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredNumber:
    number: int
    score: float
    sub_scores: Tuple[float, ...]

    def breakdown(self) -> Dict[str, float]:
        return dict(zip(DIMENSIONS, self.sub_scores))


def _ratio(value: float, maximum: float) -> float:
    # 分母为0时按0分处理
    if maximum <= 0:
        return 0.0
    return min(1.0, value / maximum)


def periodicity_score(number: int, analysis: AnalysisResults) -> float:
    """间隔标准差越小得分越高：1 / (1 + std)，出现不足两次为0"""
    periodicity = analysis.periodicity.get(number)
    if periodicity is None or math.isinf(periodicity.std_interval):
        return 0.0
    return 1.0 / (1.0 + periodicity.std_interval)


def zodiac_score(number: int, analysis: AnalysisResults) -> float:
    """
    生肖转换得分

    以上期特码生肖为起点，统计转入各生肖的次数并按最大值归一化；
    上期生肖没有出现过转换时，改用各生肖的总转入次数。
    """
    target = zodiac_of(number)
    transitions = analysis.zodiac_transitions
    if not transitions:
        return 0.0

    incoming: Dict[Zodiac, int] = {}
    outgoing: Dict[Zodiac, int] = {}
    for (source, dest), count in transitions.items():
        incoming[dest] = incoming.get(dest, 0) + count
        if source is analysis.last_zodiac:
            outgoing[dest] = outgoing.get(dest, 0) + count

    table = outgoing if outgoing else incoming
    return _ratio(table.get(target, 0), max(table.values(), default=0))


def element_score(number: int, analysis: AnalysisResults) -> float:
    """号码五行在历史五行组合中出现的期数，按最大值归一化"""
    presence: Dict[Element, int] = {}
    for combination, count in analysis.element_combinations.items():
        for element, _ in combination:
            presence[element] = presence.get(element, 0) + count
    return _ratio(presence.get(element_of(number), 0), max(presence.values(), default=0))


def attribute_score(number: int, analysis: AnalysisResults) -> float:
    """
    特征匹配得分，四项各占 0.25：
    奇偶与特码多数一致、大小与特码多数一致、特码生肖频率、特码五行频率
    """
    special = analysis.special
    score = 0.0

    is_odd = number % 2 == 1
    if (is_odd and special.odd_count > special.even_count) or \
            (not is_odd and special.even_count > special.odd_count):
        score += 0.25

    is_big = number > 24
    if (is_big and special.big_count > special.small_count) or \
            (not is_big and special.small_count > special.big_count):
        score += 0.25

    zodiac_counts = special.zodiac_counts
    score += 0.25 * _ratio(zodiac_counts.get(zodiac_of(number), 0), max(zodiac_counts.values(), default=0))

    element_counts = special.element_counts
    score += 0.25 * _ratio(element_counts.get(element_of(number), 0), max(element_counts.values(), default=0))

    return score


def sum_score(number: int, analysis: AnalysisResults) -> float:
    """1 - min(1, |号码 - 历史平均和值| / 最大偏差)"""
    if analysis.max_sum_deviation <= 0:
        return 0.0
    return 1.0 - min(1.0, abs(number - analysis.average_sum) / analysis.max_sum_deviation)


def tail_score(number: int, analysis: AnalysisResults) -> float:
    counts = analysis.tail_counts
    return _ratio(counts.get(tail_of(number), 0), max(counts.values(), default=0))


def consecutive_score(number: int, analysis: AnalysisResults) -> float:
    counts = analysis.run_member_counts
    return _ratio(counts.get(number, 0), max(counts.values(), default=0))


def distance_score(number: int, analysis: AnalysisResults) -> float:
    """历史上含有与该号码相距不超过3的号码的期数占比"""
    return float(analysis.proximity.get(number, 0.0))


SCORE_FUNCTIONS = {
    'periodicity': periodicity_score,
    'zodiac': zodiac_score,
    'element': element_score,
    'attribute': attribute_score,
    'sum': sum_score,
    'tail': tail_score,
    'consecutive': consecutive_score,
    'distance': distance_score,
}


class Scorer:
    """候选号码打分器"""

    def __init__(self, config: Dict[str, Any]):
        self.config = config

    def score_vector(self, number: int, analysis: AnalysisResults) -> np.ndarray:
        """按 DIMENSIONS 顺序返回八个子得分"""
        return np.array([SCORE_FUNCTIONS[d](number, analysis) for d in DIMENSIONS], dtype=float)

    @staticmethod
    def combine(sub_scores, weights: WeightConfig) -> float:
        """子得分与权重的加权和"""
        return float(np.asarray(sub_scores, dtype=float) @ weights.as_array())

    def rank(self, candidates: Iterable[int], analysis: AnalysisResults,
             weights: WeightConfig) -> List[ScoredNumber]:
        """
        计算候选号码总分并排序

        Args:
            candidates: 候选号码
            analysis: 历史规律分析结果
            weights: 本轮使用的权重快照

        Returns:
            按总分降序、号码升序排列的列表
        """
        scored = []
        for number in set(candidates):
            sub_scores = self.score_vector(number, analysis)
            scored.append(ScoredNumber(
                number=int(number),
                score=self.combine(sub_scores, weights),
                sub_scores=tuple(float(s) for s in sub_scores),
            ))
        scored.sort(key=lambda s: (-s.score, s.number))
        return scored

    def select(self, ranked: List[ScoredNumber]) -> Tuple[Tuple[int, ...], int]:
        """
        取排名前7的号码：前6个为普通号码，第7个为特码

        Raises:
            InsufficientCandidatesError: 候选号码不足7个
        """
        if len(ranked) < N_TOTAL:
            raise InsufficientCandidatesError(len(ranked), N_TOTAL)
        top = ranked[:N_TOTAL]
        logger.debug("排名前7: " + ', '.join(f"{s.number:02d}({s.score:.4f})" for s in top))
        return tuple(s.number for s in top[:N_ORDINARY]), top[N_ORDINARY].number
