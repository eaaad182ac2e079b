# -*- coding: utf-8 -*-
"""
置信度评估模块
综合历史回放命中率与号码分布合理性，给出 [0, 1] 的预测置信度
"""

from collections import Counter
import logging
from typing import Any, Callable, Dict, Sequence

import numpy as np

from .attributes import CelestialType, YinYang, color_of, element_of, zodiac_of, zodiac_profile
from .exceptions import InsufficientCandidatesError
from .models import HistoricalDataset, N_TOTAL

logger = logging.getLogger(__name__)

# 由历史快照选出7个号码的函数（普通号码在前，特码在后）
SelectFunction = Callable[[HistoricalDataset], Sequence[int]]

BLEND_WEIGHTS = {
    'historical_accuracy': 0.30,
    'number_distribution': 0.20,
    'zodiac_combination': 0.20,
    'element_balance': 0.15,
    'color_distribution': 0.15,
}


def number_distribution_score(numbers: Sequence[int]) -> float:
    """间隔、奇偶、大小三项检查，每项不合理乘 0.8"""
    score = 1.0
    ordered = sorted(numbers)
    gaps = np.diff(ordered)
    if len(gaps) and not 3 <= float(np.mean(gaps)) <= 10:
        score *= 0.8

    odd = sum(1 for n in numbers if n % 2 == 1)
    if abs(odd - (len(numbers) - odd)) > 2:
        score *= 0.8

    small = sum(1 for n in numbers if n <= 24)
    if abs(small - (len(numbers) - small)) > 2:
        score *= 0.8
    return score


def zodiac_combination_score(numbers: Sequence[int]) -> float:
    """生肖种类少于4乘 0.7；阴阳、天地失衡各乘 0.8（按不同生肖计）"""
    score = 1.0
    zodiacs = {zodiac_of(n) for n in numbers}
    if len(zodiacs) < 4:
        score *= 0.7

    profiles = [zodiac_profile(z) for z in zodiacs]
    yin = sum(1 for p in profiles if p.yin_yang is YinYang.YIN)
    if abs(yin - (len(profiles) - yin)) > 2:
        score *= 0.8

    sky = sum(1 for p in profiles if p.celestial_type is CelestialType.SKY)
    if abs(sky - (len(profiles) - sky)) > 2:
        score *= 0.8
    return score


def _balance_score(labels, n_classes: int, missing_penalty: float, min_classes: int) -> float:
    score = 1.0
    counts = Counter(labels)
    if len(counts) < min_classes:
        score *= missing_penalty
    mean = len(labels) / n_classes
    for count in counts.values():
        if abs(count - mean) > 1:
            score *= 0.9
    return score


def element_balance_score(numbers: Sequence[int]) -> float:
    """五行少于4种乘 0.8，每个五行个数偏离均值超过1再乘 0.9"""
    return _balance_score([element_of(n) for n in numbers], 5, 0.8, 4)


def color_distribution_score(numbers: Sequence[int]) -> float:
    """三种波色不全乘 0.7，每种波色个数偏离均值超过1再乘 0.9"""
    return _balance_score([color_of(n) for n in numbers], 3, 0.7, 3)


class ConfidenceEstimator:
    """预测置信度评估器"""

    def __init__(self, config: Dict[str, Any]):
        """
        初始化置信度评估器

        Args:
            config: 配置字典
        """
        self.config = config
        self.replay_window = config.get('confidence', {}).get('replay_window', 20)

    def historical_accuracy(self, dataset: HistoricalDataset, select: SelectFunction) -> float:
        """
        历史回放命中率

        对最近若干组相邻的两期，用前面的历史快照重新生成预测，
        统计7个号码在下一期7个号码中的平均命中率。

        Args:
            dataset: 历史数据集
            select: 由历史快照选出7个号码的函数

        Returns:
            平均命中率，没有可回放的期数时为0
        """
        if len(dataset) < 2:
            return 0.0

        start = max(1, len(dataset) - self.replay_window)
        total_hits = 0
        total_slots = 0
        for i in range(start, len(dataset)):
            try:
                predicted = select(dataset.head(i))
            except InsufficientCandidatesError:
                continue
            actual = set(dataset[i].all_numbers)
            total_hits += sum(1 for n in predicted if n in actual)
            total_slots += N_TOTAL

        if total_slots == 0:
            return 0.0
        return total_hits / total_slots

    def components(self, numbers: Sequence[int], dataset: HistoricalDataset,
                   select: SelectFunction) -> Dict[str, float]:
        return {
            'historical_accuracy': self.historical_accuracy(dataset, select),
            'number_distribution': number_distribution_score(numbers),
            'zodiac_combination': zodiac_combination_score(numbers),
            'element_balance': element_balance_score(numbers),
            'color_distribution': color_distribution_score(numbers),
        }

    def estimate(self, numbers: Sequence[int], dataset: HistoricalDataset,
                 select: SelectFunction) -> float:
        """
        计算整体置信度

        Args:
            numbers: 预测的7个号码
            dataset: 本轮使用的历史快照
            select: 回放用的选号函数

        Returns:
            [0, 1] 内的置信度
        """
        if len(dataset) == 0:
            return 0.0
        parts = self.components(numbers, dataset, select)
        confidence = sum(BLEND_WEIGHTS[k] * v for k, v in parts.items())
        logger.debug("置信度分项: " + ', '.join(f"{k}={v:.3f}" for k, v in parts.items()))
        return float(min(1.0, max(0.0, confidence)))
