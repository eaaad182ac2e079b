# -*- coding: utf-8 -*-
"""
权重配置模块
八个评分维度的权重向量，以及根据验证结果调整、归一化权重的运算

WeightConfig 是不可变对象，每次调整都返回新实例。
"""

from dataclasses import dataclass, fields
from typing import Dict, Mapping, Optional

import numpy as np

from .exceptions import InvalidWeightError
from .models import ValidationDetails

DIMENSIONS = (
    'periodicity',   # 周期性
    'zodiac',        # 生肖
    'element',       # 五行
    'attribute',     # 特征匹配
    'sum',           # 数字和
    'tail',          # 尾数
    'consecutive',   # 连号
    'distance',      # 间距
)

SUM_TOLERANCE = 1e-9
MIN_WEIGHT = 0.10
MAX_WEIGHT = 0.30

# 有逐维度匹配计数信号的维度 -> ValidationDetails 中对应的字段
MATCH_SIGNALS = {
    'zodiac': 'zodiac_matches',
    'element': 'element_matches',
}

STRONG_MATCH_THRESHOLD = 4
STRONG_MATCH_FACTOR = 1.1
WEAK_MATCH_FACTOR = 0.9


def overall_factor(accuracy: float) -> float:
    """按整体准确率确定的统一调整系数"""
    if accuracy >= 0.5:
        return 1.1
    if accuracy >= 0.3:
        return 1.0
    return 0.9


def bounded_normalize(values, low: float = MIN_WEIGHT, high: float = MAX_WEIGHT) -> np.ndarray:
    """
    先截断到 [low, high] 再按总和归一化

    归一化后若有权重再次越界，把越界项固定在边界上，
    剩余的份额按比例分给其余权重，直到没有越界项为止。

    Args:
        values: 原始权重
        low: 下界
        high: 上界

    Returns:
        总和为1且每项都在 [low, high] 内的数组
    """
    weights = np.clip(np.asarray(values, dtype=float), low, high)
    n = len(weights)
    if not n * low <= 1.0 <= n * high:
        raise InvalidWeightError(f"{n} 个权重无法同时满足区间 [{low}, {high}] 与总和为1")

    weights = weights / weights.sum()
    pinned = np.zeros(n, dtype=bool)
    for _ in range(n + 1):
        below = ~pinned & (weights < low)
        above = ~pinned & (weights > high)
        if not below.any() and not above.any():
            break
        weights[below] = low
        weights[above] = high
        pinned |= below | above
        free = ~pinned
        remaining = 1.0 - weights[pinned].sum()
        free_total = weights[free].sum()
        if free.any() and free_total > 0:
            weights[free] *= remaining / free_total
        elif free.any():
            weights[free] = remaining / free.sum()
    return weights


@dataclass(frozen=True)
class WeightConfig:
    """八维权重向量，所有权重非负且总和为1"""

    periodicity_weight: float = 0.20
    zodiac_weight: float = 0.15
    element_weight: float = 0.15
    attribute_weight: float = 0.15
    sum_weight: float = 0.10
    tail_weight: float = 0.10
    consecutive_weight: float = 0.10
    distance_weight: float = 0.05

    def __post_init__(self):
        values = []
        for f in fields(self):
            value = float(getattr(self, f.name))
            if not np.isfinite(value) or value < 0:
                raise InvalidWeightError(f"权重 {f.name} 必须是非负数，实际 {value}")
            object.__setattr__(self, f.name, value)
            values.append(value)
        total = sum(values)
        if abs(total - 1.0) > SUM_TOLERANCE:
            raise InvalidWeightError(f"权重总和必须等于1.0，实际 {total:.12f}")

    @classmethod
    def default(cls) -> 'WeightConfig':
        return cls()

    @classmethod
    def from_dict(cls, weights: Mapping[str, float]) -> 'WeightConfig':
        """从 {维度名: 权重} 构造，缺失维度视为错误"""
        missing = [d for d in DIMENSIONS if d not in weights]
        if missing:
            raise InvalidWeightError(f"缺少维度权重: {missing}")
        return cls(**{f'{d}_weight': weights[d] for d in DIMENSIONS})

    @classmethod
    def from_raw(cls, values: Mapping[str, float]) -> 'WeightConfig':
        """从任意非负原始值构造，先做截断归一化"""
        raw = [float(values[d]) for d in DIMENSIONS]
        if any(v < 0 or not np.isfinite(v) for v in raw):
            raise InvalidWeightError(f"原始权重必须是非负数: {raw}")
        normalized = bounded_normalize(raw)
        return cls.from_dict(dict(zip(DIMENSIONS, normalized.tolist())))

    def as_dict(self) -> Dict[str, float]:
        return {d: getattr(self, f'{d}_weight') for d in DIMENSIONS}

    def as_array(self) -> np.ndarray:
        return np.array([getattr(self, f'{d}_weight') for d in DIMENSIONS], dtype=float)

    def weight(self, dimension: str) -> float:
        return getattr(self, f'{dimension}_weight')

    def is_normalized(self, low: float = MIN_WEIGHT, high: float = MAX_WEIGHT) -> bool:
        values = self.as_array()
        return bool(np.all(values >= low - 1e-12) and np.all(values <= high + 1e-12)
                    and abs(values.sum() - 1.0) <= 1e-12)

    def scaled(self, details: ValidationDetails, accuracy: float,
               threshold: int = STRONG_MATCH_THRESHOLD) -> Dict[str, float]:
        """
        按验证结果缩放后的原始权重（截断、归一化之前）

        Args:
            details: 验证详情
            accuracy: 整体准确率
            threshold: 强匹配阈值（7个号码中至少匹配几个）

        Returns:
            {维度名: 缩放后的权重}
        """
        factor = overall_factor(accuracy)
        scaled = {}
        for dimension, value in self.as_dict().items():
            signal = MATCH_SIGNALS.get(dimension)
            if signal is not None:
                matches = getattr(details, signal)
                value *= STRONG_MATCH_FACTOR if matches >= threshold else WEAK_MATCH_FACTOR
            scaled[dimension] = value * factor
        return scaled

    def adjust_from(self, details: ValidationDetails, accuracy: float,
                    threshold: int = STRONG_MATCH_THRESHOLD) -> 'WeightConfig':
        """根据验证详情和准确率调整权重，返回归一化后的新配置"""
        return WeightConfig.from_raw(self.scaled(details, accuracy, threshold))

    def normalize(self) -> 'WeightConfig':
        """截断到 [0.10, 0.30] 并重新归一化；已满足约束时原样返回"""
        if self.is_normalized():
            return self
        return WeightConfig.from_raw(self.as_dict())

    def describe(self, previous: Optional['WeightConfig'] = None) -> str:
        parts = []
        for dimension, value in self.as_dict().items():
            if previous is None:
                parts.append(f"{dimension}={value:.4f}")
            else:
                delta = value - previous.weight(dimension)
                parts.append(f"{dimension}={value:.4f}({delta:+.4f})")
        return ', '.join(parts)
