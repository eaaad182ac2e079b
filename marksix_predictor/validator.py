# -*- coding: utf-8 -*-
"""
预测验证模块
把预测结果与实际开奖对比，得出命中情况和逐维度的匹配详情
"""

import logging
from typing import Any, Dict, Optional, Sequence

from .analysis import adjacent_gaps, consecutive_runs
from .attributes import color_of, element_of, tail_of, zodiac_of
from .models import DrawResult, N_TOTAL, PredictionResult, ValidationDetails, ValidationResult

logger = logging.getLogger(__name__)

# 属性匹配率中各项的权重
MATCH_RATE_WEIGHTS = {
    'zodiac': 0.20,
    'element': 0.20,
    'color': 0.15,
    'odd_even': 0.10,
    'big_small': 0.10,
    'sum': 0.10,
    'tail': 0.05,
    'consecutive': 0.05,
    'distance': 0.05,
}


def _class_matches(predicted: Sequence[int], actual: Sequence[int], classify) -> int:
    """预测号码中，类别出现在实际号码类别里的个数"""
    actual_classes = {classify(n) for n in actual}
    return sum(1 for n in predicted if classify(n) in actual_classes)


def _relative_deviation(predicted: float, actual: float) -> float:
    if actual == 0:
        return 0.0
    return abs(predicted - actual) / actual


def count_consecutive_matches(predicted: Sequence[int], actual: Sequence[int]) -> int:
    """预测中长度与某个实际连号段相同的连号段个数"""
    actual_lengths = {len(run) for run in consecutive_runs(actual)}
    return sum(1 for run in consecutive_runs(predicted) if len(run) in actual_lengths)


def count_distance_matches(predicted: Sequence[int], actual: Sequence[int], tolerance: int = 1) -> int:
    """预测中与某个实际相邻间距相差不超过1的相邻间距个数"""
    actual_gaps = adjacent_gaps(actual)
    return sum(1 for gap in adjacent_gaps(predicted)
               if any(abs(gap - other) <= tolerance for other in actual_gaps))


def compare_numbers(predicted: Sequence[int], actual: Sequence[int]) -> ValidationDetails:
    """
    逐维度比较两组7个号码

    Args:
        predicted: 预测的7个号码
        actual: 实际的7个号码

    Returns:
        ValidationDetails
    """
    return ValidationDetails(
        zodiac_matches=_class_matches(predicted, actual, zodiac_of),
        element_matches=_class_matches(predicted, actual, element_of),
        color_matches=_class_matches(predicted, actual, color_of),
        odd_even_matches=_class_matches(predicted, actual, lambda n: n % 2),
        big_small_matches=_class_matches(predicted, actual, lambda n: n > 24),
        sum_deviation=_relative_deviation(sum(predicted), sum(actual)),
        tail_deviation=_relative_deviation(sum(tail_of(n) for n in predicted),
                                           sum(tail_of(n) for n in actual)),
        consecutive_matches=count_consecutive_matches(predicted, actual),
        distance_matches=count_distance_matches(predicted, actual),
    )


def attribute_match_rate(details: ValidationDetails) -> float:
    """各项匹配数加权求和后除以7，和值、尾数以 (1 - 偏差) × 7 计入"""
    w = MATCH_RATE_WEIGHTS
    total = (
        details.zodiac_matches * w['zodiac']
        + details.element_matches * w['element']
        + details.color_matches * w['color']
        + details.odd_even_matches * w['odd_even']
        + details.big_small_matches * w['big_small']
        + max(0.0, 1.0 - details.sum_deviation) * N_TOTAL * w['sum']
        + max(0.0, 1.0 - details.tail_deviation) * N_TOTAL * w['tail']
        + details.consecutive_matches * w['consecutive']
        + details.distance_matches * w['distance']
    )
    return min(1.0, max(0.0, total / N_TOTAL))


class Validator:
    """预测验证器"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

    def validate(self, prediction: PredictionResult, actual: DrawResult) -> ValidationResult:
        """
        验证预测结果

        Args:
            prediction: 之前发布的预测
            actual: 对应的实际开奖结果

        Returns:
            ValidationResult
        """
        if prediction.variant is not actual.variant:
            raise ValueError(f"彩票类型不一致: 预测 {prediction.variant.value}, 开奖 {actual.variant.value}")

        actual_ordinary = set(actual.numbers)
        hit_numbers = [n for n in prediction.numbers if n in actual_ordinary]
        missed_numbers = [n for n in prediction.numbers if n not in actual_ordinary]
        hit_count = len(hit_numbers)
        special_hit = prediction.special_number == actual.special_number
        if special_hit:
            hit_numbers.append(prediction.special_number)
        else:
            missed_numbers.append(prediction.special_number)

        details = compare_numbers(prediction.all_numbers, actual.all_numbers)

        return ValidationResult(
            hit_count=hit_count,
            special_hit=special_hit,
            accuracy=(hit_count + (1 if special_hit else 0)) / N_TOTAL,
            hit_numbers=tuple(hit_numbers),
            missed_numbers=tuple(missed_numbers),
            attribute_match_rate=attribute_match_rate(details),
            details=details,
            variant=actual.variant,
            draw_time=actual.draw_time,
        )

    @staticmethod
    def generate_report(result: ValidationResult) -> str:
        """
        生成可读的验证报告

        Args:
            result: 验证结果

        Returns:
            报告文本
        """
        d = result.details
        lines = [
            "预测验证报告",
            "==============",
            "命中情况:",
            f"- 普通号码命中: {result.hit_count}/6",
            f"- 特别号码命中: {'是' if result.special_hit else '否'}",
            f"- 总体准确率: {result.accuracy * 100:.2f}%",
            "",
            f"命中号码: {', '.join(str(n) for n in sorted(result.hit_numbers))}",
            f"未中号码: {', '.join(str(n) for n in sorted(result.missed_numbers))}",
            "",
            "属性匹配分析:",
            f"- 生肖匹配: {d.zodiac_matches}/7",
            f"- 五行匹配: {d.element_matches}/7",
            f"- 颜色匹配: {d.color_matches}/7",
            f"- 奇偶匹配: {d.odd_even_matches}/7",
            f"- 大小匹配: {d.big_small_matches}/7",
            "",
            "数值分析:",
            f"- 和值偏差: {d.sum_deviation * 100:.2f}%",
            f"- 尾数偏差: {d.tail_deviation * 100:.2f}%",
            f"- 连号匹配: {d.consecutive_matches}",
            f"- 距离匹配: {d.distance_matches}",
            "",
            "综合评分:",
            f"属性匹配率: {result.attribute_match_rate * 100:.2f}%",
        ]
        return '\n'.join(lines)
