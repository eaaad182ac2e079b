# -*- coding: utf-8 -*-
"""
反馈调权模块
验证结果 -> 新权重；以及基于历史数据的各维度权重优化
"""

import logging
from typing import Any, Dict

from .analysis import PatternAnalyzer
from .attributes import MAX_NUMBER
from .candidates import CandidateGenerator
from .models import HistoricalDataset, N_TOTAL, ValidationResult
from .weights import DIMENSIONS, STRONG_MATCH_THRESHOLD, WeightConfig

logger = logging.getLogger(__name__)

MIN_HISTORY = 10


class FeedbackLoop:
    """把验证结果转换为下一轮使用的权重"""

    def __init__(self, config: Dict[str, Any]):
        """
        初始化反馈环

        Args:
            config: 配置字典
        """
        self.config = config
        weight_config = config.get('weights', {})
        self.strong_match_threshold = weight_config.get('strong_match_threshold', STRONG_MATCH_THRESHOLD)
        self.min_history = weight_config.get('min_history', MIN_HISTORY)

    def apply(self, result: ValidationResult, weights: WeightConfig) -> WeightConfig:
        """
        根据一次验证结果调整权重

        Args:
            result: 验证结果
            weights: 产生该预测时使用的权重

        Returns:
            归一化后的新权重
        """
        adjusted = weights.adjust_from(result.details, result.accuracy, self.strong_match_threshold).normalize()
        logger.debug(f"权重调整: {adjusted.describe(weights)}")
        return adjusted

    def dimension_accuracy(self, dataset: HistoricalDataset, analyzer: PatternAnalyzer,
                           generator: CandidateGenerator) -> Dict[str, float]:
        """
        各维度候选集对下一期号码的覆盖提升度

        覆盖率 = 下一期7个号码中落在该维度候选集里的比例，
        再除以随机情况下的期望覆盖率（候选集大小 / 49）。

        Returns:
            {维度名: 提升度}，候选集为空的维度为0
        """
        selections = generator.by_dimension(analyzer.analyze(dataset))
        pairs = len(dataset) - 1
        accuracy = {}
        for dimension in DIMENSIONS:
            selected = selections[dimension]
            if not selected or pairs <= 0:
                accuracy[dimension] = 0.0
                continue
            covered = sum(
                sum(1 for n in dataset[i + 1].all_numbers if n in selected) / N_TOTAL
                for i in range(pairs)
            )
            accuracy[dimension] = (covered / pairs) / (len(selected) / MAX_NUMBER)
        return accuracy

    def optimize_weights(self, dataset: HistoricalDataset, weights: WeightConfig,
                         analyzer: PatternAnalyzer, generator: CandidateGenerator) -> WeightConfig:
        """
        根据历史数据优化权重

        历史期数不足时不做优化，原样返回传入的权重。

        Args:
            dataset: 历史数据集
            weights: 当前权重
            analyzer: 规律分析器
            generator: 候选号码生成器

        Returns:
            优化后的权重
        """
        if len(dataset) < self.min_history:
            logger.info(f"历史数据只有 {len(dataset)} 期 (少于 {self.min_history} 期)，跳过权重优化")
            return weights

        accuracy = self.dimension_accuracy(dataset, analyzer, generator)
        total = sum(accuracy.values())
        if total <= 0:
            logger.warning("各维度准确率均为0，保留原权重")
            return weights

        optimized = WeightConfig.from_raw({d: v / total for d, v in accuracy.items()})
        logger.info(f"权重优化完成: {optimized.describe(weights)}")
        return optimized
