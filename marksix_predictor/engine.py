# -*- coding: utf-8 -*-
"""
预测引擎模块
串联 规律分析 -> 候选号码 -> 打分排序 -> 选号 -> 置信度，并在验证后更新权重
"""

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import joblib
import pandas as pd

from .analysis import PatternAnalyzer
from .attributes import color_of, zodiac_of
from .candidates import CandidateGenerator
from .confidence import ConfidenceEstimator
from .feedback import FeedbackLoop
from .models import DrawResult, HistoricalDataset, LotteryVariant, PredictionResult, ValidationResult
from .scoring import Scorer
from .validator import Validator
from .weights import WeightConfig

logger = logging.getLogger(__name__)

DatasetProvider = Callable[[LotteryVariant], HistoricalDataset]


class PredictionEngine:
    """预测引擎，按彩票类型各自持有一份当前权重"""

    def __init__(self, config: Dict[str, Any], dataset_provider: Optional[DatasetProvider] = None,
                 weights: Optional[Dict[LotteryVariant, WeightConfig]] = None):
        """
        初始化预测引擎

        Args:
            config: 配置字典
            dataset_provider: 按彩票类型返回历史数据集快照的函数
            weights: 各彩票类型的初始权重，缺省时使用配置中的初始权重
        """
        self.config = config
        self.dataset_provider = dataset_provider
        self.analyzer = PatternAnalyzer(config)
        self.generator = CandidateGenerator(config)
        self.scorer = Scorer(config)
        self.estimator = ConfidenceEstimator(config)
        self.validator = Validator(config)
        self.feedback = FeedbackLoop(config)
        self.alternative_count = config.get('prediction', {}).get('alternatives', 6)

        initial = self._initial_weights()
        self._lock = threading.Lock()
        self._weights = {variant: initial for variant in LotteryVariant}
        if weights:
            self._weights.update({LotteryVariant.parse(k): v for k, v in weights.items()})

    def _initial_weights(self) -> WeightConfig:
        initial = self.config.get('weights', {}).get('initial')
        if initial:
            return WeightConfig.from_dict(initial)
        return WeightConfig.default()

    # ------------------------------------------------------------------
    # 权重
    # ------------------------------------------------------------------
    def get_weights(self, variant) -> WeightConfig:
        with self._lock:
            return self._weights[LotteryVariant.parse(variant)]

    def set_weights(self, variant, weights: WeightConfig):
        """整体替换某个彩票类型的权重"""
        variant = LotteryVariant.parse(variant)
        with self._lock:
            updated = dict(self._weights)
            updated[variant] = weights
            self._weights = updated

    def save_checkpoint(self, filepath: str):
        """
        保存各彩票类型的当前权重

        Args:
            filepath: 保存路径
        """
        checkpoint_path = Path(filepath)
        checkpoint_path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            snapshot = dict(self._weights)
        joblib.dump({
            'saved_at': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            'weights': {variant.value: w.as_dict() for variant, w in snapshot.items()},
        }, checkpoint_path)
        logger.info(f"权重检查点已保存至: {checkpoint_path}")

    def load_checkpoint(self, filepath: str):
        """
        加载权重检查点

        Args:
            filepath: 检查点文件路径
        """
        checkpoint_path = Path(filepath)
        if not checkpoint_path.exists():
            raise FileNotFoundError(f"权重检查点不存在: {filepath}")

        checkpoint = joblib.load(checkpoint_path)
        loaded = {LotteryVariant.parse(k): WeightConfig.from_dict(v)
                  for k, v in checkpoint.get('weights', {}).items()}
        with self._lock:
            updated = dict(self._weights)
            updated.update(loaded)
            self._weights = updated
        logger.info(f"权重检查点加载成功: {filepath} (保存于 {checkpoint.get('saved_at', '未知')})")

    # ------------------------------------------------------------------
    # 预测
    # ------------------------------------------------------------------
    def _dataset(self, variant: LotteryVariant) -> HistoricalDataset:
        if self.dataset_provider is None:
            raise ValueError("未设置历史数据来源")
        return self.dataset_provider(variant)

    def _rank(self, dataset: HistoricalDataset, weights: WeightConfig):
        analysis = self.analyzer.analyze(dataset)
        candidates = self.generator.generate(analysis)
        return self.scorer.rank(candidates, analysis, weights)

    def select_numbers(self, dataset: HistoricalDataset, weights: WeightConfig) -> Tuple[int, ...]:
        """只选号不评估置信度，返回7个号码（特码在最后）"""
        ordinary, special = self.scorer.select(self._rank(dataset, weights))
        return ordinary + (special,)

    def predict_from_dataset(self, dataset: HistoricalDataset, weights: WeightConfig) -> PredictionResult:
        """
        基于给定快照和权重生成预测，不读写引擎状态

        Args:
            dataset: 历史数据集快照
            weights: 权重快照

        Returns:
            PredictionResult

        Raises:
            InsufficientCandidatesError: 候选号码不足7个
        """
        ranked = self._rank(dataset, weights)
        ordinary, special = self.scorer.select(ranked)
        confidence = self.estimator.estimate(
            ordinary + (special,), dataset,
            lambda snapshot: self.select_numbers(snapshot, weights),
        )
        alternatives = tuple(s.number for s in ranked[7:7 + self.alternative_count])
        return PredictionResult(
            variant=dataset.variant,
            numbers=ordinary,
            special_number=special,
            confidence=confidence,
            alternatives=alternatives,
        )

    def predict_next_draw(self, variant) -> PredictionResult:
        """
        预测下一期号码

        Args:
            variant: 彩票类型

        Returns:
            PredictionResult
        """
        variant = LotteryVariant.parse(variant)
        dataset = self._dataset(variant)
        weights = self.get_weights(variant)
        logger.info(f"开始预测 {variant.value} 下一期，历史数据 {len(dataset)} 期")
        prediction = self.predict_from_dataset(dataset, weights)
        logger.info(f"预测完成: {list(prediction.numbers)} + {prediction.special_number}, "
                    f"置信度 {prediction.confidence:.3f}")
        return prediction

    # ------------------------------------------------------------------
    # 验证与调权
    # ------------------------------------------------------------------
    def validate_and_update_weights(self, prediction: PredictionResult, actual: DrawResult) -> ValidationResult:
        """
        验证预测并用结果调整该彩票类型的权重

        Args:
            prediction: 之前的预测
            actual: 实际开奖结果

        Returns:
            ValidationResult
        """
        result = self.validator.validate(prediction, actual)
        with self._lock:
            current = self._weights[actual.variant]
            updated = dict(self._weights)
            updated[actual.variant] = self.feedback.apply(result, current)
            self._weights = updated
        logger.info(f"验证完成: 命中 {result.hit_count}/6, 特码{'命中' if result.special_hit else '未中'}, "
                    f"准确率 {result.accuracy:.2%}")
        logger.debug('\n' + self.validator.generate_report(result))
        return result

    def optimize_weights(self, variant) -> WeightConfig:
        """
        根据历史数据优化某个彩票类型的权重并替换当前权重

        Args:
            variant: 彩票类型

        Returns:
            优化后的权重（历史不足时为原权重）
        """
        variant = LotteryVariant.parse(variant)
        dataset = self._dataset(variant)
        optimized = self.feedback.optimize_weights(dataset, self.get_weights(variant),
                                                   self.analyzer, self.generator)
        self.set_weights(variant, optimized)
        return optimized

    # ------------------------------------------------------------------
    # 输出
    # ------------------------------------------------------------------
    def display_prediction(self, prediction: PredictionResult):
        """
        在控制台显示预测结果

        Args:
            prediction: 预测结果
        """
        print("\n" + "=" * 70)
        print(f"                    {prediction.variant.value} 下一期预测")
        print("=" * 70)
        print(f"预测时间: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print("-" * 70)

        numbers_str = ', '.join(f"{n:02d}" for n in prediction.numbers)
        print(f"普通号码: {numbers_str}")
        print(f"特码: {prediction.special_number:02d} "
              f"({zodiac_of(prediction.special_number).value}/{color_of(prediction.special_number).value})")

        if self.config.get('prediction', {}).get('show_confidence', True):
            confidence_pct = prediction.confidence * 100
            print(f"\n整体置信度: {confidence_pct:.1f}%")
            bar_length = int(confidence_pct / 2)
            print(f"[{'█' * bar_length}{'░' * (50 - bar_length)}]")

        if prediction.alternatives and self.config.get('prediction', {}).get('show_alternatives', True):
            print("\n备选号码 (按得分排序):")
            print("  " + ', '.join(f"{n:02d}" for n in prediction.alternatives))

        print("\n" + "=" * 70)
        print("提示: 彩票具有随机性，预测仅供参考，请理性购彩！")
        print("=" * 70 + "\n")

    def save_predictions(self, predictions: Union[PredictionResult, List[PredictionResult]], filepath: str):
        """
        追加保存预测结果（CSV + 同名JSON）

        Args:
            predictions: 预测结果或列表
            filepath: CSV 保存路径
        """
        if isinstance(predictions, PredictionResult):
            predictions = [predictions]

        output_path = Path(filepath)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')

        rows = []
        for p in predictions:
            row = {'预测时间': timestamp, '彩票类型': p.variant.value}
            row.update({f'号码{i + 1}': n for i, n in enumerate(p.numbers)})
            row['特码'] = p.special_number
            row['置信度'] = f"{p.confidence * 100:.1f}%"
            rows.append(row)

        df = pd.DataFrame(rows)
        if output_path.exists():
            existing_df = pd.read_csv(output_path, encoding='utf-8')
            df = pd.concat([existing_df, df], ignore_index=True)
        df.to_csv(output_path, index=False, encoding='utf-8')
        logger.info(f"预测结果已保存至: {output_path}")

        json_path = output_path.with_suffix('.json')
        predictions_list = []
        if json_path.exists():
            with open(json_path, 'r', encoding='utf-8') as f:
                predictions_list = json.load(f)
        for p in predictions:
            predictions_list.append({'timestamp': timestamp, **p.to_dict()})
        with open(json_path, 'w', encoding='utf-8') as f:
            json.dump(predictions_list, f, indent=2, ensure_ascii=False)

    @staticmethod
    def load_predictions(filepath: str) -> List[PredictionResult]:
        """读取 save_predictions 写出的 JSON 预测记录"""
        json_path = Path(filepath).with_suffix('.json')
        if not json_path.exists():
            raise FileNotFoundError(f"预测记录不存在: {json_path}")
        with open(json_path, 'r', encoding='utf-8') as f:
            records = json.load(f)
        return [
            PredictionResult(
                variant=r['variant'],
                numbers=tuple(r['numbers']),
                special_number=r['special_number'],
                confidence=r['confidence'],
                alternatives=tuple(r.get('alternatives', ())),
            )
            for r in records
        ]
