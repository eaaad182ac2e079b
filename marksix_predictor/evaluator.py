# -*- coding: utf-8 -*-
"""
预测评估模块
按时间顺序回测预测效果并生成报告
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import f1_score, precision_score, recall_score

from .attributes import MAX_NUMBER
from .engine import PredictionEngine
from .exceptions import InsufficientCandidatesError
from .models import HistoricalDataset, N_ORDINARY
from .weights import WeightConfig

logger = logging.getLogger(__name__)


def indicator_matrix(rows: Sequence[Sequence[int]]) -> np.ndarray:
    """把每行号码转换为 49 维 0/1 指示向量"""
    matrix = np.zeros((len(rows), MAX_NUMBER), dtype=int)
    for i, numbers in enumerate(rows):
        matrix[i, [n - 1 for n in numbers]] = 1
    return matrix


class PredictionEvaluator:
    """预测评估器类"""

    def __init__(self, config: Dict[str, Any], engine: Optional[PredictionEngine] = None):
        """
        初始化预测评估器

        Args:
            config: 配置字典
            engine: 用于回测的预测引擎，缺省时新建一个
        """
        self.config = config
        self.engine = engine or PredictionEngine(config)
        self.default_window = config.get('evaluation', {}).get('backtest_window', 30)
        self.evaluation_results = {}

    def backtest(self, dataset: HistoricalDataset, window: Optional[int] = None,
                 weights: Optional[WeightConfig] = None) -> Dict[str, Any]:
        """
        滚动回测：用第 i 期之前的数据预测第 i 期，验证后调整权重再进入下一期

        Args:
            dataset: 历史数据集
            window: 回测最近多少期
            weights: 起始权重，缺省为默认权重

        Returns:
            评估指标字典
        """
        window = window or self.default_window
        weights = weights or WeightConfig.default()
        start = max(1, len(dataset) - window)
        logger.info(f"开始回测 {dataset.variant.value}，共 {len(dataset) - start} 期")

        records = []
        predicted_rows = []
        actual_rows = []
        skipped = 0
        for i in range(start, len(dataset)):
            actual = dataset[i]
            try:
                prediction = self.engine.predict_from_dataset(dataset.head(i), weights)
            except InsufficientCandidatesError as e:
                logger.debug(f"第 {i} 期跳过: {e}")
                skipped += 1
                continue

            result = self.engine.validator.validate(prediction, actual)
            weights = self.engine.feedback.apply(result, weights)

            predicted_rows.append(prediction.all_numbers)
            actual_rows.append(actual.all_numbers)
            records.append({
                'draw_time': actual.draw_time.strftime('%Y-%m-%d %H:%M:%S'),
                'predicted': ','.join(f"{n:02d}" for n in prediction.numbers) + f"+{prediction.special_number:02d}",
                'actual': ','.join(f"{n:02d}" for n in actual.numbers) + f"+{actual.special_number:02d}",
                'hit_count': result.hit_count,
                'special_hit': result.special_hit,
                'accuracy': result.accuracy,
                'attribute_match_rate': result.attribute_match_rate,
                'confidence': prediction.confidence,
            })

        metrics = self._summarize(records, predicted_rows, actual_rows)
        metrics['variant'] = dataset.variant.value
        metrics['skipped'] = skipped
        metrics['final_weights'] = weights.as_dict()
        self.evaluation_results = metrics

        logger.info("回测完成！主要指标：")
        logger.info(f"  评估期数: {metrics['evaluated']} (跳过 {skipped})")
        logger.info(f"  平均命中数: {metrics['avg_hit_count']:.2f}/{N_ORDINARY}")
        logger.info(f"  平均准确率: {metrics['avg_accuracy']:.4f}")
        logger.info(f"  特码命中率: {metrics['special_hit_rate']:.4f}")
        return metrics

    @staticmethod
    def _summarize(records, predicted_rows, actual_rows) -> Dict[str, Any]:
        metrics = {'evaluated': len(records), 'records': records}
        if not records:
            metrics.update({
                'avg_hit_count': 0.0,
                'avg_accuracy': 0.0,
                'special_hit_rate': 0.0,
                'avg_attribute_match_rate': 0.0,
                'avg_confidence': 0.0,
                'precision': 0.0,
                'recall': 0.0,
                'f1_score': 0.0,
                'match_distribution': {f'{i}_matches': 0 for i in range(N_ORDINARY + 1)},
            })
            return metrics

        df = pd.DataFrame(records)
        metrics['avg_hit_count'] = float(df['hit_count'].mean())
        metrics['avg_accuracy'] = float(df['accuracy'].mean())
        metrics['special_hit_rate'] = float(df['special_hit'].mean())
        metrics['avg_attribute_match_rate'] = float(df['attribute_match_rate'].mean())
        metrics['avg_confidence'] = float(df['confidence'].mean())

        y_true = indicator_matrix(actual_rows)
        y_pred = indicator_matrix(predicted_rows)
        metrics['precision'] = float(precision_score(y_true, y_pred, average='micro', zero_division=0))
        metrics['recall'] = float(recall_score(y_true, y_pred, average='micro', zero_division=0))
        metrics['f1_score'] = float(f1_score(y_true, y_pred, average='micro', zero_division=0))

        hits = df['hit_count'].to_numpy()
        metrics['match_distribution'] = {
            f'{i}_matches': int(np.sum(hits == i)) for i in range(N_ORDINARY + 1)
        }
        return metrics

    def generate_report(self, metrics: Dict[str, Any], filepath: str):
        """
        生成回测报告

        Args:
            metrics: backtest 返回的指标
            filepath: 报告保存路径
        """
        output_path = Path(filepath)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        report_lines = [
            "# 预测回测报告",
            f"\n生成时间: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            f"\n彩票类型: {metrics.get('variant', '未知')}",
            "\n## 1. 整体性能指标",
            f"\n- **评估期数**: {metrics.get('evaluated', 0)} (跳过 {metrics.get('skipped', 0)})",
            f"- **平均命中数**: {metrics.get('avg_hit_count', 0):.2f}/{N_ORDINARY}",
            f"- **平均准确率**: {metrics.get('avg_accuracy', 0):.4f}",
            f"- **特码命中率**: {metrics.get('special_hit_rate', 0):.4f}",
            f"- **平均属性匹配率**: {metrics.get('avg_attribute_match_rate', 0):.4f}",
            f"- **平均置信度**: {metrics.get('avg_confidence', 0):.4f}",
            f"- **精确率**: {metrics.get('precision', 0):.4f}",
            f"- **召回率**: {metrics.get('recall', 0):.4f}",
            f"- **F1分数**: {metrics.get('f1_score', 0):.4f}",
        ]

        if 'match_distribution' in metrics:
            report_lines.extend([
                "\n## 2. 命中分布",
                "\n| 命中数 | 期数 | 占比 |",
                "|--------|------|------|"
            ])
            total = sum(metrics['match_distribution'].values())
            for match_count, count in sorted(metrics['match_distribution'].items()):
                match_num = match_count.split('_')[0]
                percentage = (count / total * 100) if total > 0 else 0
                report_lines.append(f"| {match_num} | {count} | {percentage:.1f}% |")

        if 'final_weights' in metrics:
            report_lines.extend([
                "\n## 3. 回测结束时的权重",
                "\n| 维度 | 权重 |",
                "|------|------|"
            ])
            for dimension, value in metrics['final_weights'].items():
                report_lines.append(f"| {dimension} | {value:.4f} |")

        report_lines.extend([
            "\n## 4. 说明",
            "- 彩票开奖是随机事件，随机选7个号码的期望命中率为 7/49 ≈ 0.1429",
            "- 回测结果仅用于比较不同配置，不代表未来表现",
        ])

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(report_lines))

        if metrics.get('records'):
            csv_path = output_path.with_suffix('.csv')
            pd.DataFrame(metrics['records']).to_csv(csv_path, index=False, encoding='utf-8')
            logger.info(f"逐期明细已保存至: {csv_path}")

        logger.info(f"回测报告已生成: {output_path}")
