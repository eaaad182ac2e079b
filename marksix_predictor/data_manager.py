# -*- coding: utf-8 -*-
"""
数据管理模块
负责开奖数据的加载、清洗，以及转换为按彩票类型划分的历史数据集
"""

import pandas as pd
from datetime import datetime
from pathlib import Path
import logging
from typing import Any, Dict, List, Optional

from .models import DrawResult, HistoricalDataset, LotteryVariant
from .utils import parse_numbers, validate_draw_format

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['variant', 'date', 'numbers']


class DataManager:
    """数据管理类"""

    def __init__(self, config: Dict[str, Any], now: Optional[datetime] = None):
        """
        初始化数据管理器

        Args:
            config: 配置字典
            now: 判断"未来开奖"时使用的当前时间，默认取系统时间
        """
        self.config = config
        self.now = now
        self.raw_data = None
        self.cleaned_data = None

    def _now(self) -> datetime:
        return self.now or datetime.now()

    def load_from_csv(self, filepath: Optional[str] = None) -> pd.DataFrame:
        """
        从CSV文件加载数据

        Args:
            filepath: CSV文件路径，缺省为配置中的 data.source

        Returns:
            加载的数据框
        """
        filepath = filepath or self.config.get('data', {}).get('source', 'data/raw/marksix.csv')
        try:
            logger.info(f"正在加载数据: {filepath}")
            self.raw_data = pd.read_csv(filepath, encoding='utf-8', dtype={'numbers': str, 'issue': str})
            missing = [c for c in REQUIRED_COLUMNS if c not in self.raw_data.columns]
            if missing:
                raise ValueError(f"缺少必要的列: {missing}")
            logger.info(f"成功加载 {len(self.raw_data)} 条记录")
            return self.raw_data
        except Exception as e:
            logger.error(f"加载数据失败: {str(e)}")
            raise

    def clean_data(self) -> pd.DataFrame:
        """
        清洗数据
        - 去重
        - 处理缺失值
        - 统一日期格式、彩票类型
        - 验证号码格式
        - 剔除未来的开奖时间

        Returns:
            清洗后的数据框
        """
        if self.raw_data is None:
            raise ValueError("请先加载数据")

        logger.info("开始清洗数据...")
        df = self.raw_data.copy()
        original_count = len(df)

        # 1. 去除完全重复的行
        df = df.drop_duplicates()
        logger.info(f"去重后剩余 {len(df)} 条记录 (删除 {original_count - len(df)} 条)")

        # 2. 日期缺失或无法解析的记录
        df['date'] = pd.to_datetime(df['date'], errors='coerce')
        before = len(df)
        df = df.dropna(subset=['date'])
        if len(df) < before:
            logger.warning(f"删除 {before - len(df)} 条日期无效的记录")

        # 3. 彩票类型
        df['variant'] = df['variant'].astype(str).str.strip().str.lower()
        valid_variants = [v.value for v in LotteryVariant]
        before = len(df)
        df = df[df['variant'].isin(valid_variants)]
        if len(df) < before:
            logger.warning(f"删除 {before - len(df)} 条彩票类型未知的记录")

        # 4. 号码格式
        before = len(df)
        valid = df['numbers'].apply(lambda s: isinstance(s, str) and validate_draw_format(s)).astype(bool)
        df = df[valid]
        logger.info(f"号码格式验证后剩余 {len(df)} 条记录 (删除 {before - len(df)} 条)")

        # 5. 未来的开奖时间
        before = len(df)
        df = df[df['date'] <= pd.Timestamp(self._now())]
        if len(df) < before:
            logger.warning(f"删除 {before - len(df)} 条开奖时间晚于当前时间的记录")

        # 6. 同一彩票类型同一开奖时间只保留第一条
        before = len(df)
        df = df.drop_duplicates(subset=['variant', 'date'], keep='first')
        if len(df) < before:
            logger.warning(f"删除 {before - len(df)} 条开奖时间重复的记录")

        # 7. 按日期排序
        df = df.sort_values(['variant', 'date']).reset_index(drop=True)

        self.cleaned_data = df
        logger.info(f"数据清洗完成，最终保留 {len(df)} 条记录")

        return self.cleaned_data

    @staticmethod
    def _optional(row, column: str) -> Optional[str]:
        value = row.get(column)
        if value is None or pd.isna(value):
            return None
        return str(value)

    def _to_draw(self, row) -> DrawResult:
        numbers, special = parse_numbers(row['numbers'])
        return DrawResult(
            draw_time=pd.Timestamp(row['date']).to_pydatetime(),
            variant=row['variant'],
            numbers=numbers,
            special_number=special,
            zodiac=self._optional(row, 'zodiac'),
            element=self._optional(row, 'element'),
        )

    def get_draws(self, variant) -> List[DrawResult]:
        if self.cleaned_data is None:
            raise ValueError("请先加载并清洗数据")
        variant = LotteryVariant.parse(variant)
        rows = self.cleaned_data[self.cleaned_data['variant'] == variant.value]
        return [self._to_draw(row) for _, row in rows.iterrows()]

    def get_dataset(self, variant) -> HistoricalDataset:
        """
        获取某个彩票类型的历史数据集

        Args:
            variant: 彩票类型

        Returns:
            按开奖时间升序排列的 HistoricalDataset
        """
        variant = LotteryVariant.parse(variant)
        dataset = HistoricalDataset.from_draws(variant, self.get_draws(variant), now=self._now())
        logger.debug(f"{variant.value} 历史数据 {len(dataset)} 期")
        return dataset

    def get_draw(self, variant, draw_time) -> Optional[DrawResult]:
        """按开奖时间查找一期开奖结果，找不到时返回 None"""
        return self.get_dataset(variant).find(pd.Timestamp(draw_time).to_pydatetime())

    def get_latest_records(self, n: int = 10, variant=None) -> pd.DataFrame:
        """
        获取最新的n条记录

        Args:
            n: 记录数量
            variant: 只取某个彩票类型，缺省为全部

        Returns:
            最新的记录
        """
        if self.cleaned_data is None:
            raise ValueError("请先加载并清洗数据")

        df = self.cleaned_data
        if variant is not None:
            df = df[df['variant'] == LotteryVariant.parse(variant).value]
        return df.sort_values('date').tail(n)

    def save_processed_data(self, filepath: Optional[str] = None):
        """
        保存处理后的数据

        Args:
            filepath: 保存路径，缺省为配置中的 data.processed
        """
        if self.cleaned_data is None:
            raise ValueError("没有可保存的数据")

        filepath = filepath or self.config.get('data', {}).get('processed', 'data/processed/marksix.csv')
        output_path = Path(filepath)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        df = self.cleaned_data.copy()
        df['date'] = df['date'].dt.strftime('%Y-%m-%d %H:%M:%S')
        df.to_csv(output_path, index=False, encoding='utf-8')
        logger.info(f"数据已保存至: {output_path}")
