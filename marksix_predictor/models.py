# -*- coding: utf-8 -*-
"""
数据模型模块
开奖记录、预测结果、验证结果等不可变值对象
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from .attributes import check_number
from .exceptions import InvalidDrawError

N_ORDINARY = 6
N_TOTAL = 7


class LotteryVariant(Enum):
    """支持的两种彩票，历史数据互相独立"""

    MACAU = 'macau'
    HONGKONG = 'hongkong'

    @classmethod
    def parse(cls, value) -> 'LotteryVariant':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"不支持的彩票类型: {value}") from None


def _check_seven(numbers: Tuple[int, ...], special_number: int, what: str):
    if len(numbers) != N_ORDINARY:
        raise InvalidDrawError(f"{what}普通号码必须是{N_ORDINARY}个，实际 {len(numbers)} 个")
    if len(set(numbers)) != N_ORDINARY:
        raise InvalidDrawError(f"{what}普通号码有重复: {list(numbers)}")
    if special_number in numbers:
        raise InvalidDrawError(f"{what}特码 {special_number} 与普通号码重复")


@dataclass(frozen=True)
class DrawResult:
    """一期开奖结果，以开奖时间为唯一标识"""

    draw_time: datetime
    variant: LotteryVariant
    numbers: Tuple[int, ...]
    special_number: int
    zodiac: Optional[str] = None
    element: Optional[str] = None
    attributes: Tuple[str, ...] = ()

    def __post_init__(self):
        numbers = tuple(check_number(n) for n in self.numbers)
        special = check_number(self.special_number)
        _check_seven(numbers, special, '开奖')
        object.__setattr__(self, 'numbers', numbers)
        object.__setattr__(self, 'special_number', special)
        object.__setattr__(self, 'variant', LotteryVariant.parse(self.variant))
        object.__setattr__(self, 'attributes', tuple(self.attributes))

    @property
    def all_numbers(self) -> Tuple[int, ...]:
        """6个普通号码加特码"""
        return self.numbers + (self.special_number,)


@dataclass(frozen=True)
class PredictionResult:
    """一次预测的输出"""

    variant: LotteryVariant
    numbers: Tuple[int, ...]
    special_number: int
    confidence: float
    alternatives: Tuple[int, ...] = ()

    def __post_init__(self):
        numbers = tuple(check_number(n) for n in self.numbers)
        special = check_number(self.special_number)
        _check_seven(numbers, special, '预测')
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"置信度必须在 [0, 1] 之间，实际 {self.confidence}")
        object.__setattr__(self, 'numbers', numbers)
        object.__setattr__(self, 'special_number', special)
        object.__setattr__(self, 'variant', LotteryVariant.parse(self.variant))
        object.__setattr__(self, 'confidence', float(self.confidence))
        object.__setattr__(self, 'alternatives', tuple(int(n) for n in self.alternatives))

    @property
    def all_numbers(self) -> Tuple[int, ...]:
        return self.numbers + (self.special_number,)

    def to_dict(self) -> dict:
        return {
            'variant': self.variant.value,
            'numbers': list(self.numbers),
            'special_number': self.special_number,
            'confidence': self.confidence,
            'alternatives': list(self.alternatives),
        }


@dataclass(frozen=True)
class ValidationDetails:
    """预测与实际结果的逐维度对比"""

    zodiac_matches: int
    element_matches: int
    color_matches: int
    odd_even_matches: int
    big_small_matches: int
    sum_deviation: float
    tail_deviation: float
    consecutive_matches: int
    distance_matches: int


@dataclass(frozen=True)
class ValidationResult:
    """预测验证结果"""

    hit_count: int
    special_hit: bool
    accuracy: float
    hit_numbers: Tuple[int, ...]
    missed_numbers: Tuple[int, ...]
    attribute_match_rate: float
    details: ValidationDetails
    variant: Optional[LotteryVariant] = None
    draw_time: Optional[datetime] = None


@dataclass(frozen=True)
class HistoricalDataset:
    """
    单一彩票类型的历史开奖序列（按时间升序，只读）

    直接构造时要求记录已按时间严格升序且同属一个彩票类型；
    from_draws 会先过滤、排序，并检查开奖时间不晚于当前时间。
    """

    variant: LotteryVariant
    draws: Tuple[DrawResult, ...] = field(default_factory=tuple)

    def __post_init__(self):
        variant = LotteryVariant.parse(self.variant)
        draws = tuple(self.draws)
        for draw in draws:
            if draw.variant is not variant:
                raise InvalidDrawError(f"开奖记录类型 {draw.variant.value} 与数据集类型 {variant.value} 不一致")
        for previous, current in zip(draws, draws[1:]):
            if current.draw_time == previous.draw_time:
                raise InvalidDrawError(f"开奖时间重复: {current.draw_time}")
            if current.draw_time < previous.draw_time:
                raise InvalidDrawError(f"开奖记录未按时间排序: {previous.draw_time} 之后是 {current.draw_time}")
        object.__setattr__(self, 'variant', variant)
        object.__setattr__(self, 'draws', draws)

    @classmethod
    def from_draws(cls, variant, draws: Iterable[DrawResult],
                   now: Optional[datetime] = None) -> 'HistoricalDataset':
        """
        构造历史数据集

        Args:
            variant: 彩票类型
            draws: 开奖记录，其他类型的记录会被忽略
            now: 当前时间，默认取系统时间

        Returns:
            HistoricalDataset

        Raises:
            InvalidDrawError: 开奖时间重复或晚于当前时间
        """
        variant = LotteryVariant.parse(variant)
        selected = sorted((d for d in draws if d.variant is variant), key=lambda d: d.draw_time)
        now = now or datetime.now()
        if selected and selected[-1].draw_time > now:
            raise InvalidDrawError(f"开奖时间晚于当前时间: {selected[-1].draw_time}")
        return cls(variant=variant, draws=tuple(selected))

    def __len__(self) -> int:
        return len(self.draws)

    def __iter__(self) -> Iterator[DrawResult]:
        return iter(self.draws)

    def __getitem__(self, index):
        return self.draws[index]

    def head(self, n: int) -> 'HistoricalDataset':
        """前 n 期构成的快照（回测、回放用）"""
        return HistoricalDataset(variant=self.variant, draws=self.draws[:n])

    def latest(self) -> Optional[DrawResult]:
        return self.draws[-1] if self.draws else None

    def find(self, draw_time: datetime) -> Optional[DrawResult]:
        for draw in self.draws:
            if draw.draw_time == draw_time:
                return draw
        return None

    def number_rows(self) -> List[Tuple[int, ...]]:
        """每期的7个号码（普通号码在前，特码在后）"""
        return [d.all_numbers for d in self.draws]
