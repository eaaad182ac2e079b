# -*- coding: utf-8 -*-
"""
异常定义模块
预测核心只抛出这里定义的异常，由调用方决定如何处理
"""


class PredictionError(ValueError):
    """预测核心异常基类"""


class OutOfRangeError(PredictionError):
    """号码不在 1-49 范围内"""

    def __init__(self, number, low: int = 1, high: int = 49):
        self.number = number
        super().__init__(f"号码超出范围 [{low}, {high}]: {number}")


class InvalidWeightError(PredictionError):
    """权重向量不合法（存在负值或总和不为1）"""


class InsufficientCandidatesError(PredictionError):
    """候选号码不足7个，本期无法给出预测"""

    def __init__(self, available: int, required: int = 7):
        self.available = available
        self.required = required
        super().__init__(f"候选号码不足: 需要 {required} 个，实际 {available} 个")


class InvalidDrawError(PredictionError):
    """开奖记录结构不合法（数量、重复、时间等）"""
