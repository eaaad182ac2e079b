# -*- coding: utf-8 -*-
"""
澳门/香港六合彩预测工具 - 核心模块包

该包包含以下核心模块：
- attributes: 号码属性（生肖、五行、波色、奇偶、大小）
- models: 开奖记录、预测结果等数据模型
- weights: 八维度权重配置
- analysis: 历史规律分析
- candidates: 候选号码生成
- scoring: 候选号码打分
- confidence: 置信度评估
- validator: 预测验证
- feedback: 反馈调权与权重优化
- engine: 预测引擎
- evaluator: 回测评估
- data_manager: 数据管理
- utils: 工具函数
"""

__version__ = '1.0.0'
__author__ = 'Mark Six Predictor Team'

# 导入主要类和函数，方便外部调用
from .analysis import AnalysisResults, PatternAnalyzer
from .attributes import attributes_of, color_of, element_of, zodiac_of
from .candidates import CandidateGenerator
from .confidence import ConfidenceEstimator
from .data_manager import DataManager
from .engine import PredictionEngine
from .evaluator import PredictionEvaluator
from .exceptions import (
    InsufficientCandidatesError,
    InvalidDrawError,
    InvalidWeightError,
    OutOfRangeError,
    PredictionError,
)
from .feedback import FeedbackLoop
from .models import (
    DrawResult,
    HistoricalDataset,
    LotteryVariant,
    PredictionResult,
    ValidationDetails,
    ValidationResult,
)
from .scoring import Scorer
from .validator import Validator
from .weights import WeightConfig
from .utils import (
    load_config,
    save_config,
    setup_logging,
    create_project_structure,
    generate_sample_data,
    parse_numbers,
    validate_draw_format,
)

__all__ = [
    'AnalysisResults',
    'PatternAnalyzer',
    'attributes_of',
    'color_of',
    'element_of',
    'zodiac_of',
    'CandidateGenerator',
    'ConfidenceEstimator',
    'DataManager',
    'PredictionEngine',
    'PredictionEvaluator',
    'InsufficientCandidatesError',
    'InvalidDrawError',
    'InvalidWeightError',
    'OutOfRangeError',
    'PredictionError',
    'FeedbackLoop',
    'DrawResult',
    'HistoricalDataset',
    'LotteryVariant',
    'PredictionResult',
    'ValidationDetails',
    'ValidationResult',
    'Scorer',
    'Validator',
    'WeightConfig',
    'load_config',
    'save_config',
    'setup_logging',
    'create_project_structure',
    'generate_sample_data',
    'parse_numbers',
    'validate_draw_format',
]

# 模块信息
MODULE_INFO = {
    'attributes': '号码属性模块 - 生肖、五行、波色等固定对照表',
    'analysis': '规律分析模块 - 周期、生肖转换、五行组合、和值、尾数、连号、间距',
    'candidates': '候选号码模块 - 八种规则生成候选号码',
    'scoring': '打分模块 - 按权重计算候选号码得分并选号',
    'confidence': '置信度模块 - 历史回放与分布合理性',
    'validator': '验证模块 - 对比预测与实际开奖',
    'feedback': '反馈模块 - 根据验证结果调整权重',
    'engine': '预测引擎 - 串联整个预测流程',
    'evaluator': '评估模块 - 滚动回测并生成报告',
    'data_manager': '数据管理模块 - 负责数据的加载和清洗',
    'utils': '工具函数模块 - 提供配置加载、日志等通用功能'
}

# 支持的彩票类型
SUPPORTED_VARIANTS = [variant.value for variant in LotteryVariant]

# 默认配置
DEFAULT_CONFIG = {
    'data': {
        'source': 'data/raw/marksix.csv'
    },
    'candidates': {
        'periodicity_max_std': 2.0,
        'zodiac_min_transitions': 5
    },
    'weights': {
        'strong_match_threshold': 4,
        'min_history': 10
    }
}
