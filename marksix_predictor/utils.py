# -*- coding: utf-8 -*-
"""
工具函数模块
提供配置加载、日志设置、号码解析等通用功能
"""

import yaml
import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, Any, Optional, Sequence, Tuple
import sys

import numpy as np
import pandas as pd

from .attributes import element_of, zodiac_of
from .models import LotteryVariant, N_ORDINARY
from .weights import WeightConfig


def load_config(config_path: str) -> Dict[str, Any]:
    """
    加载配置文件

    Args:
        config_path: 配置文件路径

    Returns:
        配置字典
    """
    config_file = Path(config_path)

    if not config_file.exists():
        # 如果配置文件不存在，创建默认配置
        default_config = create_default_config()
        save_config(default_config, config_path)
        logging.info(f"创建默认配置文件: {config_path}")
        return default_config

    if config_file.suffix in ['.yml', '.yaml']:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    elif config_file.suffix == '.json':
        with open(config_file, 'r', encoding='utf-8') as f:
            config = json.load(f)
    else:
        raise ValueError(f"不支持的配置文件格式: {config_file.suffix}")

    return config or {}


def save_config(config: Dict[str, Any], config_path: str):
    """
    保存配置文件

    Args:
        config: 配置字典
        config_path: 保存路径
    """
    config_file = Path(config_path)
    config_file.parent.mkdir(parents=True, exist_ok=True)

    if config_file.suffix in ['.yml', '.yaml']:
        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(config, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
    elif config_file.suffix == '.json':
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=2, ensure_ascii=False)
    else:
        raise ValueError(f"不支持的配置文件格式: {config_file.suffix}")


def create_default_config() -> Dict[str, Any]:
    """
    创建默认配置

    Returns:
        默认配置字典
    """
    return {
        'data': {
            'source': 'data/raw/marksix.csv',
            'processed': 'data/processed/marksix.csv',
        },
        'analysis': {
            'distance_radius': 3,
            'top_distances': 3,
        },
        'candidates': {
            'periodicity_max_std': 2.0,
            'zodiac_min_transitions': 5,
        },
        'prediction': {
            'alternatives': 6,
            'show_confidence': True,
            'show_alternatives': True,
            'output': 'reports/predictions.csv',
            'checkpoint': 'models/weights.pkl',
        },
        'weights': {
            'initial': WeightConfig.default().as_dict(),
            'strong_match_threshold': 4,
            'min_history': 10,
        },
        'confidence': {
            'replay_window': 20,
        },
        'evaluation': {
            'backtest_window': 30,
            'report': 'reports/backtest_report.md',
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        }
    }


def setup_logging(log_level: str = 'INFO'):
    """
    设置日志配置

    Args:
        log_level: 日志级别
    """
    log_dir = Path('logs')
    log_dir.mkdir(exist_ok=True)

    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(
                log_dir / f'marksix_predictor_{Path.cwd().name}.log',
                encoding='utf-8'
            )
        ]
    )

    # 设置第三方库的日志级别
    logging.getLogger('sklearn').setLevel(logging.WARNING)
    logging.getLogger('joblib').setLevel(logging.WARNING)


def create_project_structure():
    """
    创建项目目录结构
    """
    directories = [
        'data/raw',
        'data/processed',
        'models',
        'configs',
        'reports',
        'logs',
    ]

    for directory in directories:
        Path(directory).mkdir(parents=True, exist_ok=True)

    logging.info("项目目录结构创建完成")


def parse_numbers(numbers_str: str) -> Tuple[Tuple[int, ...], int]:
    """
    解析号码字符串

    Args:
        numbers_str: 形如 "01,02,03,04,05,06+07" 的字符串，+ 后为特码

    Returns:
        (6个普通号码, 特码)

    Raises:
        ValueError: 格式不正确
    """
    text = str(numbers_str).strip()
    if text.count('+') != 1:
        raise ValueError(f"号码格式错误，缺少特码: {numbers_str}")

    ordinary_part, special_part = text.split('+')
    numbers = tuple(int(x) for x in ordinary_part.split(','))
    special = int(special_part)
    if len(numbers) != N_ORDINARY:
        raise ValueError(f"普通号码必须是{N_ORDINARY}个: {numbers_str}")
    return numbers, special


def format_numbers(numbers: Sequence[int], special_number: int) -> str:
    """parse_numbers 的逆操作"""
    return ','.join(f"{n:02d}" for n in numbers) + f"+{special_number:02d}"


def validate_draw_format(numbers_str: str) -> bool:
    """
    验证开奖号码格式：6个普通号码加1个特码，均在1-49之间且互不重复

    Args:
        numbers_str: 号码字符串

    Returns:
        是否有效
    """
    try:
        numbers, special = parse_numbers(numbers_str)
    except ValueError:
        return False

    all_numbers = numbers + (special,)
    if not all(1 <= n <= 49 for n in all_numbers):
        return False
    if len(set(all_numbers)) != len(all_numbers):  # 有重复
        return False
    return True


def generate_sample_data(output_path: str = 'data/raw/marksix.csv', n_samples: int = 200,
                         seed: Optional[int] = None, end: Optional[datetime] = None) -> pd.DataFrame:
    """
    生成示例开奖数据（用于测试），澳门和香港各 n_samples 期

    Args:
        output_path: 输出路径
        n_samples: 每种彩票的期数
        seed: 随机种子
        end: 最后一期之后的时间，默认为当前时间

    Returns:
        生成的数据框
    """
    logging.info(f"生成 {n_samples} x {len(LotteryVariant)} 条示例数据...")

    rng = np.random.RandomState(seed)
    end = (end or datetime.now()).replace(hour=0, minute=0, second=0, microsecond=0)

    data = []
    for variant, step_days in ((LotteryVariant.MACAU, 1), (LotteryVariant.HONGKONG, 2)):
        start_date = end - timedelta(days=n_samples * step_days)
        for i in range(n_samples):
            date = start_date + timedelta(days=i * step_days, hours=21, minutes=30)

            drawn = [int(n) for n in rng.choice(np.arange(1, 50), 7, replace=False)]
            numbers = sorted(drawn[:N_ORDINARY])
            special = drawn[N_ORDINARY]

            data.append({
                'issue': f"{date.year}{i + 1:03d}",
                'variant': variant.value,
                'date': date.strftime('%Y-%m-%d %H:%M:%S'),
                'numbers': format_numbers(numbers, special),
                'zodiac': zodiac_of(special).value,
                'element': element_of(special).value,
            })

    df = pd.DataFrame(data)

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    df.to_csv(output_file, index=False, encoding='utf-8')
    logging.info(f"示例数据已保存至: {output_file}")
    return df
