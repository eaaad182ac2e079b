#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
澳门/香港六合彩预测工具 - 命令行接口
"""

import argparse
import sys
import logging
from datetime import datetime
from pathlib import Path

import pandas as pd

from marksix_predictor.data_manager import DataManager
from marksix_predictor.engine import PredictionEngine
from marksix_predictor.evaluator import PredictionEvaluator
from marksix_predictor.models import DrawResult, HistoricalDataset, LotteryVariant
from marksix_predictor.utils import (
    format_numbers,
    generate_sample_data,
    load_config,
    parse_numbers,
    setup_logging,
)
from marksix_predictor.validator import Validator


def _load_data(config) -> DataManager:
    """加载并清洗数据，优先使用清洗后的文件"""
    data_manager = DataManager(config)
    data_path = Path(config.get('data', {}).get('processed', 'data/processed/marksix.csv'))
    if not data_path.exists():
        data_path = Path(config.get('data', {}).get('source', 'data/raw/marksix.csv'))
    data_manager.load_from_csv(str(data_path))
    data_manager.clean_data()
    return data_manager


def _checkpoint_path(config) -> Path:
    return Path(config.get('prediction', {}).get('checkpoint', 'models/weights.pkl'))


def _prediction_path(config) -> Path:
    return Path(config.get('prediction', {}).get('output', 'reports/predictions.csv'))


def _saved_prediction(config, variant: LotteryVariant):
    """读取该彩票类型最近一次保存的预测，没有记录时返回 None"""
    path = _prediction_path(config)
    if not path.with_suffix('.json').exists():
        return None
    saved = [p for p in PredictionEngine.load_predictions(str(path)) if p.variant is variant]
    return saved[-1] if saved else None


def _build_engine(config, data_manager: DataManager) -> PredictionEngine:
    engine = PredictionEngine(config, data_manager.get_dataset)
    checkpoint = _checkpoint_path(config)
    if checkpoint.exists():
        engine.load_checkpoint(str(checkpoint))
    return engine


def sample_data(args):
    """生成示例数据"""
    config = load_config(args.config)
    output_path = args.output or config.get('data', {}).get('source', 'data/raw/marksix.csv')
    generate_sample_data(output_path, n_samples=args.samples, seed=args.seed)
    print(f"示例数据已生成: {output_path}")


def data_clean(args):
    """执行数据清洗"""
    config = load_config(args.config)
    data_manager = DataManager(config)

    raw_data_path = Path(config.get('data', {}).get('source', 'data/raw/marksix.csv'))
    if not raw_data_path.exists():
        print(f"错误：找不到数据文件 {raw_data_path}")
        return

    data_manager.load_from_csv(str(raw_data_path))
    data_manager.clean_data()
    output_path = config.get('data', {}).get('processed', 'data/processed/marksix.csv')
    data_manager.save_processed_data(output_path)
    print(f"数据清洗完成！已保存至: {output_path}")


def predict(args):
    """预测下一期号码"""
    config = load_config(args.config)
    engine = _build_engine(config, _load_data(config))

    print("正在预测下一期号码...")
    prediction = engine.predict_next_draw(args.variant)
    engine.display_prediction(prediction)

    output_path = args.output or str(_prediction_path(config))
    engine.save_predictions(prediction, output_path)
    print(f"预测结果已保存至: {output_path}")


def validate(args):
    """用开奖结果验证预测并调整权重"""
    config = load_config(args.config)
    data_manager = _load_data(config)
    engine = _build_engine(config, data_manager)
    variant = LotteryVariant.parse(args.variant)

    draw_time = pd.Timestamp(args.date).to_pydatetime() if args.date else datetime.now()
    if args.numbers:
        numbers, special = parse_numbers(args.numbers)
        actual = DrawResult(draw_time=draw_time, variant=variant, numbers=numbers, special_number=special)
    else:
        actual = data_manager.get_draw(variant, draw_time)
        if actual is None:
            print(f"错误：找不到 {draw_time} 的开奖记录，请通过 --numbers 指定")
            return

    prediction = _saved_prediction(config, variant)
    if prediction is None:
        # 没有保存过预测时，用开奖前的历史重新生成一份
        print("未找到已保存的预测，使用开奖前的历史数据重新预测")
        dataset = data_manager.get_dataset(variant)
        history = HistoricalDataset(variant=variant,
                                    draws=[d for d in dataset if d.draw_time < actual.draw_time])
        prediction = engine.predict_from_dataset(history, engine.get_weights(variant))
    else:
        print(f"验证已保存的预测: {format_numbers(prediction.numbers, prediction.special_number)}")
    result = engine.validate_and_update_weights(prediction, actual)

    print(Validator.generate_report(result))
    print(f"\n调整后的权重: {engine.get_weights(variant).describe()}")
    engine.save_checkpoint(str(_checkpoint_path(config)))


def optimize(args):
    """基于历史数据优化权重"""
    config = load_config(args.config)
    engine = _build_engine(config, _load_data(config))

    before = engine.get_weights(args.variant)
    after = engine.optimize_weights(args.variant)
    print(f"优化后的权重: {after.describe(before)}")
    engine.save_checkpoint(str(_checkpoint_path(config)))


def backtest(args):
    """滚动回测并生成报告"""
    config = load_config(args.config)
    data_manager = _load_data(config)
    engine = _build_engine(config, data_manager)
    evaluator = PredictionEvaluator(config, engine)

    print("开始回测...")
    metrics = evaluator.backtest(data_manager.get_dataset(args.variant), args.window,
                                 engine.get_weights(args.variant))

    report_path = Path(config.get('evaluation', {}).get('report', 'reports/backtest_report.md'))
    report_path = report_path.with_name(f"{report_path.stem}_{LotteryVariant.parse(args.variant).value}{report_path.suffix}")
    evaluator.generate_report(metrics, str(report_path))
    print(f"回测完成！报告已保存至: {report_path}")


def weights(args):
    """显示当前权重"""
    config = load_config(args.config)
    engine = PredictionEngine(config)
    checkpoint = _checkpoint_path(config)
    if checkpoint.exists():
        engine.load_checkpoint(str(checkpoint))

    current = engine.get_weights(args.variant)
    print(f"{LotteryVariant.parse(args.variant).value} 当前权重:")
    for dimension, value in current.as_dict().items():
        print(f"  {dimension:<12} {value:.4f}")


def main(argv=None):
    """主函数"""
    parser = argparse.ArgumentParser(
        description='澳门/香港六合彩预测工具',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    # 全局参数
    parser.add_argument('--config', default='configs/config.yml',
                        help='配置文件路径 (默认: configs/config.yml)')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='日志级别 (默认: INFO)')

    # 子命令
    subparsers = parser.add_subparsers(dest='command', help='可用命令')
    variants = [v.value for v in LotteryVariant]

    # sample-data 命令
    parser_sample = subparsers.add_parser('sample-data', help='生成示例数据')
    parser_sample.add_argument('--output', help='输出文件路径（默认使用配置文件中的 data.source）')
    parser_sample.add_argument('--samples', type=int, default=200, help='每种彩票的期数 (默认: 200)')
    parser_sample.add_argument('--seed', type=int, help='随机种子')
    parser_sample.set_defaults(func=sample_data)

    # data-clean 命令
    parser_clean = subparsers.add_parser('data-clean', help='执行数据清洗')
    parser_clean.set_defaults(func=data_clean)

    # predict 命令
    parser_predict = subparsers.add_parser('predict', help='预测下一期号码')
    parser_predict.add_argument('--variant', required=True, choices=variants, help='彩票类型')
    parser_predict.add_argument('--output', help='输出文件路径（默认使用配置文件中的 prediction.output）')
    parser_predict.set_defaults(func=predict)

    # validate 命令
    parser_validate = subparsers.add_parser('validate', help='验证预测并调整权重')
    parser_validate.add_argument('--variant', required=True, choices=variants, help='彩票类型')
    parser_validate.add_argument('--numbers', help='实际开奖号码，如 "01,02,03,04,05,06+07"')
    parser_validate.add_argument('--date', help='开奖时间（默认当前时间）')
    parser_validate.set_defaults(func=validate)

    # optimize 命令
    parser_optimize = subparsers.add_parser('optimize', help='基于历史数据优化权重')
    parser_optimize.add_argument('--variant', required=True, choices=variants, help='彩票类型')
    parser_optimize.set_defaults(func=optimize)

    # backtest 命令
    parser_backtest = subparsers.add_parser('backtest', help='滚动回测并生成报告')
    parser_backtest.add_argument('--variant', required=True, choices=variants, help='彩票类型')
    parser_backtest.add_argument('--window', type=int, help='回测期数（默认使用配置文件中的设置）')
    parser_backtest.set_defaults(func=backtest)

    # weights 命令
    parser_weights = subparsers.add_parser('weights', help='显示当前权重')
    parser_weights.add_argument('--variant', required=True, choices=variants, help='彩票类型')
    parser_weights.set_defaults(func=weights)

    # 解析参数
    args = parser.parse_args(argv)

    # 设置日志
    setup_logging(args.log_level)

    # 执行命令
    if hasattr(args, 'func'):
        try:
            args.func(args)
        except Exception as e:
            logging.error(f"执行失败: {str(e)}")
            sys.exit(1)
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
