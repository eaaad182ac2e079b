# -*- coding: utf-8 -*-
"""数据管理测试"""

from datetime import datetime

import pandas as pd
import pytest

from marksix_predictor.data_manager import DataManager
from marksix_predictor.models import LotteryVariant

NOW = datetime(2024, 6, 30)

ROWS = [
    {'issue': '2024001', 'variant': 'macau', 'date': '2024-06-01 21:30:00', 'numbers': '01,02,03,04,05,06+07'},
    {'issue': '2024001', 'variant': 'macau', 'date': '2024-06-01 21:30:00', 'numbers': '01,02,03,04,05,06+07'},
    {'issue': '2024002', 'variant': 'MACAU', 'date': '2024-06-03 21:30:00', 'numbers': '10,11,12,13,14,15+16'},
    {'issue': '2024003', 'variant': 'macau', 'date': '2024-06-02 21:30:00', 'numbers': '20,21,22,23,24,25+26'},
    {'issue': '2024004', 'variant': 'macau', 'date': '2024-06-04 21:30:00', 'numbers': '01,02,03,04,05,50+07'},
    {'issue': '2024005', 'variant': 'macau', 'date': '2024-06-05 21:30:00', 'numbers': '01,01,03,04,05,06+07'},
    {'issue': '2024006', 'variant': 'macau', 'date': '2024-06-06 21:30:00', 'numbers': '01,02,03,04,05,06'},
    {'issue': '2024007', 'variant': 'macau', 'date': None, 'numbers': '01,02,03,04,05,06+07'},
    {'issue': '2024008', 'variant': 'macau', 'date': '2024-07-30 21:30:00', 'numbers': '01,02,03,04,05,06+07'},
    {'issue': '2024009', 'variant': 'lotto', 'date': '2024-06-07 21:30:00', 'numbers': '01,02,03,04,05,06+07'},
    {'issue': '2024010', 'variant': 'hongkong', 'date': '2024-06-02 21:30:00', 'numbers': '30,31,32,33,34,35+36'},
    {'issue': '2024011', 'variant': 'macau', 'date': '2024-06-03 21:30:00', 'numbers': '40,41,42,43,44,45+46'},
]


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / 'raw.csv'
    pd.DataFrame(ROWS).to_csv(path, index=False, encoding='utf-8')
    return path


@pytest.fixture
def manager(config, csv_path):
    manager = DataManager(config, now=NOW)
    manager.load_from_csv(str(csv_path))
    manager.clean_data()
    return manager


def test_load_missing_columns(config, tmp_path):
    path = tmp_path / 'bad.csv'
    pd.DataFrame([{'issue': '1', 'numbers': '01,02,03,04,05,06+07'}]).to_csv(path, index=False)
    with pytest.raises(ValueError):
        DataManager(config).load_from_csv(str(path))


def test_clean_requires_load(config):
    with pytest.raises(ValueError):
        DataManager(config).clean_data()


def test_clean_drops_invalid_rows(manager):
    df = manager.cleaned_data
    # 3 条澳门有效记录（同一时间重复的只保留第一条）+ 1 条香港
    assert len(df) == 4
    assert set(df['variant']) == {'macau', 'hongkong'}


def test_dataset_sorted(manager):
    dataset = manager.get_dataset(LotteryVariant.MACAU)
    assert [d.special_number for d in dataset] == [7, 26, 16]
    assert len(manager.get_dataset('hongkong')) == 1


def test_get_draw(manager):
    draw = manager.get_draw('macau', '2024-06-02 21:30:00')
    assert draw.numbers == (20, 21, 22, 23, 24, 25)
    assert manager.get_draw('macau', '2024-06-20') is None


def test_latest_records(manager):
    latest = manager.get_latest_records(2, variant='macau')
    assert list(latest['issue']) == ['2024003', '2024002']


def test_save_processed_data(manager, config, tmp_path):
    output = tmp_path / 'processed' / 'clean.csv'
    manager.save_processed_data(str(output))

    reloaded = DataManager(config, now=NOW)
    reloaded.load_from_csv(str(output))
    reloaded.clean_data()
    assert len(reloaded.cleaned_data) == 4
