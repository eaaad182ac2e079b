# -*- coding: utf-8 -*-
"""
号码属性模块
号码 1-49 与生肖、五行、波色的固定对照表，以及奇偶、大小的计算

对照表是领域常量而不是配置项：每个号码恰好属于一个生肖、一个五行、一个波色。
"""

from dataclasses import dataclass
from enum import Enum
from numbers import Integral
from typing import Dict, List, Tuple

from .exceptions import OutOfRangeError

MIN_NUMBER = 1
MAX_NUMBER = 49
ALL_NUMBERS = tuple(range(MIN_NUMBER, MAX_NUMBER + 1))

# 小号 1-24，大号 25-49
BIG_THRESHOLD = 24


class Zodiac(Enum):
    RAT = '鼠'
    OX = '牛'
    TIGER = '虎'
    RABBIT = '兔'
    DRAGON = '龙'
    SNAKE = '蛇'
    HORSE = '马'
    GOAT = '羊'
    MONKEY = '猴'
    ROOSTER = '鸡'
    DOG = '狗'
    PIG = '猪'


class CelestialType(Enum):
    SKY = '天肖'
    EARTH = '地肖'


class YinYang(Enum):
    YIN = '阴'
    YANG = '阳'


class Season(Enum):
    SPRING = '春'
    SUMMER = '夏'
    AUTUMN = '秋'
    WINTER = '冬'


class Direction(Enum):
    EAST = '东'
    SOUTH = '南'
    WEST = '西'
    NORTH = '北'


class Gender(Enum):
    MALE = '男'
    FEMALE = '女'


class Luck(Enum):
    GOOD = '吉'
    BAD = '凶'


class Element(Enum):
    GOLD = '金'
    WOOD = '木'
    WATER = '水'
    FIRE = '火'
    EARTH = '土'


class Color(Enum):
    RED = '红波'
    BLUE = '蓝波'
    GREEN = '绿波'


@dataclass(frozen=True)
class ZodiacProfile:
    """生肖的静态属性记录"""

    zodiac: Zodiac
    numbers: Tuple[int, ...]
    celestial_type: CelestialType
    yin_yang: YinYang
    season: Season
    direction: Direction
    gender: Gender
    luck: Luck


@dataclass(frozen=True)
class AttributeSet:
    """单个号码的派生属性"""

    number: int
    zodiac: Zodiac
    element: Element
    color: Color
    is_odd: bool
    is_big: bool


_S, _E = CelestialType.SKY, CelestialType.EARTH
_YIN, _YANG = YinYang.YIN, YinYang.YANG

ZODIAC_TABLE: Tuple[ZodiacProfile, ...] = (
    ZodiacProfile(Zodiac.RAT, (6, 18, 30, 42), _E, _YIN, Season.WINTER, Direction.NORTH, Gender.MALE, Luck.BAD),
    ZodiacProfile(Zodiac.OX, (5, 17, 29, 41), _E, _YANG, Season.WINTER, Direction.NORTH, Gender.MALE, Luck.BAD),
    ZodiacProfile(Zodiac.TIGER, (4, 16, 28, 40), _E, _YANG, Season.SPRING, Direction.EAST, Gender.MALE, Luck.BAD),
    ZodiacProfile(Zodiac.RABBIT, (3, 15, 27, 39), _S, _YANG, Season.SPRING, Direction.EAST, Gender.FEMALE, Luck.GOOD),
    ZodiacProfile(Zodiac.DRAGON, (2, 14, 26, 38), _S, _YIN, Season.SPRING, Direction.EAST, Gender.MALE, Luck.GOOD),
    ZodiacProfile(Zodiac.SNAKE, (1, 13, 25, 37, 49), _E, _YIN, Season.SUMMER, Direction.SOUTH, Gender.FEMALE, Luck.GOOD),
    ZodiacProfile(Zodiac.HORSE, (12, 24, 36, 48), _S, _YIN, Season.SUMMER, Direction.SOUTH, Gender.MALE, Luck.GOOD),
    ZodiacProfile(Zodiac.GOAT, (11, 23, 35, 47), _E, _YANG, Season.SUMMER, Direction.SOUTH, Gender.FEMALE, Luck.GOOD),
    ZodiacProfile(Zodiac.MONKEY, (10, 22, 34, 46), _S, _YANG, Season.AUTUMN, Direction.WEST, Gender.MALE, Luck.BAD),
    ZodiacProfile(Zodiac.ROOSTER, (9, 21, 33, 45), _E, _YANG, Season.AUTUMN, Direction.WEST, Gender.FEMALE, Luck.GOOD),
    ZodiacProfile(Zodiac.DOG, (8, 20, 32, 44), _E, _YIN, Season.AUTUMN, Direction.WEST, Gender.MALE, Luck.BAD),
    ZodiacProfile(Zodiac.PIG, (7, 19, 31, 43), _S, _YIN, Season.WINTER, Direction.NORTH, Gender.FEMALE, Luck.BAD),
)

ELEMENT_TABLE: Dict[Element, Tuple[int, ...]] = {
    Element.GOLD: (3, 4, 11, 12, 25, 26, 33, 34, 41, 42),
    Element.WOOD: (7, 8, 15, 16, 23, 24, 37, 38, 45, 46),
    Element.WATER: (13, 14, 21, 22, 29, 30, 43, 44),
    Element.FIRE: (1, 2, 9, 10, 17, 18, 31, 32, 39, 40, 47, 48),
    Element.EARTH: (5, 6, 19, 20, 27, 28, 35, 36, 49),
}

COLOR_TABLE: Dict[Color, Tuple[int, ...]] = {
    Color.RED: (1, 2, 7, 8, 12, 13, 18, 19, 23, 24, 29, 30, 34, 35, 40, 45, 46),
    Color.BLUE: (3, 4, 9, 10, 14, 15, 20, 25, 26, 31, 36, 37, 41, 42, 47, 48),
    Color.GREEN: (5, 6, 11, 16, 17, 21, 22, 27, 28, 32, 33, 38, 39, 43, 44, 49),
}


def _invert(table) -> Dict[int, object]:
    lookup = {}
    for key, numbers in table:
        for number in numbers:
            if number in lookup:
                raise RuntimeError(f"号码 {number} 在对照表中重复出现")
            lookup[number] = key
    missing = set(ALL_NUMBERS) - set(lookup)
    if missing:
        raise RuntimeError(f"对照表缺少号码: {sorted(missing)}")
    return lookup


_ZODIAC_BY_NUMBER = _invert((p.zodiac, p.numbers) for p in ZODIAC_TABLE)
_ELEMENT_BY_NUMBER = _invert(ELEMENT_TABLE.items())
_COLOR_BY_NUMBER = _invert(COLOR_TABLE.items())
_PROFILE_BY_ZODIAC = {p.zodiac: p for p in ZODIAC_TABLE}


def check_number(number: int) -> int:
    """
    校验号码范围

    Raises:
        OutOfRangeError: 号码不是 1-49 之间的整数
    """
    if isinstance(number, bool) or not isinstance(number, Integral) or not MIN_NUMBER <= number <= MAX_NUMBER:
        raise OutOfRangeError(number, MIN_NUMBER, MAX_NUMBER)
    return int(number)


def zodiac_of(number: int) -> Zodiac:
    return _ZODIAC_BY_NUMBER[check_number(number)]


def element_of(number: int) -> Element:
    return _ELEMENT_BY_NUMBER[check_number(number)]


def color_of(number: int) -> Color:
    return _COLOR_BY_NUMBER[check_number(number)]


def is_odd(number: int) -> bool:
    return check_number(number) % 2 == 1


def is_big(number: int) -> bool:
    return check_number(number) > BIG_THRESHOLD


def zodiac_profile(zodiac: Zodiac) -> ZodiacProfile:
    return _PROFILE_BY_ZODIAC[zodiac]


def attributes_of(number: int) -> AttributeSet:
    """
    查询号码的全部派生属性

    Args:
        number: 号码 (1-49)

    Returns:
        AttributeSet

    Raises:
        OutOfRangeError: 号码超出范围
    """
    number = check_number(number)
    return AttributeSet(
        number=number,
        zodiac=_ZODIAC_BY_NUMBER[number],
        element=_ELEMENT_BY_NUMBER[number],
        color=_COLOR_BY_NUMBER[number],
        is_odd=number % 2 == 1,
        is_big=number > BIG_THRESHOLD,
    )


def numbers_of_zodiac(zodiac: Zodiac) -> List[int]:
    return list(_PROFILE_BY_ZODIAC[zodiac].numbers)


def numbers_of_element(element: Element) -> List[int]:
    return list(ELEMENT_TABLE[element])


def numbers_of_color(color: Color) -> List[int]:
    return list(COLOR_TABLE[color])


def tail_of(number: int) -> int:
    """尾数（个位数字）"""
    return number % 10
