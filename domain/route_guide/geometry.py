"""
坐标几何 - 基于 E7 整数经纬度的纯函数（距离计算与范围校验）
"""
from __future__ import annotations

import math

from domain.common.exceptions import InvalidCoordinateException
from .entity import Point, Rectangle


COORD_FACTOR = 10_000_000
EARTH_RADIUS_M = 6_371_000

MAX_LATITUDE = 90 * COORD_FACTOR
MAX_LONGITUDE = 180 * COORD_FACTOR


def to_degrees(e7: int) -> float:
    return e7 / COORD_FACTOR


def from_degrees(degrees: float) -> int:
    return int(round(degrees * COORD_FACTOR))


def distance(a: Point, b: Point) -> float:
    """两点间的大圆距离（haversine，单位：米）

    返回浮点数，取整由调用方在汇总时完成。
    """
    lat1 = math.radians(to_degrees(a.latitude))
    lat2 = math.radians(to_degrees(b.latitude))
    delta_lat = lat2 - lat1
    delta_lon = math.radians(to_degrees(b.longitude) - to_degrees(a.longitude))

    h = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def contains(rect: Rectangle, p: Point) -> bool:
    """闭区间包含判断；lo/hi 可以是任意一对对角"""
    left = min(rect.lo.longitude, rect.hi.longitude)
    right = max(rect.lo.longitude, rect.hi.longitude)
    bottom = min(rect.lo.latitude, rect.hi.latitude)
    top = max(rect.lo.latitude, rect.hi.latitude)
    return left <= p.longitude <= right and bottom <= p.latitude <= top


def is_valid_point(p: Point) -> bool:
    return -MAX_LATITUDE <= p.latitude <= MAX_LATITUDE and -MAX_LONGITUDE <= p.longitude <= MAX_LONGITUDE


def validate_point(p: Point, field: str = "point") -> Point:
    """业务规则：纬度 ±90°、经度 ±180°（E7），越界抛出 InvalidCoordinateException"""
    if not is_valid_point(p):
        raise InvalidCoordinateException(
            f"{field} out of range: latitude must be within +/-{MAX_LATITUDE} "
            f"and longitude within +/-{MAX_LONGITUDE} (E7)",
            field=field,
            details={"latitude": p.latitude, "longitude": p.longitude},
        )
    return p


def validate_rectangle(rect: Rectangle, field: str = "rectangle") -> Rectangle:
    validate_point(rect.lo, field=f"{field}.lo")
    validate_point(rect.hi, field=f"{field}.hi")
    return rect
