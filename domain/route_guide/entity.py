"""
路线指南领域实体 - 坐标点、矩形、地物、路线留言与路线汇总

所有坐标均为 E7 定点表示（度数 × 10^7，四舍五入为整数）。
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """经纬度坐标点（E7），不可变值对象，可作为字典键"""

    latitude: int
    longitude: int


@dataclass(frozen=True)
class Rectangle:
    """由两个对角点 lo/hi 描述的经纬度矩形，不要求 lo <= hi"""

    lo: Point
    hi: Point


@dataclass(frozen=True)
class Feature:
    """某个坐标点上的命名地物；name 为空表示未命名（即该点没有已知地物）"""

    name: str
    location: Point

    @property
    def is_named(self) -> bool:
        return bool(self.name)

    @classmethod
    def unnamed(cls, location: Point) -> "Feature":
        return cls(name="", location=location)


@dataclass(frozen=True)
class RouteNote:
    """在某个坐标点发送的留言"""

    location: Point
    message: str


@dataclass(frozen=True)
class RouteSummary:
    """RecordRoute 调用结束时的汇总；distance 单位为米，elapsed_time 单位为秒"""

    point_count: int = 0
    feature_count: int = 0
    distance: int = 0
    elapsed_time: int = 0
