"""
地物仓储接口 - 定义特征库能做什么，不管数据放在哪里
"""
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Sequence

from .entity import Feature, Point, Rectangle
from .geometry import contains


class FeatureRepository(ABC):
    """地物仓储抽象接口

    加载一次后只读；并发读取无需加锁。
    """

    @abstractmethod
    def load(self, features: Sequence[Feature]) -> None:
        """一次性加载地物，保持原始顺序"""
        pass

    @abstractmethod
    def all(self) -> Sequence[Feature]:
        """按加载顺序返回全部地物"""
        pass

    @abstractmethod
    def find_by_location(self, point: Point) -> Optional[Feature]:
        """精确匹配坐标；多个地物重合时返回加载顺序中的第一个"""
        pass

    def count(self) -> int:
        return len(self.all())

    def get_feature(self, point: Point) -> Feature:
        """返回该坐标上的地物；没有时返回同坐标的未命名地物，而不是报错"""
        feature = self.find_by_location(point)
        if feature is None:
            return Feature.unnamed(point)
        return feature

    def list_features(self, rect: Rectangle) -> Iterator[Feature]:
        """惰性产出矩形内的已命名地物（按加载顺序）；每次调用都是一次新的查询"""
        for feature in self.all():
            if feature.is_named and contains(rect, feature.location):
                yield feature
