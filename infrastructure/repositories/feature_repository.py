"""
内存特征库实现 - 只加载一次，之后只读
"""
from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from domain.route_guide import Feature, FeatureRepository, Point
from domain.common.exceptions import FeatureStoreStateException


class InMemoryFeatureRepository(FeatureRepository):
    """按加载顺序保存特征，并维护坐标索引用于精确查找"""

    def __init__(self, features: Optional[Sequence[Feature]] = None) -> None:
        self._features: Optional[Tuple[Feature, ...]] = None
        self._by_location: Dict[Point, Feature] = {}
        if features is not None:
            self.load(features)

    @property
    def loaded(self) -> bool:
        return self._features is not None

    def load(self, features: Sequence[Feature]) -> None:
        if self._features is not None:
            raise FeatureStoreStateException("Feature store is already loaded")
        self._features = tuple(features)
        for feature in self._features:
            # 坐标重复时以先加载的为准
            self._by_location.setdefault(feature.location, feature)

    def all(self) -> Sequence[Feature]:
        if self._features is None:
            raise FeatureStoreStateException("Feature store has not been loaded")
        return self._features

    def find_by_location(self, point: Point) -> Optional[Feature]:
        if self._features is None:
            raise FeatureStoreStateException("Feature store has not been loaded")
        return self._by_location.get(point)
