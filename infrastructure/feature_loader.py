"""
地物数据加载器 - 从 JSON 文件读取初始地物列表

文件格式与 route_guide_db.json 一致::

    [{"location": {"latitude": 407838351, "longitude": -746143763}, "name": "..."}]
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from core.logging_config import get_logger
from domain.common.exceptions import FeatureDataException
from domain.route_guide import Feature, Point
from domain.route_guide.geometry import MAX_LATITUDE, MAX_LONGITUDE


logger = get_logger(__name__)


class LocationRecord(BaseModel):
    latitude: int = Field(..., ge=-MAX_LATITUDE, le=MAX_LATITUDE)
    longitude: int = Field(..., ge=-MAX_LONGITUDE, le=MAX_LONGITUDE)


class FeatureRecord(BaseModel):
    name: str = ""
    location: LocationRecord

    def to_entity(self) -> Feature:
        return Feature(
            name=self.name,
            location=Point(latitude=self.location.latitude, longitude=self.location.longitude),
        )


_records_adapter = TypeAdapter(List[FeatureRecord])


def parse_features(raw: Union[str, bytes], source: str = "<memory>") -> List[Feature]:
    try:
        records = _records_adapter.validate_json(raw)
    except ValidationError as exc:
        raise FeatureDataException(source, f"{exc.error_count()} validation error(s): {exc.errors()[0]['msg']}") from exc
    return [r.to_entity() for r in records]


def load_features(path: Union[str, Path]) -> List[Feature]:
    """读取并校验数据文件；任何问题都以 FeatureDataException 抛出（启动即失败）"""
    p = Path(path)
    try:
        raw = p.read_bytes()
    except OSError as exc:
        raise FeatureDataException(str(p), exc.strerror or str(exc)) from exc
    features = parse_features(raw, source=str(p))
    logger.info(
        "features_loaded",
        path=str(p),
        total=len(features),
        named=sum(1 for f in features if f.is_named),
    )
    return features
