"""
路线领域服务 - RecordRoute 的累积与汇总规则
"""
from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Optional

from .entity import Feature, Point, RouteSummary
from .geometry import distance


# RouteSummary 的字段在线上均为 int32
INT32_MAX = 2**31 - 1


def _clamp(value: int) -> int:
    return min(value, INT32_MAX)


class RecorderState(str, Enum):
    COLLECTING = "collecting"
    SUMMARIZING = "summarizing"
    DONE = "done"


class RouteRecorder:
    """累积一条路线上的点，并在输入流结束时生成 RouteSummary

    状态机：collecting -> summarizing -> done。汇总之后不再接受新的点。
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.state = RecorderState.COLLECTING
        self.point_count = 0
        self.feature_count = 0
        self._distance = 0.0
        self._previous: Optional[Point] = None
        self._started_at: Optional[float] = None

    def record(self, point: Point, feature: Feature) -> None:
        """业务规则：记录一个点；feature 为该点在特征库中的查询结果"""
        if self.state is not RecorderState.COLLECTING:
            raise ValueError(f"路线已汇总，无法继续记录 (state={self.state.value})")
        if self._started_at is None:
            self._started_at = self._clock()
        self.point_count += 1
        if feature.is_named:
            self.feature_count += 1
        if self._previous is not None:
            self._distance += distance(self._previous, point)
        self._previous = point

    @property
    def distance(self) -> float:
        return self._distance

    def summarize(self) -> RouteSummary:
        """业务规则：输入流结束，生成汇总

        少于两个点时耗时记为 0；各计数超过 int32 上限时取上限值。
        """
        if self.state is not RecorderState.COLLECTING:
            raise ValueError(f"路线已汇总 (state={self.state.value})")
        self.state = RecorderState.SUMMARIZING
        elapsed = 0
        if self.point_count > 1 and self._started_at is not None:
            elapsed = int(self._clock() - self._started_at)
        summary = RouteSummary(
            point_count=_clamp(self.point_count),
            feature_count=_clamp(self.feature_count),
            distance=_clamp(int(round(self._distance))),
            elapsed_time=_clamp(elapsed),
        )
        self.state = RecorderState.DONE
        return summary
