from __future__ import annotations

from domain.common.exceptions import InvalidCoordinateException
from domain.route_guide import Feature, Point, Rectangle, RouteNote, RouteSummary
from grpc_app.generated import route_guide_pb2


def point_from_proto(msg: route_guide_pb2.Point) -> Point:
    return Point(latitude=int(msg.latitude), longitude=int(msg.longitude))


def point_to_proto(point: Point) -> route_guide_pb2.Point:
    return route_guide_pb2.Point(latitude=point.latitude, longitude=point.longitude)


def rectangle_from_proto(msg: route_guide_pb2.Rectangle) -> Rectangle:
    # Both corners are required; proto3 would otherwise default them to (0, 0)
    for corner in ("lo", "hi"):
        if not msg.HasField(corner):
            raise InvalidCoordinateException(f"rectangle.{corner} is required", field=f"rectangle.{corner}")
    return Rectangle(lo=point_from_proto(msg.lo), hi=point_from_proto(msg.hi))


def rectangle_to_proto(rect: Rectangle) -> route_guide_pb2.Rectangle:
    return route_guide_pb2.Rectangle(lo=point_to_proto(rect.lo), hi=point_to_proto(rect.hi))


def feature_to_proto(feature: Feature) -> route_guide_pb2.Feature:
    return route_guide_pb2.Feature(name=feature.name, location=point_to_proto(feature.location))


def feature_from_proto(msg: route_guide_pb2.Feature) -> Feature:
    return Feature(name=msg.name, location=point_from_proto(msg.location))


def route_note_from_proto(msg: route_guide_pb2.RouteNote) -> RouteNote:
    if not msg.HasField("location"):
        raise InvalidCoordinateException("note.location is required", field="note.location")
    return RouteNote(location=point_from_proto(msg.location), message=msg.message)


def route_note_to_proto(note: RouteNote) -> route_guide_pb2.RouteNote:
    return route_guide_pb2.RouteNote(location=point_to_proto(note.location), message=note.message)


def summary_to_proto(summary: RouteSummary) -> route_guide_pb2.RouteSummary:
    return route_guide_pb2.RouteSummary(
        point_count=summary.point_count,
        feature_count=summary.feature_count,
        distance=summary.distance,
        elapsed_time=summary.elapsed_time,
    )


def summary_from_proto(msg: route_guide_pb2.RouteSummary) -> RouteSummary:
    return RouteSummary(
        point_count=int(msg.point_count),
        feature_count=int(msg.feature_count),
        distance=int(msg.distance),
        elapsed_time=int(msg.elapsed_time),
    )
