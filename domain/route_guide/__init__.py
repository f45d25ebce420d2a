"""Route guide domain exports."""
from .entity import Feature, Point, Rectangle, RouteNote, RouteSummary
from .repository import FeatureRepository
from .service import RouteRecorder

__all__ = [
    "Feature",
    "Point",
    "Rectangle",
    "RouteNote",
    "RouteSummary",
    "FeatureRepository",
    "RouteRecorder",
]
