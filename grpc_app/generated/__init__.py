"""Python message and service modules for `grpc_app/protos/route_guide.proto`.

Modules are compiled from the .proto at import time by grpcio-tools, so the
repository carries no checked-in *_pb2 files. The project root must be on
sys.path (it is for `python grpc_main.py` and for pytest, see pyproject.toml).
"""
from __future__ import annotations

import grpc


PROTO_PATH = "grpc_app/protos/route_guide.proto"

route_guide_pb2, route_guide_pb2_grpc = grpc.protos_and_services(PROTO_PATH)

SERVICE_NAME = "route_guide.RouteGuide"

__all__ = ["route_guide_pb2", "route_guide_pb2_grpc", "SERVICE_NAME", "PROTO_PATH"]
