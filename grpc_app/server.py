from __future__ import annotations

from typing import Optional, Sequence
import grpc
from grpc_health.v1 import health, health_pb2_grpc, health_pb2

from application.services.route_guide_service import RouteGuideApplicationService
from core.config import settings
from core.logging_config import get_logger
from domain.route_guide import FeatureRepository
from grpc_app.interceptors.request_id import RequestIdInterceptor
from grpc_app.interceptors.logging import LoggingInterceptor
from grpc_app.interceptors.exceptions import ExceptionMappingInterceptor
from grpc_app.generated import route_guide_pb2_grpc, SERVICE_NAME
from grpc_app.services.route_guide_service import RouteGuideService
from infrastructure.feature_loader import load_features
from infrastructure.realtime.route_chat_relay import InMemoryRouteChatRelay
from infrastructure.repositories.feature_repository import InMemoryFeatureRepository


logger = get_logger(__name__)


def build_application_service(repository: Optional[FeatureRepository] = None) -> RouteGuideApplicationService:
    """Wire the feature store and relay; loads `settings.route_guide.db_path` unless a store is given."""
    if repository is None:
        repository = InMemoryFeatureRepository(load_features(settings.route_guide.db_path))
    return RouteGuideApplicationService(repository=repository, relay=InMemoryRouteChatRelay())


def _server_credentials() -> grpc.ServerCredentials:
    if not (settings.grpc.tls.cert and settings.grpc.tls.key):
        raise RuntimeError("GRPC TLS enabled but cert/key not provided")
    with open(settings.grpc.tls.cert, "rb") as f:
        cert_chain = f.read()
    with open(settings.grpc.tls.key, "rb") as f:
        private_key = f.read()
    root_certificates = None
    if settings.grpc.tls.ca:
        with open(settings.grpc.tls.ca, "rb") as f:
            root_certificates = f.read()
    return grpc.ssl_server_credentials(
        [(private_key, cert_chain)],
        root_certificates=root_certificates,
        require_client_auth=bool(root_certificates),
    )


async def create_server(
    svc: Optional[RouteGuideApplicationService] = None,
    address: Optional[str] = None,
) -> tuple[grpc.aio.Server, int]:
    """Build the server and bind its port; returns (server, bound_port).

    Pass `address="127.0.0.1:0"` to bind an ephemeral port (tests).
    """
    interceptors: Sequence[grpc.aio.ServerInterceptor] = (
        RequestIdInterceptor(),
        LoggingInterceptor(),
        ExceptionMappingInterceptor(),  # maps business exceptions
    )

    options = [
        ("grpc.max_concurrent_streams", max(1, settings.grpc.max_concurrent_streams)),
    ]
    server = grpc.aio.server(interceptors=interceptors, options=options)

    # Register services
    if svc is None:
        svc = build_application_service()
    route_guide_pb2_grpc.add_RouteGuideServicer_to_server(RouteGuideService(svc), server)

    # Health service
    health_svc = health.aio.HealthServicer()
    health_pb2_grpc.add_HealthServicer_to_server(health_svc, server)
    await health_svc.set("", health_pb2.HealthCheckResponse.SERVING)
    await health_svc.set(SERVICE_NAME, health_pb2.HealthCheckResponse.SERVING)

    # Bind address
    if address is None:
        address = f"{settings.grpc.host}:{settings.grpc.port}"

    if settings.grpc.tls.enabled:
        port = server.add_secure_port(address, _server_credentials())
    else:
        port = server.add_insecure_port(address)

    return server, port
