import asyncio

from core.config import settings
from core.logging_config import get_logger
from grpc_app.server import build_application_service, create_server


logger = get_logger(__name__)


async def main() -> None:
    if not settings.grpc.enabled:
        logger.warning("grpc_disabled", message="gRPC disabled by config (GRPC__ENABLED=false)")
        return

    svc = build_application_service()
    server, port = await create_server(svc)
    address = f"{settings.grpc.host}:{port}"
    logger.info("grpc_starting", address=address, tls=settings.grpc.tls.enabled)
    await server.start()
    logger.info("grpc_started", address=address)
    try:
        await server.wait_for_termination()
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("grpc_stopping", grace=settings.grpc.grace_period)
        await server.stop(grace=settings.grpc.grace_period)
    finally:
        await svc.aclose()


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
