"""
RouteGuide 演示客户端：依次演示四种调用形态

    python grpc_client.py            # 连接 settings.client.target
    CLIENT__TARGET=host:50051 python grpc_client.py
"""
import asyncio
import random

from core.config import settings
from core.logging_config import get_logger
from domain.route_guide import Point, Rectangle, RouteNote
from domain.route_guide.geometry import COORD_FACTOR, to_degrees
from grpc_app.client import RouteGuideClient


logger = get_logger(__name__)


def random_point(rng: random.Random) -> Point:
    latitude = (rng.randrange(0, 180) - 90) * COORD_FACTOR
    longitude = (rng.randrange(0, 360) - 180) * COORD_FACTOR
    return Point(latitude=latitude, longitude=longitude)


async def print_feature(client: RouteGuideClient) -> None:
    point = Point(latitude=409_146_138, longitude=-746_188_906)
    feature = await client.get_feature(point)
    if feature.is_named:
        logger.info("feature_found", name=feature.name,
                    lat=to_degrees(point.latitude), lon=to_degrees(point.longitude))
    else:
        logger.info("feature_not_found", lat=to_degrees(point.latitude), lon=to_degrees(point.longitude))


async def print_features(client: RouteGuideClient) -> None:
    rect = Rectangle(
        lo=Point(latitude=400_000_000, longitude=-750_000_000),
        hi=Point(latitude=420_000_000, longitude=-730_000_000),
    )
    count = 0
    async for feature in client.list_features(rect):
        count += 1
        logger.info("feature", name=feature.name,
                    lat=to_degrees(feature.location.latitude), lon=to_degrees(feature.location.longitude))
    logger.info("features_listed", total=count)


async def run_record_route(client: RouteGuideClient, rng: random.Random) -> None:
    points = [random_point(rng) for _ in range(rng.randint(2, 100))]
    logger.info("route_traversing", points=len(points))
    summary = await client.record_route(points)
    logger.info(
        "route_summary",
        point_count=summary.point_count,
        feature_count=summary.feature_count,
        distance=summary.distance,
        elapsed_time=summary.elapsed_time,
    )


async def run_route_chat(client: RouteGuideClient) -> None:
    interval = settings.client.chat_interval
    total = settings.client.chat_messages
    loop = asyncio.get_running_loop()
    start = loop.time()

    async def outbound():
        for i in range(total):
            elapsed = loop.time() - start
            yield RouteNote(
                location=Point(latitude=409_146_138 + (i % 3), longitude=-746_188_906),
                message=f"at {elapsed:.1f}s",
            )
            await asyncio.sleep(interval)

    async for note in client.route_chat(outbound(), timeout=interval * total + settings.client.timeout):
        logger.info("route_note", message=note.message,
                    lat=note.location.latitude, lon=note.location.longitude)


async def main() -> None:
    rng = random.Random()
    async with RouteGuideClient() as client:
        logger.info("demo_section", section="SIMPLE RPC")
        await print_feature(client)

        logger.info("demo_section", section="SERVER STREAMING")
        await print_features(client)

        logger.info("demo_section", section="CLIENT STREAMING")
        await run_record_route(client, rng)

        logger.info("demo_section", section="BIDIRECTIONAL STREAMING")
        await run_route_chat(client)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
