import asyncio
import signal

import structlog
from prometheus_client import CollectorRegistry

from ovh_exporter.cli import parse_args
from ovh_exporter.collector import Collector
from ovh_exporter.config import Config
from ovh_exporter.discovery import DiscoveryError, discover_projects
from ovh_exporter.logging import setup_logging
from ovh_exporter.metrics import StorageMetrics
from ovh_exporter.provider.ovh import OVHAPIClient
from ovh_exporter.web import make_app, start_server

logger = structlog.get_logger()


def _parse_listen_address(addr: "str") -> "tuple[str, int]":
    """
    parses listen address in format ':9162' or '0.0.0.0:9162'.
    """
    if addr.startswith(":"):
        return ("0.0.0.0", int(addr[1:]))

    host, port = addr.rsplit(":", 1)
    return (host, int(port))


async def _run(config: "Config") -> "None":
    try:
        host, port = _parse_listen_address(config.listen_address)
    except ValueError:
        raise SystemExit(
            f"invalid listen address {config.listen_address!r}"
        ) from None

    try:
        client = OVHAPIClient(
            endpoint=config.api_endpoint,
            application_key=config.api_app_key,
            application_secret=config.api_app_secret,
            consumer_key=config.api_consumer_key,
        )
    except ValueError as e:
        raise SystemExit(str(e)) from e

    # projects are discovered once, serving only starts with
    # the complete list
    try:
        projects = await discover_projects(client)
    except DiscoveryError:
        logger.exception("discovery_failed")
        await client.close()
        raise SystemExit(1) from None

    registry = CollectorRegistry()
    metrics = StorageMetrics(registry, namespace=config.metric_prefix)

    app = make_app(registry, config.telemetry_path, basic_auth=config.basic_auth)
    try:
        server, _ = start_server(
            app,
            host,
            port,
            certfile=config.tls_cert_file,
            keyfile=config.tls_key_file,
        )
    except OSError:
        logger.exception("metrics_server_failed", host=host, port=port)
        await client.close()
        raise SystemExit(1) from None

    logger.info(
        "metrics_server_started",
        host=host,
        port=port,
        path=config.telemetry_path,
        tls=bool(config.tls_cert_file),
    )

    collector = Collector(
        client,
        projects,
        metrics,
        interval_seconds=config.scrape_interval,
        keep_stale_series=config.keep_stale_series,
    )

    loop = asyncio.get_running_loop()
    # for SIGINT and SIGTERM, signal the collector
    # to stop gracefully
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, collector.stop)

    try:
        await collector.run()
    finally:
        logger.info("shutting_down")
        await collector.close()
        server.shutdown()
        logger.info("shutdown_complete")


def main() -> "None":
    config = parse_args()
    setup_logging(config.log_level, config.log_format)
    asyncio.run(_run(config))


if __name__ == "__main__":
    main()
