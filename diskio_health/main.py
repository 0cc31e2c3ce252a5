"""Entry point — `diskio-health` console script."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

import uvicorn
from rich.console import Console
from rich.panel import Panel

from .api.server import create_app
from .config import Settings
from .diskstats import DiskstatsParseError
from .healthchecks import DiskstatsHealthCheck, HealthAggregator, HTTPHealthCheck

console = Console()
logger = logging.getLogger(__name__)

# CLI flag -> Settings field
FLAG_FIELDS = {
    "addr": "listen_addr",
    "port": "listen_port",
    "log_level": "log_level",
    "diskstats": "diskstats_path",
    "disk_device": "disk_device",
    "disk_interval": "disk_interval",
    "disk_eval_interval": "disk_eval_interval",
    "disk_average": "disk_average",
    "disk_read": "disk_read",
    "disk_write": "disk_write",
    "disk_total": "disk_total",
    "next_url": "next_url",
    "next_interval": "next_interval",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Disk I/O healthcheck server")
    parser.add_argument("--addr", help="Listen address")
    parser.add_argument("--port", type=int, help="Listen port")
    parser.add_argument("--log-level", dest="log_level", help="Log level (DEBUG, INFO, ...)")
    parser.add_argument("--diskstats", help="Path of the diskstats source")

    disk = parser.add_argument_group("disk")
    disk.add_argument("--disk.device", dest="disk_device", help="Path of device to watch")
    disk.add_argument("--disk.interval", dest="disk_interval", type=float,
                      help="Seconds between reading /proc/diskstats")
    disk.add_argument("--disk.eval-interval", dest="disk_eval_interval", type=float,
                      help="Seconds between health evaluations")
    disk.add_argument("--disk.average", dest="disk_average", type=int,
                      help="Number of datapoints to average out")
    disk.add_argument("--disk.read", dest="disk_read", type=int, help="Max read KB/s to consider healthy")
    disk.add_argument("--disk.write", dest="disk_write", type=int, help="Max write KB/s to consider healthy")
    disk.add_argument("--disk.total", dest="disk_total", type=int, help="Max total KB/s to consider healthy")

    nxt = parser.add_argument_group("next")
    nxt.add_argument("--next.url", dest="next_url", help="Proxy another http healthcheck")
    nxt.add_argument("--next.interval", dest="next_interval", type=float,
                     help="Seconds between checking other url")
    return parser


def load_settings(argv: Sequence[str] | None = None) -> Settings:
    """Environment / .env settings, overridden by any flags given."""
    args = build_parser().parse_args(argv)
    overrides = {
        field: getattr(args, flag)
        for flag, field in FLAG_FIELDS.items()
        if getattr(args, flag) is not None
    }
    return Settings(**overrides)


def build_checks(settings: Settings) -> tuple[HealthAggregator, DiskstatsHealthCheck]:
    """Disk check first, then the downstream HTTP check."""
    disk = DiskstatsHealthCheck(settings.disk_check_config())
    http = HTTPHealthCheck(settings.http_check_config())
    return HealthAggregator([disk, http]), disk


def main(argv: Sequence[str] | None = None) -> None:
    settings = load_settings(argv)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    console.print(
        Panel.fit(
            f"[bold]Disk I/O Healthcheck[/bold]\n"
            f"Bind:   {settings.listen_addr}:{settings.listen_port}\n"
            f"Device: {settings.disk_device} (every {settings.disk_interval}s, "
            f"avg of {settings.disk_average})\n"
            f"Limits: read={settings.disk_read} write={settings.disk_write} "
            f"total={settings.disk_total} KB/s\n"
            f"Next:   {settings.next_url or '-'}",
            title="diskio-health",
            border_style="green",
        )
    )

    try:
        aggregator, disk = build_checks(settings)
    except (OSError, DiskstatsParseError) as e:
        logger.error("Cannot read diskstats source %s: %s", settings.diskstats_path, e)
        sys.exit(1)

    for name, (reads, writes) in disk.source.summary().items():
        logger.info("%s %d %d", name, reads, writes)

    app = create_app(aggregator, disk_check=disk)
    uvicorn.run(
        app,
        host=settings.listen_addr,
        port=settings.listen_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
