"""Configuration — process settings plus per-check config models.

``Settings`` is loaded from the environment / ``.env`` and overridden by CLI
flags in ``diskio_health.main``. Each health check receives its own validated
config model; nothing reads ``Settings`` after startup.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .diskstats.source import DEFAULT_PATH


class DiskCheckConfig(BaseModel):
    """Disk-I/O check configuration.

    Rates are computed from one diskstats delta, which spans ``poll_interval``
    seconds, so the KB/s divisor is always ``poll_interval``. ``eval_interval``
    only controls how often the check samples that delta.
    """

    device: str = "/dev/sda"
    diskstats_path: str = DEFAULT_PATH
    poll_interval: float = Field(default=1.0, gt=0)
    eval_interval: float = Field(default=1.0, gt=0)
    average_count: int = 5  # values <= 0 are clamped to 1 by MovingAverage

    # KB/s ceilings; 0 means unconstrained
    max_read_kbs: int = Field(default=0, ge=0)
    max_write_kbs: int = Field(default=0, ge=0)
    max_total_kbs: int = Field(default=0, ge=0)

    @property
    def rate_divisor(self) -> float:
        return self.poll_interval


class HTTPCheckConfig(BaseModel):
    """Downstream HTTP health check. An empty URL always passes."""

    url: str = ""
    interval: float = Field(default=1.0, gt=0)
    timeout: float = Field(default=5.0, gt=0)


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # HTTP listener
    listen_addr: str = "0.0.0.0"
    listen_port: int = 8010

    # Logging
    log_level: str = "INFO"

    # Disk-I/O check
    diskstats_path: str = DEFAULT_PATH
    disk_device: str = "/dev/sda"
    disk_interval: float = 1.0  # seconds between reading /proc/diskstats
    disk_eval_interval: float = 1.0  # seconds between health evaluations
    disk_average: int = 5  # number of datapoints to average out
    disk_read: int = 0  # max read KB/s to consider healthy
    disk_write: int = 0  # max write KB/s to consider healthy
    disk_total: int = 0  # max total KB/s to consider healthy

    # Downstream HTTP check
    next_url: str = ""
    next_interval: float = 1.0
    next_timeout: float = 5.0

    def disk_check_config(self) -> DiskCheckConfig:
        return DiskCheckConfig(
            device=self.disk_device,
            diskstats_path=self.diskstats_path,
            poll_interval=self.disk_interval,
            eval_interval=self.disk_eval_interval,
            average_count=self.disk_average,
            max_read_kbs=self.disk_read,
            max_write_kbs=self.disk_write,
            max_total_kbs=self.disk_total,
        )

    def http_check_config(self) -> HTTPCheckConfig:
        return HTTPCheckConfig(
            url=self.next_url,
            interval=self.next_interval,
            timeout=self.next_timeout,
        )
