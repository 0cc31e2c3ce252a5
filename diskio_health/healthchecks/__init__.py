"""Health checks — disk I/O, downstream HTTP, and the AND aggregator."""

from .aggregator import HealthAggregator
from .base import CheckState, HealthCheck, HealthCheckNotConfiguredError, TickResult
from .diskstats import DiskstatsHealthCheck
from .http import HTTPHealthCheck
