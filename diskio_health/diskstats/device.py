"""Device name resolution — user paths to /proc/diskstats names."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

DEV_PREFIX = "/dev/"


def resolve_device_name(name: str) -> str:
    """Translate ``/dev/disk/by-label/storage`` style paths to ``sdc``.

    /proc/diskstats names are bare (``sdc``, ``nvme0n1p5``). The symlink chain
    is resolved when possible; otherwise the input is used as-is.
    """
    try:
        resolved = os.path.realpath(name, strict=True)
    except (OSError, ValueError):
        logger.debug("Could not resolve %r, using it unchanged", name)
    else:
        # relative input stays relative unless the chain lands in /dev
        if os.path.isabs(name) or resolved.startswith(DEV_PREFIX):
            name = resolved
        else:
            name = os.path.relpath(resolved)
    if name.startswith(DEV_PREFIX):
        name = name[len(DEV_PREFIX):]
    return name
