"""System probes. Each probe is a blocking call returning a display string."""

from . import core, hardware, userspace

__all__ = ["core", "hardware", "userspace"]
