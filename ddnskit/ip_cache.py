"""Cache of the last address seen, forcing a provider check every few rounds."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

__all__ = ["IP_CACHE_TIMES_ENV", "force_compare_global", "IpCache"]

IP_CACHE_TIMES_ENV = "DDNS_IP_CACHE_TIMES"
_DEFAULT_CACHE_TIMES = 5
_INTEGER = re.compile(r"[+-]?[0-9]+")

force_compare_global = True


def _cache_times() -> int:
    text = os.environ.get(IP_CACHE_TIMES_ENV, "")
    return int(text) if _INTEGER.fullmatch(text) else _DEFAULT_CACHE_TIMES


@dataclass
class IpCache:
    """The cached address, the rounds left before a forced check, and failures."""

    addr: str = ""
    times: int = 0
    times_failed_ip: int = 0

    def check(self, new_addr: str) -> bool:
        """Return True when an update is due: empty, changed, or cache exhausted."""
        if not new_addr:
            return True
        if self.addr != new_addr or self.times <= 1:
            self.addr = new_addr
            self.times = _cache_times() + 1
            return True
        self.addr = new_addr
        self.times -= 1
        return False