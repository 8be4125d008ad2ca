"""Hit counting per client and per page, blocking and blacklist notification."""

from __future__ import annotations

import logging
import os
import re
import subprocess
import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from .config import EvasiveConfig
from .ntt import NamedTimestampTree
from .whitelist import Whitelist

MAILER = "/bin/mail"
_KEY_LIMIT = 2047
_COMMAND_LIMIT = 1023
_PLACEHOLDER = re.compile(r"%(%|s)")

_log = logging.getLogger("dosevasive")


def _wall_clock() -> float:
    return int(time.time())


def _expand_command(template: str, ip: str) -> str:
    """Substitute the first ``%s`` with *ip* and ``%%`` with ``%``."""
    used = False

    def replace(match: re.Match[str]) -> str:
        nonlocal used
        if match.group(1) == "%":
            return "%"
        if used:
            return ""
        used = True
        return ip

    return _PLACEHOLDER.sub(replace, template)[:_COMMAND_LIMIT]


class _BlacklistHandler(Protocol):
    def blacklisted(self, ip: str, now: float) -> bool: ...


class Notifier:
    """Records a blacklisted address once and sends the configured alerts."""

    def __init__(
        self,
        config: EvasiveConfig,
        pid: int | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.pid = os.getpid() if pid is None else pid
        self.logger = logger if logger is not None else _log

    def log_path(self, ip: str, now: float) -> Path:
        """Return the record file for *ip*, stamped with local time *now*."""
        stamp = time.strftime("%Y%m%d%H%M%S", time.localtime(now))
        return Path(self.config.log_dir or "/tmp") / f"dos-{ip}-{stamp}"

    def blacklisted(self, ip: str, now: float) -> bool:
        """Write the record file and alert; return False if it existed or failed."""
        path = self.log_path(ip, now)
        if path.exists():
            return False
        try:
            with path.open("w") as record:
                record.write(f"{self.pid}\n")
        except OSError as exc:
            self.logger.critical("Couldn't open logfile %s: %s", path, exc.strerror)
            return False

        self.logger.critical("Blacklisting address %s: possible DoS attack.", ip)
        if self.config.email_notify:
            self._mail(ip)
        if self.config.system_command:
            subprocess.run(
                _expand_command(self.config.system_command, ip), shell=True, check=False
            )
        return True

    def _mail(self, ip: str) -> None:
        recipient = self.config.email_notify
        message = (
            f"To: {recipient}\n"
            f"Subject: HTTP BLACKLIST {ip}\n\n"
            f"mod_evasive HTTP Blacklisted {ip}\n"
        )
        try:
            subprocess.run([MAILER, recipient], input=message, text=True, check=False)
        except OSError:
            pass


class Evasive:
    """Decides per request whether a client is allowed or held in the forbidden state."""

    def __init__(
        self,
        config: EvasiveConfig | None = None,
        clock: Callable[[], float] | None = None,
        notifier: _BlacklistHandler | None = None,
    ) -> None:
        self.config = config if config is not None else EvasiveConfig()
        self._clock = clock if clock is not None else _wall_clock
        self.notifier = notifier if notifier is not None else Notifier(self.config)
        self.whitelist = Whitelist(self.config.whitelist)
        self.hits = NamedTimestampTree(self.config.hash_table_size)

    def check(self, ip: str, uri: str) -> bool:
        """Count a request from *ip* for *uri*; return True if it is allowed."""
        if ip in self.whitelist:
            return True
        config = self.config
        now = self._clock()
        hold = self.hits.find(ip)

        if hold is not None and now - hold.timestamp < config.blocking_period:
            hold.timestamp = self._clock()
            blocked = True
        else:
            if config.log_unblock and hold is not None:
                _log.info("Unblocking IP address %s: blocking period expired.", ip)
            page_blocked = self._count(
                f"{ip}_{uri}"[:_KEY_LIMIT], ip, now, config.page_interval, config.page_count
            )
            site_blocked = self._count(
                f"{ip}_SITE", ip, now, config.site_interval, config.site_count
            )
            blocked = page_blocked or site_blocked

        if blocked:
            self.notifier.blacklisted(ip, self._clock())
        return not blocked

    def _count(self, key: str, ip: str, now: float, interval: int, limit: int) -> bool:
        node = self.hits.find(key)
        if node is None:
            self.hits.insert(key, now)
            return False
        blocked = False
        if now - node.timestamp < interval and node.count >= limit:
            blocked = True
            self.hits.insert(ip, self._clock())
        elif now - node.timestamp >= interval:
            node.count = 0
        node.timestamp = now
        node.count += 1
        return blocked

    def is_blocked(self, ip: str) -> bool:
        """Return True if *ip* is currently held within its blocking period."""
        if ip in self.whitelist:
            return False
        hold = self.hits.find(ip)
        return hold is not None and self._clock() - hold.timestamp < self.config.blocking_period

    def close(self) -> None:
        """Forget every counter and hold."""
        self.hits.clear()

    def __enter__(self) -> Evasive:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()