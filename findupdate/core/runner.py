"""Parallel update checks over a list of packages.

:class:`UpdateRunner` runs :func:`~findupdate.core.dispatcher.check_update`
once per package on a fixed-size thread pool. Every worker thread lazily
creates its own :class:`~findupdate.utils.http.HTTPClient`, so connection
pools are never shared between threads. A failure only affects its own
package: it is recorded on that package's :class:`CheckResult` and the
remaining packages keep going.

Typical usage::

    runner = UpdateRunner(jobs=8)
    results = runner.run([
        PackageCheck("lmms", {"type": "anitya", "id": "1832"}, current="1.2.2"),
    ])
    for result in results:
        print(result.name, result.version or result.error)
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from findupdate.core.checkers import Config
from findupdate.core.dispatcher import check_update
from findupdate.utils.http import HTTPClient
from findupdate.utils.logger import get_logger
from findupdate.utils.version_utils import comply_with_aosc, strip_v_prefix, update_warnings

logger = get_logger("runner")

__all__ = ["CheckResult", "PackageCheck", "ProgressCounter", "UpdateRunner"]


@dataclass(frozen=True)
class PackageCheck:
    """One package to check.

    Attributes:
        name: Package identity used in progress output and results.
        config: Checker configuration (must contain ``type``).
        current: Currently recorded version, if known.
    """

    name: str
    config: Config
    current: Optional[str] = None


@dataclass
class CheckResult:
    """Outcome of checking one package.

    Exactly one of :attr:`version` and :attr:`error` is set.
    """

    name: str
    current: Optional[str] = None
    version: Optional[str] = None
    error: Optional[Exception] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def has_update(self) -> bool:
        """True when a version was found and differs from :attr:`current`."""
        return self.version is not None and self.version != self.current

    def describe_error(self) -> str:
        """Return the error prefixed with the package name."""
        return f"{self.name}: {self.error}"


class ProgressCounter:
    """Thread-safe, monotonically increasing counter."""

    def __init__(self, start: int = 0) -> None:
        self._value = start
        self._lock = threading.Lock()

    def increment(self) -> int:
        """Increase the counter by one and return the new value."""
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        return self._value


class UpdateRunner:
    """Check many packages in parallel.

    Args:
        jobs: Number of worker threads; defaults to the CPU count.
        client_factory: Callable creating one HTTP client per worker thread.
        comply: Rewrite found versions in the AOSC versioning style.
        progress_callback: Optional callback invoked as ``(completed, total)``.
    """

    def __init__(
        self,
        *,
        jobs: Optional[int] = None,
        client_factory: Callable[[], HTTPClient] = HTTPClient,
        comply: bool = False,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> None:
        self.jobs = jobs or os.cpu_count() or 1
        self.client_factory = client_factory
        self.comply = comply
        self.progress_callback = progress_callback

        self._local = threading.local()
        self._clients: List[HTTPClient] = []
        self._clients_lock = threading.Lock()

    def run(self, packages: Sequence[PackageCheck]) -> List[CheckResult]:
        """Check every package and return results in input order."""
        total = len(packages)
        started = ProgressCounter()
        completed = ProgressCounter()
        logger.info("Checking updates for %d packages ...", total)

        def work(package: PackageCheck) -> CheckResult:
            logger.info("[%d/%d] Checking %s ...", started.increment(), total, package.name)
            result = self.check_one(package)
            done = completed.increment()
            if self.progress_callback:
                self.progress_callback(done, total)
            return result

        try:
            with ThreadPoolExecutor(max_workers=self.jobs) as executor:
                return list(executor.map(work, packages))
        finally:
            self._close_clients()

    def check_one(self, package: PackageCheck) -> CheckResult:
        """Check a single package on the calling thread."""
        result = CheckResult(name=package.name, current=package.current)

        try:
            version = strip_v_prefix(check_update(package.config, self._client()))
        except Exception as exc:
            logger.error("%s: %s", package.name, exc)
            result.error = exc
            return result

        if self.comply:
            version = comply_with_aosc(version)

        result.version = version
        if package.current is not None:
            result.warnings = update_warnings(package.current, version)
        return result

    def _client(self) -> HTTPClient:
        """Return the calling thread's HTTP client, creating it on first use."""
        client = getattr(self._local, "client", None)
        if client is None:
            client = self.client_factory()
            self._local.client = client
            with self._clients_lock:
                self._clients.append(client)
        return client

    def _close_clients(self) -> None:
        with self._clients_lock:
            clients, self._clients = self._clients, []
        for client in clients:
            client.close()
        self._local = threading.local()
