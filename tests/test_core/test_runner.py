"""Unit tests for findupdate.core.runner.

``check_update`` is patched out, so these tests cover scheduling, result
collection and post-processing only.
"""

from __future__ import annotations

import threading
from typing import List, Tuple
from unittest.mock import MagicMock, patch

import pytest

from findupdate.core.runner import CheckResult, PackageCheck, ProgressCounter, UpdateRunner
from findupdate.exceptions import EmptyResultError, HttpStatusError


def _fake_check(config, client) -> str:
    """Stand-in for check_update driven by the config itself."""
    if "error" in config:
        raise EmptyResultError(config["error"], backend=config["type"])
    if "crash" in config:
        raise RuntimeError(config["crash"])
    return config["answer"]


@pytest.fixture
def fake_check():
    with patch("findupdate.core.runner.check_update", side_effect=_fake_check) as mock:
        yield mock


@pytest.fixture
def client_factory() -> MagicMock:
    return MagicMock(side_effect=lambda: MagicMock(name="client"))


def _pkg(name: str, current=None, **config: str) -> PackageCheck:
    return PackageCheck(name=name, config={"type": "git", **config}, current=current)


@pytest.mark.unit
class TestProgressCounter:
    """Tests for the thread-safe counter."""

    def test_increment_returns_new_value(self) -> None:
        counter = ProgressCounter()

        assert counter.increment() == 1
        assert counter.increment() == 2
        assert counter.value == 2

    def test_concurrent_increments(self) -> None:
        counter = ProgressCounter()

        def bump() -> None:
            for _ in range(1000):
                counter.increment()

        threads = [threading.Thread(target=bump) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert counter.value == 8000


@pytest.mark.unit
class TestCheckResult:
    """Tests for CheckResult helpers."""

    def test_has_update(self) -> None:
        assert CheckResult("a", current="1.0", version="1.1").has_update
        assert not CheckResult("a", current="1.1", version="1.1").has_update
        assert CheckResult("a", version="1.1").has_update
        assert not CheckResult("a", current="1.0", error=ValueError()).has_update

    def test_describe_error(self) -> None:
        result = CheckResult("lmms", error=HttpStatusError("HTTP 500 error", status_code=500))

        assert result.describe_error() == "lmms: HTTP 500 error (status_code=500)"
        assert not result.ok


@pytest.mark.unit
class TestUpdateRunner:
    """Tests for parallel checking."""

    def test_results_keep_input_order(self, fake_check, client_factory) -> None:
        packages = [_pkg(f"pkg{i}", answer=f"{i}.0") for i in range(20)]

        results = UpdateRunner(jobs=4, client_factory=client_factory).run(packages)

        assert [r.name for r in results] == [p.name for p in packages]
        assert [r.version for r in results] == [f"{i}.0" for i in range(20)]

    def test_failure_is_isolated(self, fake_check, client_factory) -> None:
        packages = [
            _pkg("good", answer="1.0"),
            _pkg("empty", error="No tags found."),
            _pkg("boom", crash="unexpected"),
            _pkg("also-good", answer="2.0"),
        ]

        results = UpdateRunner(jobs=2, client_factory=client_factory).run(packages)

        assert [r.ok for r in results] == [True, False, False, True]
        assert isinstance(results[1].error, EmptyResultError)
        assert isinstance(results[2].error, RuntimeError)
        assert results[1].version is None
        assert results[3].version == "2.0"

    def test_leading_v_is_stripped(self, fake_check, client_factory) -> None:
        results = UpdateRunner(jobs=1, client_factory=client_factory).run(
            [_pkg("a", answer="v1.2.3")]
        )

        assert results[0].version == "1.2.3"

    def test_comply(self, fake_check, client_factory) -> None:
        results = UpdateRunner(jobs=1, client_factory=client_factory, comply=True).run(
            [_pkg("a", answer="v2.16-rc1")]
        )

        assert results[0].version == "2.16~rc1"

    def test_warnings_against_current(self, fake_check, client_factory) -> None:
        results = UpdateRunner(jobs=1, client_factory=client_factory).run(
            [
                _pkg("downgrade", current="2.0", answer="1.9"),
                _pkg("plain", current="1.0", answer="1.1"),
                _pkg("unknown", answer="1.1"),
            ]
        )

        assert any("downgrade" in w for w in results[0].warnings)
        assert results[1].warnings == []
        assert results[2].warnings == []

    def test_one_client_per_thread_and_all_closed(self, fake_check, client_factory) -> None:
        runner = UpdateRunner(jobs=1, client_factory=client_factory)

        runner.run([_pkg(f"p{i}", answer="1") for i in range(5)])

        assert client_factory.call_count == 1
        clients = {call.args[1] for call in fake_check.call_args_list}
        assert len(clients) == 1
        clients.pop().close.assert_called_once_with()

    def test_clients_closed_after_failures(self, fake_check, client_factory) -> None:
        created: List[MagicMock] = []

        def factory() -> MagicMock:
            created.append(MagicMock())
            return created[-1]

        UpdateRunner(jobs=3, client_factory=factory).run(
            [_pkg(f"p{i}", crash="x") for i in range(6)]
        )

        assert 1 <= len(created) <= 3
        for client in created:
            client.close.assert_called_once_with()

    def test_progress_callback(self, fake_check, client_factory) -> None:
        seen: List[Tuple[int, int]] = []
        lock = threading.Lock()

        def progress(done: int, total: int) -> None:
            with lock:
                seen.append((done, total))

        UpdateRunner(jobs=3, client_factory=client_factory, progress_callback=progress).run(
            [_pkg(f"p{i}", answer="1") for i in range(7)]
        )

        assert sorted(seen) == [(i, 7) for i in range(1, 8)]

    def test_empty_package_list(self, fake_check, client_factory) -> None:
        assert UpdateRunner(jobs=2, client_factory=client_factory).run([]) == []
        client_factory.assert_not_called()

    def test_default_jobs(self) -> None:
        assert UpdateRunner().jobs >= 1

    def test_runner_is_reusable(self, fake_check, client_factory) -> None:
        runner = UpdateRunner(jobs=1, client_factory=client_factory)

        runner.run([_pkg("a", answer="1")])
        runner.run([_pkg("b", answer="2")])

        assert client_factory.call_count == 2
