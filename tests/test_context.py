from __future__ import annotations

from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from findupdate.config import FindUpdateSettings
from findupdate.context import FindUpdateContext, pass_context


@pytest.mark.unit
class TestFindUpdateContext:
    """Tests for FindUpdateContext class."""

    def test_default_initialization(self) -> None:
        """Test FindUpdateContext initializes with default values."""
        ctx = FindUpdateContext()

        assert ctx.config_path is None
        assert ctx.verbose == 0
        assert ctx.color is True
        assert ctx.settings == FindUpdateSettings()

    def test_instances_are_independent(self) -> None:
        """Test multiple FindUpdateContext instances do not share state."""
        ctx1 = FindUpdateContext()
        ctx2 = FindUpdateContext()

        ctx1.verbose = 2
        ctx1.settings.jobs = 4

        assert ctx2.verbose == 0
        assert ctx2.settings.jobs is None

    def test_all_attributes_can_be_set(self) -> None:
        """Test all context attributes can be set and retrieved."""
        ctx = FindUpdateContext()
        settings = FindUpdateSettings(jobs=2, comply=True)

        ctx.config_path = Path("/etc/findupdate.toml")
        ctx.verbose = 1
        ctx.color = False
        ctx.settings = settings

        assert ctx.config_path == Path("/etc/findupdate.toml")
        assert ctx.verbose == 1
        assert ctx.color is False
        assert ctx.settings is settings

    def test_slots_prevents_arbitrary_attributes(self) -> None:
        """Test __slots__ prevents setting undefined attributes."""
        ctx = FindUpdateContext()

        with pytest.raises(AttributeError):
            ctx.undefined = "value"  # type: ignore[attr-defined]


@pytest.mark.unit
class TestPassContext:
    """Tests for the pass_context decorator."""

    def test_creates_context_when_missing(self) -> None:
        """Test a fresh context is injected when none exists."""
        seen = []

        @click.command()
        @pass_context
        def cmd(ctx: FindUpdateContext) -> None:
            seen.append(ctx)

        result = CliRunner().invoke(cmd, [])

        assert result.exit_code == 0
        assert isinstance(seen[0], FindUpdateContext)

    def test_reuses_existing_context(self) -> None:
        """Test an existing context object is passed through unchanged."""
        existing = FindUpdateContext()
        existing.verbose = 3
        seen = []

        @click.command()
        @pass_context
        def cmd(ctx: FindUpdateContext) -> None:
            seen.append(ctx)

        CliRunner().invoke(cmd, [], obj=existing)

        assert seen[0] is existing
