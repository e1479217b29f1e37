from __future__ import annotations

import click
import pytest

from modkeeper.config import ModKeeperConfig
from modkeeper.context import ModKeeperContext, pass_context


@pytest.mark.unit
class TestModKeeperContext:
    """Tests for ModKeeperContext."""

    def test_default_initialization(self) -> None:
        """Test ModKeeperContext starts with default configuration."""
        ctx = ModKeeperContext()

        assert ctx.config_path is None
        assert ctx.config == ModKeeperConfig()
        assert ctx.verbose == 0
        assert ctx.color is True

    def test_instances_are_independent(self) -> None:
        first, second = ModKeeperContext(), ModKeeperContext()

        first.verbose = 2

        assert second.verbose == 0

    def test_slots_prevents_arbitrary_attributes(self) -> None:
        ctx = ModKeeperContext()

        with pytest.raises(AttributeError):
            ctx.arbitrary_attribute = "value"  # type: ignore


@pytest.mark.unit
class TestPassContextDecorator:
    """Tests for pass_context decorator."""

    def test_pass_context_injects_existing_context(self) -> None:
        """Test pass_context injects the ModKeeperContext already on the click context."""

        @click.command()
        @pass_context
        def command(ctx: ModKeeperContext) -> ModKeeperContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))
        modkeeper_ctx = ModKeeperContext()
        click_ctx.obj = modkeeper_ctx

        assert click_ctx.invoke(command) is modkeeper_ctx

    def test_pass_context_creates_context_when_missing(self) -> None:
        """Test pass_context creates a default ModKeeperContext when none exists."""

        @click.command()
        @pass_context
        def command(ctx: ModKeeperContext) -> ModKeeperContext:
            return ctx

        result = click.Context(click.Command("test")).invoke(command)

        assert isinstance(result, ModKeeperContext)
        assert result.verbose == 0
