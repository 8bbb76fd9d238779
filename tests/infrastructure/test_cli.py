"""Tests for the click command-line interface."""

import pytest
from click.testing import CliRunner

from orderdesk.infrastructure import bootstrap
from orderdesk.infrastructure.bootstrap import build_container
from orderdesk.infrastructure.cli.main import cli
from orderdesk.infrastructure.config import Settings


@pytest.fixture
def runner(monkeypatch):
    container = build_container(Settings(database_url="sqlite://", bcrypt_rounds=4))
    monkeypatch.setattr(bootstrap, "container", lambda: container)
    yield CliRunner()
    container.engine.dispose()


def _create(runner, *extra):
    return runner.invoke(cli, [
        "order", "create", "--customer", "Alice",
        "--items", "Widget:2:15.00,Gadget:1:4.50", *extra,
    ])


class TestOrderCommands:

    def test_create_and_show(self, runner):
        result = _create(runner, "--number", "ORD-1")
        assert result.exit_code == 0, result.output
        assert "Order created." in result.output
        assert "34.50" in result.output

        shown = runner.invoke(cli, ["order", "show", "--id", "1"])
        assert shown.exit_code == 0
        assert "ORD-1" in shown.output
        assert "Widget" in shown.output

    def test_bad_item_format(self, runner):
        result = runner.invoke(cli, ["order", "create", "--customer", "A", "--items", "Widget:2"])
        assert result.exit_code != 0
        assert "ProductName:Quantity:Price" in result.output

    def test_validation_errors_are_listed(self, runner):
        result = _create(runner, "--status", "Lost")
        assert result.exit_code == 1
        assert "status:" in result.output

    def test_list_and_delete(self, runner):
        _create(runner, "--number", "ORD-1")
        _create(runner, "--number", "ORD-2")

        listed = runner.invoke(cli, ["order", "list", "--search", "ord-2"])
        assert "ORD-2" in listed.output
        assert "ORD-1" not in listed.output

        assert runner.invoke(cli, ["order", "delete", "--id", "1"]).exit_code == 0
        missing = runner.invoke(cli, ["order", "show", "--id", "1"])
        assert missing.exit_code == 1
        assert "not found" in missing.output

    def test_empty_list(self, runner):
        assert "No orders found." in runner.invoke(cli, ["order", "list"]).output


class TestProductCommands:

    def test_add_list_update(self, runner):
        added = runner.invoke(cli, ["product", "add", "--name", "Widget", "--price", "15"])
        assert added.exit_code == 0, added.output
        assert "Product #1 'Widget' added at 15.00" in added.output

        updated = runner.invoke(cli, ["product", "update", "--id", "1", "--price", "29.99"])
        assert updated.exit_code == 0
        assert "29.99" in updated.output

        listed = runner.invoke(cli, ["product", "list"])
        assert "Widget" in listed.output
        assert "29.99" in listed.output

    def test_update_needs_a_field(self, runner):
        result = runner.invoke(cli, ["product", "update", "--id", "1"])
        assert result.exit_code == 2

    def test_duplicate(self, runner):
        runner.invoke(cli, ["product", "add", "--name", "Widget", "--price", "15"])
        result = runner.invoke(cli, ["product", "add", "--name", "Widget", "--price", "15"])
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestDbCommands:

    def test_init(self, runner):
        result = runner.invoke(cli, ["db", "init"])
        assert result.exit_code == 0
        assert "Schema ready" in result.output
