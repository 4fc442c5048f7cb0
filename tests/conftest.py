"""Shared pytest fixtures for cal tests."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from cal.core.ir import BinaryAction, BinaryNode, PlainNode, UnaryAction, UnaryNode


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no cal.toml and no CAL_LOG_LEVEL."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CAL_LOG_LEVEL", raising=False)
    return tmp_path


@pytest.fixture
def sum_tree() -> BinaryNode:
    """Return the tree for ``1 + 2``."""
    return BinaryNode(left=PlainNode.of(1), action=BinaryAction.ADD, right=PlainNode.of(2))


@pytest.fixture
def nested_tree() -> UnaryNode:
    """Return the tree for ``-((1 + 2) * 3.5)``."""
    product = BinaryNode(
        left=BinaryNode(left=PlainNode.of(1), action=BinaryAction.ADD, right=PlainNode.of(2)),
        action=BinaryAction.MUL,
        right=PlainNode.of(3.5),
    )
    return UnaryNode(action=UnaryAction.neg(), operand=product)
