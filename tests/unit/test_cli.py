"""Tests for CLI commands."""

import json
from pathlib import Path

from typer.testing import CliRunner

from cal.cli import app


def test_version(cli_runner: CliRunner, isolated_cwd: Path):
    """Test --version prints the package version."""
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("cal version ")


def test_eval_int(cli_runner: CliRunner, isolated_cwd: Path):
    """Test eval prints an integer result."""
    result = cli_runner.invoke(app, ["eval", "7 + 6 * 2 - 4 * (8 + 3)"])
    assert result.exit_code == 0
    assert result.output == "-25\n"


def test_eval_float(cli_runner: CliRunner, isolated_cwd: Path):
    """Test eval prints a float result with its fraction."""
    result = cli_runner.invoke(app, ["eval", "7.0 * 2"])
    assert result.exit_code == 0
    assert result.output == "14.0\n"


def test_eval_leading_minus(cli_runner: CliRunner, isolated_cwd: Path):
    """Test an expression starting with '-' after the option terminator."""
    result = cli_runner.invoke(app, ["eval", "--", "-5 * 2"])
    assert result.exit_code == 0
    assert result.output == "-10\n"


def test_eval_with_tree(cli_runner: CliRunner, isolated_cwd: Path):
    """Test --tree prints the tree before the result."""
    result = cli_runner.invoke(app, ["eval", "--tree", "1 + 2"])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["Op(+)", "`-- 1", "`-- 2", "3"]


def test_eval_json(cli_runner: CliRunner, isolated_cwd: Path):
    """Test --json prints a JSON object."""
    result = cli_runner.invoke(app, ["eval", "--json", "7 / 2"])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"expression": "7 / 2", "kind": "int", "value": 3}


def test_eval_json_with_tree(cli_runner: CliRunner, isolated_cwd: Path):
    """Test --json --tree includes the tree lines."""
    result = cli_runner.invoke(app, ["eval", "--json", "--tree", "--", "-1.5"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["kind"] == "float"
    assert payload["value"] == -1.5
    assert payload["tree"] == ["Op(-)", "`-- 1.5"]


def test_eval_parse_error(cli_runner: CliRunner, isolated_cwd: Path):
    """Test a parse error exits with status 1 and the error message."""
    result = cli_runner.invoke(app, ["eval", "1 + 2)"])
    assert result.exit_code == 1
    assert "Mismatched right parenthesis at offset 5" in result.output


def test_eval_tokenize_error(cli_runner: CliRunner, isolated_cwd: Path):
    """Test an unknown character exits with status 1."""
    result = cli_runner.invoke(app, ["eval", "2 % 3"])
    assert result.exit_code == 1
    assert "Unexpected character" in result.output


def test_eval_verbose(cli_runner: CliRunner, isolated_cwd: Path):
    """Test --verbose does not change the result."""
    result = cli_runner.invoke(app, ["--verbose", "eval", "2 ^ 10"])
    assert result.exit_code == 0
    assert result.output.splitlines()[-1] == "1024"


def test_tree_command(cli_runner: CliRunner, isolated_cwd: Path):
    """Test tree prints the rendered tree only."""
    result = cli_runner.invoke(app, ["tree", "1 * (2 + 3)"])
    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "Op(*)",
        "`-- 1",
        "`-- Op(+)",
        "    `-- 2",
        "    `-- 3",
    ]


def test_dump_to_stdout(cli_runner: CliRunner, isolated_cwd: Path):
    """Test dump prints the JSON tree."""
    result = cli_runner.invoke(app, ["dump", "sin(0)"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["type"] == "unary"
    assert data["action"] == {"kind": "func", "function": "sin"}


def test_dump_then_load(cli_runner: CliRunner, isolated_cwd: Path):
    """Test a dumped tree loads and evaluates to the same result."""
    out = isolated_cwd / "tree.json"
    result = cli_runner.invoke(app, ["dump", "7.0 * -5", "--output", str(out)])
    assert result.exit_code == 0
    assert "Wrote expression tree" in result.output
    assert out.exists()

    result = cli_runner.invoke(app, ["load", str(out)])
    assert result.exit_code == 0
    assert result.output == "-35.0\n"


def test_load_with_tree(cli_runner: CliRunner, isolated_cwd: Path):
    """Test load --tree prints the loaded tree."""
    out = isolated_cwd / "tree.json"
    cli_runner.invoke(app, ["dump", "1 + 2", "-o", str(out)])

    result = cli_runner.invoke(app, ["load", "--tree", str(out)])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["Op(+)", "`-- 1", "`-- 2", "3"]


def test_load_missing_file(cli_runner: CliRunner, isolated_cwd: Path):
    """Test load of a missing file exits with status 1."""
    result = cli_runner.invoke(app, ["load", "missing.json"])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_load_invalid_tree(cli_runner: CliRunner, isolated_cwd: Path):
    """Test load of an invalid document exits with status 1."""
    bad = isolated_cwd / "bad.json"
    bad.write_text('{"type": "plain"}')
    result = cli_runner.invoke(app, ["load", str(bad)])
    assert result.exit_code == 1
    assert "Invalid expression tree" in result.output


def test_config_file_enables_tree(cli_runner: CliRunner, isolated_cwd: Path):
    """Test [output].tree in cal.toml applies to eval."""
    (isolated_cwd / "cal.toml").write_text("[output]\ntree = true\n")
    result = cli_runner.invoke(app, ["eval", "1 + 2"])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["Op(+)", "`-- 1", "`-- 2", "3"]


def test_no_tree_overrides_config(cli_runner: CliRunner, isolated_cwd: Path):
    """Test --no-tree wins over the config file."""
    (isolated_cwd / "cal.toml").write_text("[output]\ntree = true\n")
    result = cli_runner.invoke(app, ["eval", "--no-tree", "1 + 2"])
    assert result.exit_code == 0
    assert result.output == "3\n"


def test_config_file_json_format(cli_runner: CliRunner, isolated_cwd: Path):
    """Test [output].format = "json" applies to eval."""
    (isolated_cwd / "cal.toml").write_text('[output]\nformat = "json"\n')
    result = cli_runner.invoke(app, ["eval", "2 * 3"])
    assert result.exit_code == 0
    assert json.loads(result.output)["value"] == 6


def test_explicit_config_missing(cli_runner: CliRunner, isolated_cwd: Path):
    """Test --config with a missing file exits with status 1."""
    result = cli_runner.invoke(app, ["--config", "nope.toml", "eval", "1"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_invalid_config(cli_runner: CliRunner, isolated_cwd: Path):
    """Test an invalid cal.toml exits with status 1."""
    (isolated_cwd / "cal.toml").write_text('[output]\nformat = "xml"\n')
    result = cli_runner.invoke(app, ["eval", "1"])
    assert result.exit_code == 1
    assert "Invalid output format" in result.output


def test_load_binary_file(cli_runner: CliRunner, isolated_cwd: Path):
    """Test load of a file that is not UTF-8 JSON exits with status 1."""
    bad = isolated_cwd / "bad.json"
    bad.write_bytes(b"\xff\xfe{bad")
    result = cli_runner.invoke(app, ["load", str(bad)])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Invalid expression tree" in result.output


def test_load_directory(cli_runner: CliRunner, isolated_cwd: Path):
    """Test load of a directory exits with status 1."""
    (isolated_cwd / "trees").mkdir()
    result = cli_runner.invoke(app, ["load", "trees"])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Cannot read trees" in result.output


def test_eval_long_sum(cli_runner: CliRunner, isolated_cwd: Path):
    """Test a long operator chain evaluates."""
    result = cli_runner.invoke(app, ["eval", " + ".join(["1"] * 3000)])
    assert result.exit_code == 0
    assert result.output == "3000\n"


def test_eval_deep_nesting(cli_runner: CliRunner, isolated_cwd: Path):
    """Test input nested too deeply exits with status 1."""
    result = cli_runner.invoke(app, ["eval", "(" * 1200 + "1" + ")" * 1200])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Expression nested too deeply" in result.output


def test_dump_long_sum(cli_runner: CliRunner, isolated_cwd: Path):
    """Test dump of a long chain prints JSON or a formatted error."""
    result = cli_runner.invoke(app, ["dump", " + ".join(["1"] * 3000)])
    assert result.exit_code in (0, 1)
    assert result.exception is None or isinstance(result.exception, SystemExit)
