"""Tests for the init command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from gigledger.cli import cli

SEED = """\
[[profiles]]
id = 1
first_name = "Harry"
last_name = "Potter"
role = "client"
balance = "1150.00"

[[profiles]]
id = 2
first_name = "Linus"
last_name = "Torvalds"
role = "contractor"

[[contracts]]
id = 1
client_id = 1
contractor_id = 2
status = "in_progress"

[[jobs]]
contract_id = 1
price = "200.00"
"""


class TestInit:
    def test_creates_database(self, cli_runner: CliRunner, _isolated_root: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "init"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["op"] == "init"
        assert "gigledger.db" in data["data"]["database"]
        assert (_isolated_root / ".gigledger" / "gigledger.db").is_file()

    def test_seed_then_pay(self, cli_runner: CliRunner, _isolated_root: Path) -> None:
        seed = _isolated_root / "seed.toml"
        seed.write_text(SEED, encoding="utf-8")

        result = cli_runner.invoke(cli, ["--json", "init", "--seed", str(seed)])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["data"]["jobs"] == 1

        paid = cli_runner.invoke(cli, ["--json", "--profile", "1", "jobs", "pay", "1"])
        assert paid.exit_code == 0, paid.output
        assert json.loads(paid.output)["data"]["client_balance"] == "950.00"

    def test_bad_seed(self, cli_runner: CliRunner, _isolated_root: Path) -> None:
        seed = _isolated_root / "seed.toml"
        seed.write_text(SEED.replace('"1150.00"', "1150.5"), encoding="utf-8")

        result = cli_runner.invoke(cli, ["init", "--seed", str(seed)])
        assert result.exit_code == 1
        assert "INVALID_INPUT" in result.output

    def test_missing_seed_file(self, cli_runner: CliRunner, _isolated_root: Path) -> None:
        result = cli_runner.invoke(cli, ["init", "--seed", "nope.toml"])
        assert result.exit_code == 2
