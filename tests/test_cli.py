"""
CLI Tests

Runs each subcommand through main() and checks its output.
"""

import json

import pytest

from runeblade.cli import build_parser, format_seed_info, main


class TestParser:

    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_seed_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["map"])

    def test_format_seed_info(self):
        assert format_seed_info("ABC", 12647) == "Seed: ABC (numeric: 12647)"


class TestMap:

    def test_text(self, capsys):
        assert main(["map", "--seed", "abc"]) == 0
        out = capsys.readouterr().out
        assert "Seed: ABC (numeric: 12647)" in out
        assert "Shadow Forest (act 1)" in out
        assert "Node Distribution:" in out

    def test_json(self, capsys):
        assert main(["map", "--seed", "ABC", "--act", "2", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["act"] == 2
        types = [n["type"] for n in data["nodes"]]
        assert types.count("start") == 1 and types.count("boss") == 1


class TestShop:

    def test_json(self, capsys):
        assert main(["shop", "--seed", "ABC", "--json"]) == 0
        items = json.loads(capsys.readouterr().out)
        assert len(items) == 5
        assert all(i["price"] <= i["original_price"] for i in items)

    def test_count(self, capsys):
        assert main(["shop", "--seed", "ABC", "-n", "3", "--json"]) == 0
        assert len(json.loads(capsys.readouterr().out)) == 3


class TestBattle:

    def test_json(self, capsys):
        assert main(["battle", "--seed", "ABC", "--enemy", "goblin", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["enemy_id"] == "goblin"
        assert data["victory"] is True

    def test_text_log(self, capsys):
        assert main(["battle", "--seed", "ABC", "--enemy", "goblin"]) == 0
        out = capsys.readouterr().out
        assert "[system] Battle started!" in out
        assert "Victory after" in out


class TestOdds:

    def test_table(self, capsys):
        assert main(["odds"]) == 0
        assert "E[price]" in capsys.readouterr().out

    def test_simulate(self, capsys):
        assert main(["odds", "--simulate", "50"]) == 0
        out = capsys.readouterr().out
        assert "Simulated 50 shops per act" in out
        assert "chi2" in out


class TestRun:

    def test_json(self, capsys):
        assert main(["run", "--seed", "RUNE42", "--json"]) == 0
        stats = json.loads(capsys.readouterr().out)
        assert stats["seed"] == "RUNE42"
        assert stats["game_over"] is True

    def test_text(self, capsys):
        assert main(["run", "--seed", "RUNE42", "--max-steps", "3"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Seed: RUNE42")
        assert "nodes_visited" in out
