"""Tests for CLI module."""
import io
import json
import logging
import subprocess
import sys
from unittest.mock import patch

import pytest
from conftest import C_SEA, C_WATER, GR_WATER, SG_ENVIRONMENT

from gemet_thesaurus import cli
from gemet_thesaurus._version import __version__


class TestVersion:
    """Tests for --version option."""

    def test_version_option_exits_with_version(self):
        """Test that --version prints version and exits."""
        result = subprocess.run(
            [sys.executable, "-m", "gemet_thesaurus.cli", "--version"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert __version__ in result.stdout

    def test_version_short_option(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["-V"])
        assert exc_info.value.code == 0


def _run(service, capsys, *argv):
    """Run the CLI with the fake catalog in place of the GEMET API."""
    with patch.object(cli.ThesaurusService, "from_config", return_value=service):
        code = cli.main(list(argv))
    return code, capsys.readouterr().out


class TestSearchCommands:
    """Tests for search, similar and text."""

    def test_search(self, service, capsys):
        code, out = _run(service, capsys, "search", "Wasser", "Schutz")
        assert code == 0
        assert "Wasserschutz" in out
        assert "Grundwasserschutzgebiet" in out
        assert "Naturschutz" not in out

    def test_search_exact_json(self, service, capsys):
        code, out = _run(service, capsys, "search", "Wasser", "--mode", "exact", "--json")
        assert code == 0
        data = json.loads(out)
        assert [t["id"] for t in data] == [C_WATER]
        assert data[0]["type"] == "descriptor"

    def test_search_nothing_found(self, service, capsys):
        code, out = _run(service, capsys, "search", "Wüste")
        assert code == 1
        assert "No concepts found" in out

    def test_similar(self, service, capsys):
        code, out = _run(service, capsys, "similar", "wasser", "schutz", "--json")
        assert code == 0
        assert {t["name"] for t in json.loads(out)} == {"Wasserschutz", "Grundwasserschutzgebiet"}

    def test_text(self, service, capsys):
        code, out = _run(service, capsys, "text", "Das Meer und das Wasser", "--lang", "de")
        assert code == 0
        assert out.index(C_SEA) < out.index(C_WATER)

    def test_text_from_stdin(self, service, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("Meer"))
        code, out = _run(service, capsys, "text", "-")
        assert code == 0
        assert C_SEA in out


class TestLookupCommands:
    """Tests for term, related, tree and path."""

    def test_term(self, service, capsys):
        code, out = _run(service, capsys, "term", C_WATER, "--lang", "en")
        assert code == 0
        assert "water" in out

    def test_term_json_api(self, service, capsys, catalog):
        code, out = _run(service, capsys, "term", C_WATER, "--json-api", "--json")
        assert code == 0
        assert json.loads(out)["name"] == "Wasser"
        assert ("fetch_record", C_WATER, "de") in catalog.calls

    def test_term_not_found(self, service, capsys):
        code, out = _run(service, capsys, "term", "http://www.eionet.europa.eu/gemet/concept/404")
        assert code == 1

    def test_related(self, service, capsys):
        code, out = _run(service, capsys, "related", C_WATER)
        assert code == 0
        assert "parent" in out
        assert GR_WATER in out

    def test_tree_top_level(self, service, capsys):
        code, out = _run(service, capsys, "tree")
        assert code == 0
        assert out.splitlines()[0].startswith("▶")
        assert SG_ENVIRONMENT in out

    def test_tree_below_group(self, service, capsys):
        code, out = _run(service, capsys, "tree", "--id", GR_WATER)
        lines = out.splitlines()
        assert code == 0
        assert GR_WATER in lines[0]
        assert lines[1].strip().startswith("▼ Wasser")
        assert any("Meer" in line for line in lines[2:])

    def test_tree_json(self, service, capsys):
        code, out = _run(service, capsys, "tree", "--id", SG_ENVIRONMENT, "--json")
        data = json.loads(out)
        assert code == 0
        assert data[0]["id"] == GR_WATER
        assert data[0]["hasChildren"] is True
        assert "parents" not in data[0]

    def test_path(self, service, capsys):
        code, out = _run(service, capsys, "path", C_SEA)
        lines = out.splitlines()
        assert code == 0
        assert SG_ENVIRONMENT in lines[0]
        assert C_SEA in lines[-1]
        assert len(lines) == 4

    def test_path_json(self, service, capsys):
        code, out = _run(service, capsys, "path", C_WATER, "--json")
        data = json.loads(out)
        assert data["id"] == C_WATER
        assert data["parents"][0]["id"] == GR_WATER
        assert data["parents"][0]["parents"][0]["parents"] == []


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 1
        assert "usage:" in capsys.readouterr().out

    def test_config_show(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        with patch.object(cli.Config, "__init__", return_value=None), \
                patch.object(cli.Config, "path", None), \
                patch.object(cli.Config, "data", {"lang": "de"}):
            assert cli.main(["config"]) == 0
        out = capsys.readouterr().out
        assert "showing defaults" in out
        assert '"lang": "de"' in out

    def test_setup_logging_levels(self):
        with patch("logging.basicConfig") as basic_config:
            cli.setup_logging(0)
            cli.setup_logging(2)
        assert basic_config.call_args_list[0].kwargs["level"] == logging.WARNING
        assert basic_config.call_args_list[1].kwargs["level"] == logging.DEBUG

    def test_config_uses_explicit_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        config_file = tmp_path / "my.json"
        config_file.write_text('{"lang": "fr"}')

        assert cli.main(["-c", str(config_file), "config"]) == 0
        out = capsys.readouterr().out
        assert f"loaded from: {config_file}" in out
        assert '"lang": "fr"' in out

        assert cli.main(["--config", str(config_file), "config", "--path"]) == 0
        assert capsys.readouterr().out.strip() == str(config_file)
