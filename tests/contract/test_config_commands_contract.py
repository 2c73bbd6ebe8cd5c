from __future__ import annotations

from pathlib import Path

import yaml

from roster_import.cli import main as cli_main
from roster_import.config.loader import load_config
from roster_import.models.config_models import ImportConfig
from roster_import.models.field_key import FieldKey

"""Every config edit is persisted immediately and survives a reload."""

CFG = Path("config/import.yml")


def test_config_show_defaults(temp_workdir: Path, capsys):
    assert cli_main(["config", "show"]) == 0
    out = capsys.readouterr().out
    assert "source_url: -" in out
    assert "mapping_mode: heuristic" in out
    assert "keywords=NOMBRE, NAME, FULL NAME" in out
    # show does not create the file
    assert not CFG.exists()


def test_config_edits_persist(temp_workdir: Path, capsys):
    url = "https://docs.google.com/spreadsheets/d/abc/edit#gid=3"
    assert cli_main(["config", "set-url", url]) == 0
    assert cli_main(["config", "set-header-row", "4"]) == 0
    assert cli_main(["config", "map", "Name", "2"]) == 0
    assert cli_main(["config", "keywords", "rut", "rut, run"]) == 0

    cfg = load_config(CFG)
    assert cfg.source_url == url
    assert cfg.header_row_number == 4
    assert cfg.column_mapping == {FieldKey.NAME: "2"}
    assert cfg.keywords(FieldKey.RUT) == ("RUT", "RUN")

    capsys.readouterr()
    cli_main(["config", "show"])
    assert "mapping_mode: manual" in capsys.readouterr().out


def test_config_map_clear(temp_workdir: Path):
    cli_main(["config", "map", "plate1", "3"])
    cli_main(["config", "map", "plate1"])
    assert load_config(CFG).column_mapping == {}


def test_config_rejects_bad_input(temp_workdir: Path, capsys):
    assert cli_main(["config", "map", "surname", "1"]) == 1
    assert cli_main(["config", "map", "name", "B"]) == 1
    assert cli_main(["config", "set-header-row", "0"]) == 1
    out = capsys.readouterr().out
    assert "ERROR config: unknown field 'surname'" in out
    assert not CFG.exists()


def test_config_reset(temp_workdir: Path):
    cli_main(["config", "set-url", "https://docs.google.com/spreadsheets/d/abc"])
    assert cli_main(["config", "reset"]) == 0
    assert load_config(CFG) == ImportConfig()
    raw = yaml.safe_load(CFG.read_text(encoding="utf-8"))
    assert raw["source_url"] == ""


def test_url_change_clears_cached_labels(temp_workdir: Path):
    CFG.write_text(
        "source_url: https://docs.google.com/spreadsheets/d/one\n"
        "header_row_number: 3\n"
        "cached_header_labels: [NOMBRE, RUT]\n",
        encoding="utf-8",
    )
    cli_main(["config", "set-url", "https://docs.google.com/spreadsheets/d/two"])
    cfg = load_config(CFG)
    assert cfg.cached_header_labels == ()
    assert cfg.header_row_number == 3
