from __future__ import annotations
import pytest

from roster_import.errors import MissingRequiredColumn
from roster_import.models.config_models import ImportConfig
from roster_import.models.field_key import FieldKey
from roster_import.services.column_mapper import ColumnMapper, find_column


def test_find_column_exact_before_substring():
    headers = ["COLOR VEHICULO", "COLOR"]
    assert find_column(headers, ["COLOR"]) == 1


def test_find_column_substring_fallback():
    assert find_column(["Nombre completo", "Rut"], ["nombre"]) == 0


def test_find_column_none():
    assert find_column(["A", "B"], ["NOMBRE"]) is None
    assert find_column(["A"], []) is None
    assert find_column(["", "B"], [" "]) is None


def test_heuristic_mapping():
    headers = ["NOMBRE", "RUT", "CORREO", "PATENTE", "MARCA", "COLOR"]
    columns = ColumnMapper(ImportConfig(), headers).resolve_all()
    assert columns[FieldKey.NAME] == 0
    assert columns[FieldKey.RUT] == 1
    assert columns[FieldKey.EMAIL] == 2
    assert columns[FieldKey.PLATE1] == 3
    assert columns[FieldKey.BRAND1] == 4
    assert columns[FieldKey.COLOR1] == 5
    assert FieldKey.PLATE2 not in columns
    assert FieldKey.GROUP not in columns


def test_manual_mapping_wins_over_headers():
    # column 2's header matches no name keyword, it is read as name anyway
    headers = ["NOMBRE", "RUT", "X", "PATENTE", "MARCA"]
    cfg = ImportConfig().with_column(FieldKey.NAME, "2")
    mapper = ColumnMapper(cfg, headers)
    assert mapper.heuristic is False
    assert mapper.resolve(FieldKey.NAME) == 2


def test_manual_mode_leaves_other_keys_unmapped():
    headers = ["NOMBRE", "RUT", "PATENTE"]
    cfg = ImportConfig().with_column(FieldKey.NAME, "0").with_column(FieldKey.PLATE1, 2)
    columns = ColumnMapper(cfg, headers).resolve_all()
    assert columns == {FieldKey.NAME: 0, FieldKey.PLATE1: 2}


def test_missing_name_heuristic():
    with pytest.raises(MissingRequiredColumn) as e:
        ColumnMapper(ImportConfig(), ["RUT", "PATENTE"]).resolve_all()
    assert "NOMBRE" in str(e.value)


def test_missing_name_manual():
    cfg = ImportConfig().with_column(FieldKey.RUT, "1")
    with pytest.raises(MissingRequiredColumn) as e:
        ColumnMapper(cfg, ["NOMBRE", "RUT"]).resolve_all()
    assert "manual mapping" in str(e.value)


def test_edited_keywords_take_effect():
    cfg = ImportConfig().with_keywords(FieldKey.NAME, "funcionario")
    assert ColumnMapper(cfg, ["RUT", "Funcionario"]).resolve(FieldKey.NAME) == 1
