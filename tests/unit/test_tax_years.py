import json
from pathlib import Path

import pytest

from impot.config import Settings
from impot.core.engine import calculate_tax
from impot.core.errors import ConfigurationError
from impot.core.tax_years import (
  SUPPORTED_YEARS,
  available_tables,
  builtin_tables,
  get_bracket_table,
  load_tax_file,
  select_bracket_table,
)
from tests.fixtures.households import make_household

SAMPLE_TAX_FILE = Path(__file__).resolve().parents[2] / "scripts" / "tax_tables.json"


def _write(tmp_path, payload) -> Path:
  path = tmp_path / "tax.json"
  path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
  return path


def test_builtin_years() -> None:
  assert SUPPORTED_YEARS == (2019, 2020, 2021, 2022)
  tables = builtin_tables()
  assert tables[2019].tranches[1].min == 10065
  assert str(tables[2019].tranches[1].rate) == "0.14"
  assert all(table.top.unbounded for table in tables.values())


def test_select_requested_year() -> None:
  tables = builtin_tables()
  assert select_bracket_table(tables, 2020, 2022).year == 2020


def test_select_falls_back_to_default_year() -> None:
  tables = builtin_tables()
  assert select_bracket_table(tables, 1999, 2021).year == 2021


def test_select_without_default_fails() -> None:
  with pytest.raises(ConfigurationError):
    select_bracket_table(builtin_tables(), 1999, 1998)


def test_get_bracket_table_uses_settings() -> None:
  settings = Settings(tax_year=2031, default_tax_year=2020)
  assert get_bracket_table(settings=settings).year == 2020
  assert get_bracket_table(2019, settings=settings).year == 2019


def test_get_bracket_table_defaults_from_environment(monkeypatch) -> None:
  monkeypatch.setenv("IMPOT_TAX_YEAR", "2021")
  assert get_bracket_table().year == 2021


def test_sample_tax_file_loads() -> None:
  tax_file = load_tax_file(SAMPLE_TAX_FILE)
  tables = tax_file.tables()
  assert sorted(tables) == [2023, 2024]
  assert tables[2024].top.max is None
  assert tables[2023].top.max is None


def test_tax_file_years_join_builtins() -> None:
  tables = available_tables(Settings(tax_file=str(SAMPLE_TAX_FILE)))
  assert sorted(tables) == [2019, 2020, 2021, 2022, 2023, 2024]
  result = calculate_tax(make_household(30_000), tables[2023])
  assert result.tax == 2_593


def test_tax_file_overrides_builtin_year(tmp_path) -> None:
  path = _write(
    tmp_path,
    {"tax": [{"year": 2022, "tranches": [{"min": 0, "max": None, "rate": "10%"}]}]},
  )
  tables = available_tables(Settings(tax_file=str(path)))
  assert calculate_tax(make_household(30_000), tables[2022]).tax == 3_000


@pytest.mark.parametrize(
  "payload",
  [
    "{not json",
    {"tax": [{"year": 2022}]},
    {"tax": [{"year": 2022, "tranches": []}]},
    {"tax": [{"year": 2022, "tranches": [{"min": 0, "max": None, "rate": "x%"}]}]},
    {"tax": [{"year": "soon", "tranches": [{"min": 0, "rate": "0%"}]}]},
    {
      "tax": [
        {"year": 2022, "tranches": [{"min": 0, "rate": "0%"}]},
        {"year": 2022, "tranches": [{"min": 0, "rate": "5%"}]},
      ]
    },
  ],
)
def test_bad_tax_files_rejected(tmp_path, payload) -> None:
  with pytest.raises(ConfigurationError):
    load_tax_file(_write(tmp_path, payload))


def test_missing_tax_file_rejected(tmp_path) -> None:
  with pytest.raises(ConfigurationError):
    load_tax_file(tmp_path / "absent.json")
