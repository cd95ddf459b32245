import json

import pytest

from scripts import check_tax_file


def test_check_sample_tax_file(capsys):
  check_tax_file.main([str(check_tax_file.DEFAULT_TAX_FILE)])
  out = capsys.readouterr().out
  assert "2023: 5 tranches, top rate 45% from 168995" in out
  assert "Tax file OK: 2 year(s)" in out


def test_check_rejects_bad_tax_file(tmp_path):
  path = tmp_path / "tax.json"
  path.write_text(json.dumps({"tax": [{"year": 2022, "tranches": []}]}), encoding="utf-8")
  with pytest.raises(SystemExit) as exc:
    check_tax_file.main([str(path)])
  assert "Invalid tax file" in str(exc.value.code)
