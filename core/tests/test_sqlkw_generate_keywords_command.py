"""
sqlkw - SQL keyword index builder
Copyright © 2025-2026 Ilona Tag

This file is part of sqlkw.

sqlkw is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as
published by the Free Software Foundation, either version 3 of
the License, or (at your option) any later version.

sqlkw is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with sqlkw. If not, see <https://www.gnu.org/licenses/>.
"""

import io
import json

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from keywords.errors import OutputWriteError
from keywords.fetching import HttpSourceFetcher
from keywords.management.commands.sqlkw_generate_keywords import Command as GenerateKeywordsCommand
from keywords.pipeline import RunReport


@pytest.fixture(autouse=True)
def _no_sources_file(settings):
  settings.SQLKW_SOURCES_PATH = None
  settings.SQLKW_DIALECTS = []


def _run(*args) -> str:
  buffer = io.StringIO()
  call_command("sqlkw_generate_keywords", *args, stdout=buffer)
  return buffer.getvalue()


def test_command_generates_files_from_saved_pages(tmp_path, sources_dir):
  out_root = tmp_path / "kw"

  output = _run("--fixtures-dir", str(sources_dir), "--out-root", str(out_root))

  assert "SQL keyword lists generated" in output
  assert "postgresql" in output and "[ok]" in output
  assert "= total" in output
  assert (out_root / "total.txt").exists()
  assert (out_root / "sqlite.txt").read_text() == "ABORT\nACTION\nADD\nAFTER\nALL\nSELECT\n"


def test_command_highlights_failed_sources(tmp_path):
  docs = tmp_path / "docs"
  docs.mkdir()
  (docs / "sqlite.html").write_text("<ul><li>ABORT</li></ul>", encoding="utf-8")

  output = _run(
    "--fixtures-dir", str(docs),
    "--out-root", str(tmp_path / "kw"),
    "--dialect", "sqlite",
    "--dialect", "mysql",
  )

  assert "1 failed source(s)" in output
  assert "[fetch_failed]" in output
  assert "no fixture document available" in output
  # suspiciously small list still ships, with a sanity note
  assert "expected at least" in output
  assert (tmp_path / "kw" / "sqlite.txt").read_text() == "ABORT\n"


def test_command_writes_json_report(tmp_path, sources_dir):
  report_path = tmp_path / "reports" / "run.json"

  _run(
    "--fixtures-dir", str(sources_dir),
    "--out-root", str(tmp_path / "kw"),
    "--dialect", "postgres",
    "--report-json", str(report_path),
  )

  data = json.loads(report_path.read_text(encoding="utf-8"))
  assert [d["dialect"] for d in data["dialects"]] == ["postgresql"]
  assert data["dialects"][0]["keywords"] == 6
  assert data["dialects"][0]["reserved"] == 3


def test_command_rejects_unknown_dialect(tmp_path, sources_dir):
  with pytest.raises(CommandError) as exc:
    _run("--fixtures-dir", str(sources_dir), "--out-root", str(tmp_path), "--dialect", "oracle")
  assert "Unknown dialect" in str(exc.value)


def test_command_rejects_missing_fixtures_dir(tmp_path):
  with pytest.raises(CommandError):
    _run("--fixtures-dir", str(tmp_path / "missing"), "--out-root", str(tmp_path))


def test_command_rejects_non_positive_timeout(tmp_path):
  with pytest.raises(CommandError):
    _run("--timeout", "0", "--out-root", str(tmp_path))


def test_command_rejects_missing_sources_config(tmp_path):
  with pytest.raises(CommandError) as exc:
    _run("--sources-config", str(tmp_path / "missing.yaml"), "--out-root", str(tmp_path))
  assert "Sources config not found" in str(exc.value)


def test_command_converts_write_failure(monkeypatch, tmp_path, sources_dir):
  cmd = GenerateKeywordsCommand()
  cmd.stdout = io.StringIO()

  def fail(fetcher, config):
    raise OutputWriteError(str(config.out_root / "total.txt"), PermissionError("denied"))

  monkeypatch.setattr("keywords.management.commands.sqlkw_generate_keywords.run_pipeline", fail)

  with pytest.raises(CommandError) as exc:
    cmd.handle(
      out_root=str(tmp_path),
      dialect=[],
      timeout=None,
      fixtures_dir=str(sources_dir),
      report_json=None,
      sources_config=None,
    )
  assert "total.txt" in str(exc.value)


def test_command_uses_http_fetcher_without_fixtures(monkeypatch, tmp_path):
  seen = {}

  def fake_run_pipeline(fetcher, config):
    seen["fetcher"] = fetcher
    seen["config"] = config
    return RunReport(started_at="2026-01-01T00:00:00+00:00")

  monkeypatch.setattr(
    "keywords.management.commands.sqlkw_generate_keywords.run_pipeline",
    fake_run_pipeline,
  )

  _run("--out-root", str(tmp_path), "--timeout", "4", "--dialect", "sqlite")

  fetcher = seen["fetcher"]
  assert isinstance(fetcher, HttpSourceFetcher)
  assert fetcher.timeout == 4.0
  assert fetcher.urls["sqlite"] == "https://www.sqlite.org/lang_keywords.html"
