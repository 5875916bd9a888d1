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

import os

import pytest

from keywords import writer
from keywords.dialects import DialectId
from keywords.errors import OutputWriteError
from keywords.merge import merge_keyword_sets
from keywords.types import KeywordRecord, KeywordSet
from keywords.writer import (
  MERGED_FILE_NAME,
  dialect_file_names,
  merged_keyword_texts,
  read_keyword_file,
  remove_dialect_files,
  render_keyword_lines,
  write_keyword_file,
  write_outputs,
)


def _set(dialect: DialectId, **keywords: bool) -> KeywordSet:
  return KeywordSet(
    dialect=dialect,
    records=tuple(KeywordRecord(text=t, dialect=dialect, reserved=r) for t, r in keywords.items()),
  )


def test_render_sorts_dedupes_and_terminates_lines():
  assert render_keyword_lines(["SELECT", "ALL", "SELECT", "_ROWID", "abort"]) == (
    "ALL\nSELECT\n_ROWID\nabort\n"
  )


def test_render_empty_list_is_empty_file():
  assert render_keyword_lines([]) == ""


def test_dialect_file_names():
  assert dialect_file_names(DialectId.POSTGRESQL) == (
    "postgresql.txt",
    "postgresql_reserved.txt",
    "postgresql_non_reserved.txt",
  )


def test_write_keyword_file_creates_parent_and_leaves_no_temp_files(tmp_path):
  target = tmp_path / "nested" / "sqlite.txt"

  write_keyword_file(target, ["SELECT", "ABORT"])

  assert target.read_text(encoding="utf-8") == "ABORT\nSELECT\n"
  assert sorted(p.name for p in target.parent.iterdir()) == ["sqlite.txt"]


def test_failed_publish_keeps_previous_file(tmp_path, monkeypatch):
  target = tmp_path / "mysql.txt"
  target.write_text("OLD\n", encoding="utf-8")

  def boom(src, dst):
    raise PermissionError("read-only output folder")

  monkeypatch.setattr(writer.os, "replace", boom)

  with pytest.raises(OutputWriteError) as exc:
    write_keyword_file(target, ["NEW"])

  assert exc.value.path == str(target)
  assert isinstance(exc.value.cause, PermissionError)
  assert target.read_text(encoding="utf-8") == "OLD\n"
  assert sorted(p.name for p in tmp_path.iterdir()) == ["mysql.txt"]


def test_write_outputs_layout(tmp_path):
  index = merge_keyword_sets([
    _set(DialectId.POSTGRESQL, SELECT=True, COUNT=False),
    _set(DialectId.SQLITE, ABORT=True),
  ])

  written = write_outputs(tmp_path, index)

  assert sorted(p.name for p in written) == sorted([
    "postgresql.txt",
    "postgresql_reserved.txt",
    "postgresql_non_reserved.txt",
    "sqlite.txt",
    "sqlite_reserved.txt",
    "sqlite_non_reserved.txt",
    MERGED_FILE_NAME,
  ])
  assert (tmp_path / "postgresql.txt").read_text() == "COUNT\nSELECT\n"
  assert (tmp_path / "postgresql_reserved.txt").read_text() == "SELECT\n"
  assert (tmp_path / "postgresql_non_reserved.txt").read_text() == "COUNT\n"
  assert (tmp_path / "sqlite_non_reserved.txt").read_text() == ""
  assert (tmp_path / MERGED_FILE_NAME).read_text() == "ABORT\nCOUNT\nSELECT\n"


def test_write_outputs_removes_files_of_stale_dialects(tmp_path):
  for name in dialect_file_names(DialectId.MYSQL):
    (tmp_path / name).write_text("ACCOUNT\n")

  index = merge_keyword_sets([_set(DialectId.SQLITE, ABORT=True)])
  write_outputs(tmp_path, index, stale_dialects=[DialectId.MYSQL])

  assert not any((tmp_path / name).exists() for name in dialect_file_names(DialectId.MYSQL))
  assert (tmp_path / MERGED_FILE_NAME).read_text() == "ABORT\n"


def test_remove_dialect_files_ignores_missing(tmp_path):
  assert remove_dialect_files(tmp_path, DialectId.GENERIC) == []


def test_written_files_use_unix_newlines(tmp_path):
  target = tmp_path / "generic.txt"
  write_keyword_file(target, ["ALL", "ABS"])

  with open(target, "rb") as f:
    assert f.read() == b"ABS\nALL\n"
  assert os.path.getsize(target) == 8


def test_merged_texts_fold_in_untouched_dialect_files(tmp_path):
  (tmp_path / "mysql.txt").write_text("ACCOUNT\nSelect\n", encoding="utf-8")
  index = merge_keyword_sets([_set(DialectId.SQLITE, ABORT=True, SELECT=True)])

  total = merged_keyword_texts(tmp_path, index, carried_dialects=[DialectId.MYSQL, DialectId.GENERIC])

  assert total == ["ABORT", "ACCOUNT", "SELECT"]

  write_outputs(tmp_path, index, merged_texts=total)
  assert read_keyword_file(tmp_path / MERGED_FILE_NAME) == total


def test_read_keyword_file_missing_is_empty(tmp_path):
  assert read_keyword_file(tmp_path / "generic.txt") == []
