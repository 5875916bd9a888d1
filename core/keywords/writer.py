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

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable

from keywords.dialects import DialectId
from keywords.errors import OutputWriteError
from keywords.types import KeywordSet, MergedKeywordIndex, keyword_key

"""
Keyword list files.

Format: one keyword per line, strict ordinal ascending order, no blank or
duplicate lines, trailing newline. An empty list is an empty file.

Layout under the output root:
  <dialect>.txt               all keywords of the dialect
  <dialect>_reserved.txt      reserved subset
  <dialect>_non_reserved.txt  non-reserved subset
  total.txt                   union of all dialect files in the directory
"""

logger = logging.getLogger(__name__)

MERGED_FILE_NAME = "total.txt"


def dialect_file_names(dialect: DialectId) -> tuple[str, str, str]:
  d = dialect.value
  return f"{d}.txt", f"{d}_reserved.txt", f"{d}_non_reserved.txt"


def render_keyword_lines(keywords: Iterable[str]) -> str:
  ordered = sorted(set(keywords))
  if not ordered:
    return ""
  return "\n".join(ordered) + "\n"


def write_keyword_file(path: Path, keywords: Iterable[str]) -> Path:
  """
  Publish a keyword file atomically.

  The content goes to a temporary file in the target directory first and is
  moved into place with os.replace, so readers only ever see the previous
  file or the complete new one.
  """
  content = render_keyword_lines(keywords)
  path = Path(path)
  tmp_path: str | None = None
  try:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_handle = tempfile.NamedTemporaryFile(
      mode="w",
      encoding="utf-8",
      newline="\n",
      delete=False,
      dir=str(path.parent),
      prefix=f".{path.name}.",
      suffix=".tmp",
    )
    tmp_path = tmp_handle.name
    with tmp_handle:
      tmp_handle.write(content)
      tmp_handle.flush()
      os.fsync(tmp_handle.fileno())
    os.replace(tmp_path, path)
  except OSError as exc:
    if tmp_path is not None:
      try:
        os.remove(tmp_path)
      except OSError:
        pass
    raise OutputWriteError(str(path), exc) from exc

  logger.debug("Wrote %s", path)
  return path


def write_keyword_set(out_root: Path, keyword_set: KeywordSet) -> list[Path]:
  all_name, reserved_name, non_reserved_name = dialect_file_names(keyword_set.dialect)
  return [
    write_keyword_file(out_root / all_name, keyword_set.texts()),
    write_keyword_file(out_root / reserved_name, keyword_set.reserved()),
    write_keyword_file(out_root / non_reserved_name, keyword_set.non_reserved()),
  ]


def remove_dialect_files(out_root: Path, dialect: DialectId) -> list[Path]:
  """Drop files left by a previous run for a dialect that produced nothing this time."""
  removed: list[Path] = []
  for name in dialect_file_names(dialect):
    p = out_root / name
    try:
      p.unlink()
    except FileNotFoundError:
      continue
    except OSError as exc:
      raise OutputWriteError(str(p), exc) from exc
    removed.append(p)
    logger.info("Removed stale %s", p)
  return removed


def read_keyword_file(path: Path) -> list[str]:
  """Lines of a previously written keyword file; a missing file reads as empty."""
  path = Path(path)
  try:
    content = path.read_text(encoding="utf-8")
  except FileNotFoundError:
    return []
  except (OSError, UnicodeDecodeError) as exc:
    raise OutputWriteError(str(path), exc) from exc
  return [line.strip() for line in content.splitlines() if line.strip()]


def merged_keyword_texts(
  out_root: Path,
  index: MergedKeywordIndex,
  *,
  carried_dialects: Iterable[DialectId] = (),
) -> list[str]:
  """
  Content of total.txt.

  `carried_dialects` are dialects this run did not touch. Their <dialect>.txt
  files stay on disk, so their keywords are folded back in and total.txt
  remains the union of the dialect files next to it. Spelling variants of
  one keyword collapse to the ordinally smallest, as in the merge.
  """
  by_key = {keyword_key(t): t for t in index.texts()}
  for dialect in carried_dialects:
    for text in read_keyword_file(Path(out_root) / dialect_file_names(dialect)[0]):
      key = keyword_key(text)
      by_key[key] = min(by_key.get(key, text), text)
  return sorted(by_key.values())


def write_outputs(
  out_root: Path,
  index: MergedKeywordIndex,
  *,
  stale_dialects: Iterable[DialectId] = (),
  merged_texts: Iterable[str] | None = None,
) -> list[Path]:
  """
  Write every per-dialect partition of `index` plus the merged file.

  `merged_texts` overrides the content of total.txt (see merged_keyword_texts);
  by default it is the index itself. Raises OutputWriteError on the first
  file that cannot be published.
  """
  out_root = Path(out_root)
  written: list[Path] = []
  for keyword_set in index.partitions.values():
    written.extend(write_keyword_set(out_root, keyword_set))
  for dialect in stale_dialects:
    remove_dialect_files(out_root, dialect)
  total = index.texts() if merged_texts is None else merged_texts
  written.append(write_keyword_file(out_root / MERGED_FILE_NAME, total))
  return written
