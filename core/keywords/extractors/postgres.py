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
from typing import Iterable

from keywords.dialects import DialectId
from keywords.extractors.base import KeywordExtractor
from keywords.html import HtmlTable, collect_tables, normalize_header_token
from keywords.types import ExtractedKeyword

logger = logging.getLogger(__name__)


def classify_label(label: str) -> bool | None:
  """
  Map a PostgreSQL classification cell to reserved (True) / non-reserved (False).

  Labels carry qualifiers on some rows, e.g. "reserved (can be function or type)"
  or "non-reserved (cannot be function or type)". Anything else (blank cells,
  "requires AS" notes) is untagged and returns None.
  """
  v = (label or "").strip().lower()
  if v.startswith("non-reserved") or v.startswith("nonreserved"):
    return False
  if v.startswith("reserved"):
    return True
  return None


def _find_columns(table: HtmlTable) -> tuple[int, int]:
  """
  Return (keyword_col, postgres_col) for a keyword table.

  The docs label the columns "Key Word" and "PostgreSQL", followed by the SQL
  standard columns which use the same reserved/non-reserved vocabulary. When
  the header is missing we infer the PostgreSQL column from content density
  and finally fall back to the column right after the keyword.
  """
  rows = table.rows
  for hdr in rows[:3]:
    header_n = [normalize_header_token(h) for h in hdr]
    kw_col = next((i for i, h in enumerate(header_n) if "keyword" in h), None)
    if kw_col is None:
      continue
    pg_col = next((i for i, h in enumerate(header_n) if "postgres" in h), None)
    if pg_col is not None:
      return kw_col, pg_col
    return kw_col, kw_col + 1

  col_count = max((len(r) for r in rows[:20]), default=0)
  best_density = 0.0
  best_idx: int | None = None
  for ci in range(1, col_count):
    checked = 0
    hits = 0
    for r in rows[:40]:
      if ci >= len(r) or not r[ci].strip():
        continue
      checked += 1
      if classify_label(r[ci]) is not None:
        hits += 1
    if checked >= 5:
      density = hits / checked
      # leftmost dense column wins; PostgreSQL precedes the SQL standard columns
      if density > best_density:
        best_density = density
        best_idx = ci
  if best_idx is not None and best_density >= 0.6:
    return 0, best_idx

  return 0, 1


def _is_keyword_table(table: HtmlTable) -> bool:
  for hdr in table.rows[:3]:
    if any("keyword" in normalize_header_token(h) for h in hdr):
      return True
  # Headerless fixtures / layouts: accept when at least one row carries a label.
  return any(len(r) > 1 and classify_label(r[1]) is not None for r in table.rows)


class PostgresKeywordExtractor(KeywordExtractor):
  DIALECT = DialectId.POSTGRESQL

  def _extract(self, raw_text: str) -> Iterable[ExtractedKeyword]:
    tables = [t for t in collect_tables(raw_text) if _is_keyword_table(t)]
    if not tables:
      logger.debug("%s: no keyword table found", self.source_id)
      return

    for table in tables:
      kw_col, pg_col = _find_columns(table)
      for row in table.rows:
        if kw_col >= len(row) or pg_col >= len(row):
          continue
        keyword = row[kw_col].strip()
        if not keyword:
          continue
        # Each row is judged by its own label; untagged rows are SQL-standard-only words.
        reserved = classify_label(row[pg_col])
        if reserved is None:
          continue
        yield ExtractedKeyword(text=keyword, reserved=reserved)
