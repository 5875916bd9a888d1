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
import re
from dataclasses import dataclass
from typing import Iterable

from keywords.dialects import DialectId
from keywords.extractors.base import KeywordExtractor
from keywords.html import HtmlListItem, collect_list_items
from keywords.types import ExtractedKeyword

"""
MySQL keywords from the reference manual keyword page.

Entries look like:

  ACCESSIBLE (R)
  ACCOUNT
  ADMIN; became nonreserved in 8.0.12
  ARRAY (R); added in 8.0.17 (reserved)
  ANALYSE; removed in 8.0.1

"(R)" marks a reserved word; everything else is non-reserved. Only the
current status is kept: removed entries are skipped, and entries whose
history does not pin down a single current status are reported instead of
being classified.
"""

logger = logging.getLogger(__name__)

_RESERVED_MARKER_RE = re.compile(r"^\s*\(R\)", re.IGNORECASE)
_ADDED_RE = re.compile(
  r"\badded\s+in\s+[\w.]+(?:\s*\((?P<status>reserved|non-?reserved)\))?",
  re.IGNORECASE,
)
_BECAME_RE = re.compile(r"\bbecame\s+(?P<status>reserved|non-?reserved)\b", re.IGNORECASE)
_REMOVED_RE = re.compile(r"\bremoved\s+in\b", re.IGNORECASE)


def _is_reserved_label(label: str) -> bool:
  return label.lower() == "reserved"


@dataclass(frozen=True)
class MysqlEntry:
  keyword: str
  annotation: str
  reserved_marker: bool
  added: bool
  added_status: bool | None
  became_status: bool | None
  removed: bool

  def signals(self) -> set[bool]:
    out: set[bool] = set()
    if self.reserved_marker:
      out.add(True)
    if self.added_status is not None:
      out.add(self.added_status)
    if self.became_status is not None:
      out.add(self.became_status)
    return out


def parse_entry(item: HtmlListItem) -> MysqlEntry | None:
  """Split a list item into keyword + annotation; None if it is not a keyword entry."""
  code = (item.code or "").strip()
  text = item.text.strip()
  if not code or not text.startswith(code):
    return None

  annotation = text[len(code):].strip()
  added = _ADDED_RE.search(annotation)
  became = _BECAME_RE.search(annotation)

  added_status = None
  if added and added.group("status"):
    added_status = _is_reserved_label(added.group("status"))

  return MysqlEntry(
    keyword=code,
    annotation=annotation,
    reserved_marker=bool(_RESERVED_MARKER_RE.match(annotation)),
    added=added is not None,
    added_status=added_status,
    became_status=_is_reserved_label(became.group("status")) if became else None,
    removed=bool(_REMOVED_RE.search(annotation)),
  )


class MysqlKeywordExtractor(KeywordExtractor):
  DIALECT = DialectId.MYSQL

  def _extract(self, raw_text: str) -> Iterable[ExtractedKeyword]:
    for item in collect_list_items(raw_text):
      if item.heading and "removed" in item.heading.lower():
        continue

      entry = parse_entry(item)
      if entry is None:
        continue

      if entry.removed:
        logger.debug("%s: skipping removed keyword %s (%s)", self.source_id, entry.keyword, entry.annotation)
        continue

      if entry.added and entry.became_status is not None:
        self.warn(entry.keyword, f"both 'added in' and 'became' annotations: {entry.annotation!r}")
        continue

      signals = entry.signals()
      if len(signals) > 1:
        self.warn(entry.keyword, f"conflicting status annotations: {entry.annotation!r}")
        continue

      reserved = signals.pop() if signals else False
      yield ExtractedKeyword(text=entry.keyword, reserved=reserved)
