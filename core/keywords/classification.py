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
from dataclasses import dataclass
from typing import Iterable

from keywords.dialects import DialectId
from keywords.errors import ClassificationConflict
from keywords.types import KeywordRecord, KeywordSet, NormalizedKeyword

"""
Per-dialect classification and de-duplication.

Observations of one dialect are grouped by their case-insensitive key. The
first-seen spelling is kept. When rows disagree, reserved wins over
non-reserved: a lexer that treats a word as a keyword when in doubt stays
correct on round-trips.
"""

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationResult:
  keyword_set: KeywordSet
  conflicts: tuple[ClassificationConflict, ...]
  observations: int


class _Group:
  __slots__ = ("text", "reserved", "non_reserved")

  def __init__(self, text: str) -> None:
    self.text = text
    self.reserved = 0
    self.non_reserved = 0


def classify_keywords(dialect: DialectId, keywords: Iterable[NormalizedKeyword]) -> ClassificationResult:
  groups: dict[str, _Group] = {}
  observations = 0

  for kw in keywords:
    observations += 1
    group = groups.get(kw.key)
    if group is None:
      group = groups[kw.key] = _Group(kw.text)
    if kw.reserved:
      group.reserved += 1
    else:
      group.non_reserved += 1

  records: list[KeywordRecord] = []
  conflicts: list[ClassificationConflict] = []

  for group in groups.values():
    if group.reserved and group.non_reserved:
      conflict = ClassificationConflict(
        dialect=dialect,
        text=group.text,
        reserved_count=group.reserved,
        non_reserved_count=group.non_reserved,
      )
      conflicts.append(conflict)
      logger.info(
        "%s: %s observed as reserved %d time(s) and non-reserved %d time(s); keeping reserved",
        dialect.value, group.text, group.reserved, group.non_reserved,
      )
    records.append(KeywordRecord(text=group.text, dialect=dialect, reserved=group.reserved > 0))

  return ClassificationResult(
    keyword_set=KeywordSet(dialect=dialect, records=tuple(records)),
    conflicts=tuple(sorted(conflicts, key=lambda c: c.text)),
    observations=observations,
  )
