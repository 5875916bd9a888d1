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

from types import MappingProxyType
from typing import Iterable

from keywords.dialects import DialectId
from keywords.types import KeywordObservation, KeywordSet, MergedKeywordIndex


def merge_keyword_sets(keyword_sets: Iterable[KeywordSet]) -> MergedKeywordIndex:
  """
  Fold per-dialect keyword sets into the "all dialects" index.

  The fold only reads the sets. Spellings of one keyword that differ in case
  across dialects collapse into a single entry named after the ordinally
  smallest spelling, so the result does not depend on input order and no
  dialect is treated as authoritative.
  """
  partitions: dict[DialectId, KeywordSet] = {}
  spellings: dict[str, set[str]] = {}
  observations: dict[str, set[KeywordObservation]] = {}

  for ks in keyword_sets:
    if ks.dialect in partitions:
      raise ValueError(f"Keyword set for {ks.dialect.value} given more than once.")
    partitions[ks.dialect] = ks

    for rec in ks:
      spellings.setdefault(rec.key, set()).add(rec.text)
      observations.setdefault(rec.key, set()).add(
        KeywordObservation(dialect=rec.dialect, reserved=rec.reserved)
      )

  entries = {
    min(spellings[key]): frozenset(obs)
    for key, obs in observations.items()
  }

  ordered_partitions = {d: partitions[d] for d in sorted(partitions, key=lambda d: d.value)}
  return MergedKeywordIndex(
    entries=MappingProxyType(dict(sorted(entries.items()))),
    partitions=MappingProxyType(ordered_partitions),
  )
