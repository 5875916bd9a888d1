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

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from keywords.dialects import DialectId
from keywords.errors import ExtractionWarning

"""
Value types flowing through the keyword pipeline.

All types are immutable: each run builds a fresh snapshot and nothing is
updated in place once a stage has produced it.
"""


def keyword_key(text: str) -> str:
  """Canonical comparison form. SQL keywords are case-insensitive."""
  return text.upper()


# --------------------------------------------------------------------------------------
# Extraction / normalization
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtractedKeyword:
  text: str
  reserved: bool


@dataclass(frozen=True)
class Extraction:
  """Output of one extractor run, in source document order."""
  source_id: str
  dialect: DialectId
  keywords: tuple[ExtractedKeyword, ...]
  warnings: tuple[ExtractionWarning, ...] = ()

  def __len__(self) -> int:
    return len(self.keywords)


@dataclass(frozen=True)
class NormalizedKeyword:
  text: str
  key: str
  reserved: bool


# --------------------------------------------------------------------------------------
# Classified keyword sets
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class KeywordRecord:
  text: str
  dialect: DialectId
  reserved: bool

  @property
  def key(self) -> str:
    return keyword_key(self.text)


@dataclass(frozen=True)
class KeywordSet:
  """
  Final keywords of one dialect.

  Records are kept in strict ordinal order of their text. Two records whose
  text only differs in case are rejected: conflicts must be resolved before
  the set is built (see keywords.classification).
  """
  dialect: DialectId
  records: tuple[KeywordRecord, ...]
  _by_key: Mapping[str, KeywordRecord] | None = field(
    init=False, repr=False, compare=False, default=None,
  )

  def __post_init__(self) -> None:
    by_key: dict[str, KeywordRecord] = {}
    for rec in self.records:
      if rec.dialect != self.dialect:
        raise ValueError(
          f"Record {rec.text!r} belongs to {rec.dialect.value}, not {self.dialect.value}."
        )
      if rec.key in by_key:
        raise ValueError(
          f"{self.dialect.value}: duplicate keyword {rec.text!r} "
          f"(already present as {by_key[rec.key].text!r})."
        )
      by_key[rec.key] = rec

    object.__setattr__(self, "records", tuple(sorted(self.records, key=lambda r: r.text)))
    object.__setattr__(self, "_by_key", MappingProxyType(by_key))

  @classmethod
  def empty(cls, dialect: DialectId) -> "KeywordSet":
    return cls(dialect=dialect, records=())

  def __len__(self) -> int:
    return len(self.records)

  def __iter__(self) -> Iterator[KeywordRecord]:
    return iter(self.records)

  def __contains__(self, text: object) -> bool:
    return isinstance(text, str) and keyword_key(text) in self._by_key

  def get(self, text: str) -> KeywordRecord | None:
    return self._by_key.get(keyword_key(text))

  def texts(self) -> list[str]:
    return [r.text for r in self.records]

  def reserved(self) -> list[str]:
    return [r.text for r in self.records if r.reserved]

  def non_reserved(self) -> list[str]:
    return [r.text for r in self.records if not r.reserved]


# --------------------------------------------------------------------------------------
# Merged index
# --------------------------------------------------------------------------------------

@dataclass(frozen=True, order=True)
class KeywordObservation:
  dialect: DialectId
  reserved: bool


@dataclass(frozen=True)
class MergedKeywordIndex:
  """
  Union of all dialects: keyword text -> observations per dialect.

  `partitions` keeps the per-dialect sets the index was folded from.
  """
  entries: Mapping[str, frozenset[KeywordObservation]]
  partitions: Mapping[DialectId, KeywordSet]

  def __len__(self) -> int:
    return len(self.entries)

  def __contains__(self, text: object) -> bool:
    return isinstance(text, str) and self._resolve(text) is not None

  def _resolve(self, text: str) -> str | None:
    if text in self.entries:
      return text
    key = keyword_key(text)
    return next((t for t in self.entries if keyword_key(t) == key), None)

  def texts(self) -> list[str]:
    return sorted(self.entries)

  def observations(self, text: str) -> frozenset[KeywordObservation]:
    resolved = self._resolve(text)
    if resolved is None:
      return frozenset()
    return self.entries[resolved]

  def dialects_for(self, text: str) -> frozenset[DialectId]:
    return frozenset(o.dialect for o in self.observations(text))

  def is_reserved_anywhere(self, text: str) -> bool:
    return any(o.reserved for o in self.observations(text))

  def iter_sorted(self) -> Iterable[tuple[str, tuple[KeywordObservation, ...]]]:
    for text in self.texts():
      yield text, tuple(sorted(self.entries[text]))
