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

from abc import ABC, abstractmethod
from typing import Iterable

from keywords.dialects import DEFAULT_SOURCES, DialectId
from keywords.errors import ExtractionWarning
from keywords.types import ExtractedKeyword, Extraction


class KeywordExtractor(ABC):
  """
  Base class for per-source keyword extraction strategies.

  Each vendor page encodes reserved / non-reserved status differently, so
  every source gets its own subclass. Subclasses implement `_extract` and
  return (text, reserved) pairs in source order; `extract` wraps them into an
  Extraction together with any warnings the strategy raised.
  """

  DIALECT: DialectId

  def __init__(self, source_id: str | None = None) -> None:
    self.source_id = source_id or DEFAULT_SOURCES[self.DIALECT].source_id
    self._warnings: list[ExtractionWarning] = []

  @property
  def dialect(self) -> DialectId:
    return self.DIALECT

  def extract(self, raw_text: str) -> Extraction:
    self._warnings = []
    keywords = tuple(self._extract(raw_text or ""))
    return Extraction(
      source_id=self.source_id,
      dialect=self.DIALECT,
      keywords=keywords,
      warnings=tuple(self._warnings),
    )

  def warn(self, keyword: str, detail: str) -> None:
    self._warnings.append(ExtractionWarning(source_id=self.source_id, keyword=keyword, detail=detail))

  @abstractmethod
  def _extract(self, raw_text: str) -> Iterable[ExtractedKeyword]:
    raise NotImplementedError
