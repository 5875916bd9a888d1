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

from dataclasses import dataclass

from keywords.dialects import DialectId

"""
Error kinds of the keyword pipeline.

Only OutputWriteError is fatal to a run. FetchError and ExtractionError are
recorded per source; the warning/conflict records are accumulated for review.
"""


class SqlKeywordError(Exception):
  """Base class for keyword pipeline errors."""


class FetchError(SqlKeywordError):
  """A source was unreachable, timed out, or returned an unexpected shape."""

  def __init__(self, source_id: str, cause: BaseException | str) -> None:
    self.source_id = source_id
    self.cause = cause
    super().__init__(f"{source_id}: fetch failed ({cause})")


class ExtractionError(SqlKeywordError):
  """A source document matched zero keyword patterns."""

  def __init__(self, source_id: str, message: str) -> None:
    self.source_id = source_id
    self.message = message
    super().__init__(f"{source_id}: {message}")


class OutputWriteError(SqlKeywordError):
  """An output file could not be published."""

  def __init__(self, path: str, cause: BaseException) -> None:
    self.path = path
    self.cause = cause
    super().__init__(f"Failed to write {path}: {cause}")


@dataclass(frozen=True)
class ExtractionWarning:
  """An entry the extractor refused to classify (e.g. contradicting annotations)."""
  source_id: str
  keyword: str
  detail: str


@dataclass(frozen=True)
class NormalizationWarning:
  """A malformed token dropped by the normalizer."""
  source_id: str
  raw_text: str
  reason: str


@dataclass(frozen=True)
class ClassificationConflict:
  """Rows of one dialect disagreed on reserved status; reserved won."""
  dialect: DialectId
  text: str
  reserved_count: int
  non_reserved_count: int
