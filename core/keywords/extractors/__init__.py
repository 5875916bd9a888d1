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

from typing import Type

from keywords.dialects import DialectId
from keywords.extractors.base import KeywordExtractor
from keywords.extractors.generic import GenericKeywordExtractor
from keywords.extractors.mysql import MysqlKeywordExtractor
from keywords.extractors.postgres import PostgresKeywordExtractor
from keywords.extractors.sqlite import SqliteKeywordExtractor

"""
Per-source extraction strategies.

Adding a dialect means adding one KeywordExtractor subclass and registering it here.
"""

_EXTRACTOR_REGISTRY: dict[DialectId, Type[KeywordExtractor]] = {
  DialectId.GENERIC: GenericKeywordExtractor,
  DialectId.POSTGRESQL: PostgresKeywordExtractor,
  DialectId.MYSQL: MysqlKeywordExtractor,
  DialectId.SQLITE: SqliteKeywordExtractor,
}


def available_extractors() -> list[DialectId]:
  return list(_EXTRACTOR_REGISTRY)


def get_extractor(dialect: DialectId | str, source_id: str | None = None) -> KeywordExtractor:
  """
  Return a fresh extractor instance for `dialect`.

  Raises:
      ValueError: if no extractor is registered for the dialect.
  """
  d = dialect if isinstance(dialect, DialectId) else DialectId.parse(dialect)
  try:
    extractor_cls = _EXTRACTOR_REGISTRY[d]
  except KeyError as exc:
    available = ", ".join(sorted(x.value for x in _EXTRACTOR_REGISTRY))
    raise ValueError(
      f"No extractor registered for dialect {d.value!r}. Available: {available}."
    ) from exc
  return extractor_cls(source_id=source_id)


def assert_all_dialects_have_extractors() -> None:
  """Guardrail: every DialectId must ship an extraction strategy."""
  missing = [d.value for d in DialectId if d not in _EXTRACTOR_REGISTRY]
  if missing:
    raise AssertionError(f"Dialects without extractor: {', '.join(missing)}")


__all__ = [
  "KeywordExtractor",
  "GenericKeywordExtractor",
  "PostgresKeywordExtractor",
  "MysqlKeywordExtractor",
  "SqliteKeywordExtractor",
  "available_extractors",
  "get_extractor",
  "assert_all_dialects_have_extractors",
]
