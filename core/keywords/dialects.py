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
from enum import Enum

"""
Dialect identifiers and the documentation sources they are scraped from.

The set of dialects is closed: Generic (SQL:2016), PostgreSQL, MySQL, SQLite.
"""


class DialectId(str, Enum):
  GENERIC = "generic"
  POSTGRESQL = "postgresql"
  MYSQL = "mysql"
  SQLITE = "sqlite"

  @classmethod
  def parse(cls, name: str) -> "DialectId":
    """
    Resolve a dialect from its name (case-insensitive).

    Accepts the short aliases used on the command line ("postgres", "sql2016").
    Raises ValueError for anything outside the closed set.
    """
    key = (name or "").strip().lower()
    key = _DIALECT_ALIASES.get(key, key)
    try:
      return cls(key)
    except ValueError as exc:
      available = ", ".join(d.value for d in cls)
      raise ValueError(
        f"Unknown dialect: {name!r}. Available dialects: {available}."
      ) from exc


_DIALECT_ALIASES: dict[str, str] = {
  "ansi": "generic",
  "sql2016": "generic",
  "postgres": "postgresql",
  "pg": "postgresql",
}


@dataclass(frozen=True)
class SourceSpec:
  """One documentation source: the fetcher resolves `source_id`, the pipeline keys by `dialect`."""
  source_id: str
  dialect: DialectId
  url: str


DEFAULT_SOURCES: dict[DialectId, SourceSpec] = {
  DialectId.GENERIC: SourceSpec(
    source_id="sql2016",
    dialect=DialectId.GENERIC,
    url=(
      "https://raw.githubusercontent.com/JakeWheat/sql-overview/master/"
      "sql-2016-foundation-grammar.txt"
    ),
  ),
  DialectId.POSTGRESQL: SourceSpec(
    source_id="postgresql",
    dialect=DialectId.POSTGRESQL,
    url="https://www.postgresql.org/docs/13/sql-keywords-appendix.html",
  ),
  DialectId.MYSQL: SourceSpec(
    source_id="mysql",
    dialect=DialectId.MYSQL,
    url="https://dev.mysql.com/doc/refman/8.0/en/keywords.html",
  ),
  DialectId.SQLITE: SourceSpec(
    source_id="sqlite",
    dialect=DialectId.SQLITE,
    url="https://www.sqlite.org/lang_keywords.html",
  ),
}


def all_dialects() -> list[DialectId]:
  """All dialects in declaration order."""
  return list(DialectId)
