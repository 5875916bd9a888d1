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

"""
sqlkw - Per-source extraction strategies.
"""

import pytest

from keywords.dialects import DialectId
from keywords.extractors import (
  GenericKeywordExtractor,
  MysqlKeywordExtractor,
  PostgresKeywordExtractor,
  SqliteKeywordExtractor,
  assert_all_dialects_have_extractors,
  available_extractors,
  get_extractor,
)
from keywords.extractors.postgres import classify_label


def _pairs(extraction):
  return [(k.text, k.reserved) for k in extraction.keywords]


# -------------------------------------------------------------------
# Registry
# -------------------------------------------------------------------
def test_all_dialects_have_extractors_guardrail():
  """
  CI guardrail: new dialects must ship with an extraction strategy.
  """
  assert_all_dialects_have_extractors()
  assert set(available_extractors()) == set(DialectId)


@pytest.mark.parametrize("dialect", list(DialectId))
def test_get_extractor_returns_fresh_instance_for_dialect(dialect):
  a = get_extractor(dialect)
  b = get_extractor(dialect.value)

  assert a is not b
  assert a.dialect is dialect
  assert b.dialect is dialect


def test_get_extractor_uses_given_source_id():
  assert get_extractor("postgres", source_id="pg16").source_id == "pg16"
  assert get_extractor(DialectId.GENERIC).source_id == "sql2016"


def test_get_extractor_unknown_dialect_raises():
  with pytest.raises(ValueError):
    get_extractor("oracle")


# -------------------------------------------------------------------
# Generic (SQL:2016 grammar)
# -------------------------------------------------------------------
def test_generic_extracts_reserved_then_non_reserved(source_text):
  extraction = GenericKeywordExtractor().extract(source_text("sql2016.txt"))

  assert extraction.source_id == "sql2016"
  assert extraction.dialect is DialectId.GENERIC
  assert _pairs(extraction) == [
    ("ABS", True), ("ACOS", True), ("ALL", True), ("ALLOCATE", True),
    ("ALTER", True), ("AND", True), ("ANY", True), ("SELECT", True),
    ("A", False), ("ABSOLUTE", False), ("ACTION", False), ("ADA", False),
    ("ADD", False), ("ADMIN", False),
  ]
  assert extraction.warnings == ()


def test_generic_accepts_html_rendered_grammar():
  html = (
    "<html><body><pre>"
    "&lt;reserved word&gt; ::=\n  ALL | SELECT\n\n"
    "&lt;non-reserved word&gt; ::=\n  ADA\n"
    "</pre></body></html>"
  )
  assert _pairs(GenericKeywordExtractor().extract(html)) == [
    ("ALL", True), ("SELECT", True), ("ADA", False),
  ]


def test_generic_plain_grammar_with_table_nonterminals():
  grammar = (
    "<table name> ::= <local or schema qualified name>\n\n"
    "<reserved word> ::=\n    ABS | SELECT\n\n"
    "<non-reserved word> ::=\n    A | ADA\n"
  )

  assert [k.text for k in GenericKeywordExtractor().extract(grammar).keywords] == [
    "ABS", "SELECT", "A", "ADA",
  ]


def test_generic_without_productions_yields_nothing():
  assert len(GenericKeywordExtractor().extract("no grammar here")) == 0


# -------------------------------------------------------------------
# PostgreSQL
# -------------------------------------------------------------------
@pytest.mark.parametrize(
  "label, expected",
  [
    ("reserved", True),
    ("reserved (can be function or type)", True),
    ("non-reserved", False),
    ("non-reserved (cannot be function or type)", False),
    ("Non-Reserved", False),
    ("", None),
    ("requires AS", None),
  ],
)
def test_postgres_label_classification(label, expected):
  assert classify_label(label) is expected


def test_postgres_uses_postgresql_column_and_skips_untagged_rows(source_text):
  extraction = PostgresKeywordExtractor().extract(source_text("postgresql.html"))

  # A and ABS are SQL-standard-only keywords (blank PostgreSQL cell)
  assert _pairs(extraction) == [
    ("ABORT", False),
    ("ALL", True),
    ("AUTHORIZATION", True),
    ("BETWEEN", False),
    ("COUNT", False),
    ("SELECT", True),
  ]


def test_postgres_headerless_table_classifies_by_adjacent_label(minimal_documents):
  extraction = PostgresKeywordExtractor().extract(minimal_documents["postgresql"])
  assert _pairs(extraction) == [("SELECT", True), ("COUNT", False)]


def test_postgres_ignores_pages_without_keyword_table():
  html = "<table><tr><td>Prev</td></tr></table><p>SELECT reserved</p>"
  assert len(PostgresKeywordExtractor().extract(html)) == 0


# -------------------------------------------------------------------
# MySQL
# -------------------------------------------------------------------
def test_mysql_keeps_current_status_only(source_text):
  extraction = MysqlKeywordExtractor().extract(source_text("mysql.html"))

  assert _pairs(extraction) == [
    ("ACCESSIBLE", True),
    ("ACCOUNT", False),
    ("ADMIN", False),
    ("ARRAY", True),
    ("BUCKETS", False),
    ("SELECT", True),
  ]


def test_mysql_skips_removed_keywords(source_text):
  texts = [k.text for k in MysqlKeywordExtractor().extract(source_text("mysql.html")).keywords]

  assert "ANALYSE" not in texts
  assert "SQL_CACHE" not in texts


def test_mysql_flags_ambiguous_history_instead_of_guessing(source_text):
  extraction = MysqlKeywordExtractor().extract(source_text("mysql.html"))

  flagged = {w.keyword: w.detail for w in extraction.warnings}
  assert set(flagged) == {"EMPTY", "SYSTEM"}
  assert "conflicting" in flagged["EMPTY"]
  assert "added in" in flagged["SYSTEM"] and "became" in flagged["SYSTEM"]
  assert all(w.source_id == "mysql" for w in extraction.warnings)

  texts = [k.text for k in extraction.keywords]
  assert "EMPTY" not in texts
  assert "SYSTEM" not in texts


def test_mysql_warnings_reset_between_runs():
  extractor = MysqlKeywordExtractor()
  html = "<ul><li><code>EMPTY</code> (R); added in 8.0.4 (nonreserved)</li></ul>"

  assert len(extractor.extract(html).warnings) == 1
  assert extractor.extract("<ul><li><code>ACCOUNT</code></li></ul>").warnings == ()


# -------------------------------------------------------------------
# SQLite
# -------------------------------------------------------------------
def test_sqlite_marks_every_entry_reserved(source_text):
  extraction = SqliteKeywordExtractor().extract(source_text("sqlite.html"))

  assert _pairs(extraction) == [
    ("ABORT", True),
    ("ACTION", True),
    ("ADD", True),
    ("AFTER", True),
    ("ALL", True),
    ("SELECT", True),
  ]
