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
from typing import Iterable

from keywords.dialects import DialectId
from keywords.extractors.base import KeywordExtractor
from keywords.html import html_to_text, looks_like_html
from keywords.types import ExtractedKeyword

"""
SQL:2016 keywords from the foundation grammar.

The grammar lists both classes as BNF productions:

  <reserved word> ::=
      ABS | ACOS | ALL | ...
  <non-reserved word> ::=
      A | ABSOLUTE | ACTION | ...

Both the plain-text grammar and its HTML rendering are accepted.
"""

logger = logging.getLogger(__name__)

# Body runs until the next production ("<...>") or the first blank line.
_PRODUCTION_RE = r"(?<![\w-]){name}\s*::=(?P<body>[^<]*)"
_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")


def _production_body(text: str, name: str) -> str | None:
  m = re.search(_PRODUCTION_RE.format(name=re.escape(name)), text)
  if not m:
    return None
  body = m.group("body").lstrip("\r\n")
  return _BLANK_LINE_RE.split(body, maxsplit=1)[0]


_PRODUCTIONS = (("<reserved word>", True), ("<non-reserved word>", False))


def _keyword_bodies(text: str) -> dict[str, str]:
  bodies = {}
  for name, _reserved in _PRODUCTIONS:
    body = _production_body(text, name)
    if body is not None:
      bodies[name] = body
  return bodies


def _split_alternatives(body: str) -> list[str]:
  return [t for t in re.split(r"[\s|]+", body) if t]


class GenericKeywordExtractor(KeywordExtractor):
  DIALECT = DialectId.GENERIC

  def _extract(self, raw_text: str) -> Iterable[ExtractedKeyword]:
    # The plain grammar is full of "<table name>"-style nonterminals, so only
    # fall back to the rendered text when the raw document has no production.
    bodies = _keyword_bodies(raw_text)
    if not bodies and looks_like_html(raw_text):
      bodies = _keyword_bodies(html_to_text(raw_text))

    for name, reserved in _PRODUCTIONS:
      body = bodies.get(name)
      if body is None:
        logger.debug("%s: production %s not found", self.source_id, name)
        continue
      for token in _split_alternatives(body):
        yield ExtractedKeyword(text=token, reserved=reserved)
