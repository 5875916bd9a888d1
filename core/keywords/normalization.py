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

import html
import logging
import re
from dataclasses import dataclass

from keywords.errors import NormalizationWarning
from keywords.types import Extraction, NormalizedKeyword, keyword_key

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")
_WORD_RE = re.compile(r"^[A-Za-z0-9_]+$")

# Residue left around a token by naive pattern extraction.
_RESIDUE_CHARS = " \t\r\n\u00a0\"'`.,;:()[]{}*"


@dataclass(frozen=True)
class NormalizationResult:
  keywords: tuple[NormalizedKeyword, ...]
  warnings: tuple[NormalizationWarning, ...]


def clean_token(raw: str) -> str:
  """
  Strip markup residue from an extracted token.

  Removes tags, decodes entities, then trims whitespace, quotes and stray
  punctuation from both ends. The inner text is left untouched.
  """
  s = _TAG_RE.sub("", raw or "")
  s = html.unescape(s)
  return s.strip(_RESIDUE_CHARS)


def is_word_token(token: str) -> bool:
  return bool(_WORD_RE.match(token or ""))


def normalize_extraction(extraction: Extraction) -> NormalizationResult:
  """
  Clean every extracted keyword and drop malformed ones.

  A dropped token is never fatal; it is logged and returned as a
  NormalizationWarning so layout drift in a source page stays visible.
  """
  out: list[NormalizedKeyword] = []
  warnings: list[NormalizationWarning] = []

  for kw in extraction.keywords:
    text = clean_token(kw.text)

    reason = None
    if not text:
      reason = "empty token"
    elif not is_word_token(text):
      reason = "not composed of word characters"

    if reason is not None:
      warning = NormalizationWarning(source_id=extraction.source_id, raw_text=kw.text, reason=reason)
      warnings.append(warning)
      logger.warning("%s: dropped token %r (%s)", extraction.source_id, kw.text, reason)
      continue

    out.append(NormalizedKeyword(text=text, key=keyword_key(text), reserved=kw.reserved))

  return NormalizationResult(keywords=tuple(out), warnings=tuple(warnings))
