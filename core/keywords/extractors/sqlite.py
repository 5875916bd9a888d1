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

from typing import Iterable

from keywords.dialects import DialectId
from keywords.extractors.base import KeywordExtractor
from keywords.html import collect_list_items
from keywords.types import ExtractedKeyword


class SqliteKeywordExtractor(KeywordExtractor):
  """
  SQLite publishes one flat list (<li>ABORT</li>, ...) without a
  reserved / non-reserved distinction, so every entry counts as reserved.

  Only leaf items are considered: navigation and prose lists on the page
  always wrap their text in links or other markup.
  """

  DIALECT = DialectId.SQLITE

  def _extract(self, raw_text: str) -> Iterable[ExtractedKeyword]:
    for item in collect_list_items(raw_text):
      if not item.is_leaf or not item.text:
        continue
      yield ExtractedKeyword(text=item.text, reserved=True)
