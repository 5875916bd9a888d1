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

import re
from dataclasses import dataclass
from html.parser import HTMLParser

"""
Dependency-free HTML helpers used by the extractors.

Vendor pages are parsed with html.parser only. The list item collector keeps
track of the nearest heading so extractors can tell page sections apart.
"""

_HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}


def normalize_whitespace(s: str) -> str:
  return re.sub(r"\s+", " ", (s or "").strip())


def normalize_header_token(s: str) -> str:
  """
  Normalize header cell text for robust matching.
  Examples:
    "Key Word"   -> "keyword"
    "Key-word"   -> "keyword"
    "SQL:2016"   -> "sql2016"
  """
  s2 = (s or "").strip().lower()
  s2 = re.sub(r"[^a-z0-9]+", "", s2)
  return s2


def looks_like_html(text: str) -> bool:
  return bool(re.search(r"<(html|body|table|div|p|pre|ul|li)\b", text or "", re.IGNORECASE))


class TextCollector(HTMLParser):
  """Collect visible text from an HTML document (entities are unescaped)."""
  def __init__(self) -> None:
    super().__init__()
    self._chunks: list[str] = []
    self._skip_depth = 0

  def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
    if tag.lower() in {"script", "style"}:
      self._skip_depth += 1

  def handle_endtag(self, tag: str) -> None:
    if tag.lower() in {"script", "style"} and self._skip_depth:
      self._skip_depth -= 1

  def handle_data(self, data: str) -> None:
    if data and not self._skip_depth:
      self._chunks.append(data)

  def text(self) -> str:
    return "".join(self._chunks)


def html_to_text(html: str) -> str:
  p = TextCollector()
  p.feed(html)
  p.close()
  return p.text()


# --------------------------------------------------------------------------------------
# Tables
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class HtmlTable:
  rows: tuple[tuple[str, ...], ...]


class HtmlTableCollector(HTMLParser):
  """
  Collect the cell text of every <table>, row by row.

  Header and data cells are treated alike; rows without cells are dropped.
  A None buffer means "not inside one".
  """
  def __init__(self) -> None:
    super().__init__()
    self.tables: list[HtmlTable] = []
    self._rows: list[tuple[str, ...]] | None = None
    self._cells: list[str] | None = None
    self._text: list[str] | None = None

  def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
    t = tag.lower()
    if t == "table":
      self._rows = []
    elif t == "tr" and self._rows is not None:
      self._cells = []
    elif t in {"td", "th"} and self._cells is not None:
      self._text = []

  def handle_endtag(self, tag: str) -> None:
    t = tag.lower()
    if t in {"td", "th"} and self._text is not None and self._cells is not None:
      self._cells.append(normalize_whitespace("".join(self._text)))
      self._text = None
    elif t == "tr" and self._cells is not None and self._rows is not None:
      if self._cells:
        self._rows.append(tuple(self._cells))
      self._cells = None
    elif t == "table" and self._rows is not None:
      if self._rows:
        self.tables.append(HtmlTable(rows=tuple(self._rows)))
      self._rows = None

  def handle_data(self, data: str) -> None:
    if self._text is not None:
      self._text.append(data)


def collect_tables(html: str) -> list[HtmlTable]:
  p = HtmlTableCollector()
  p.feed(html)
  p.close()
  return p.tables


# --------------------------------------------------------------------------------------
# List items
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class HtmlListItem:
  heading: str | None
  text: str
  code: str | None
  is_leaf: bool


class _OpenItem:
  def __init__(self, order: int, heading: str | None) -> None:
    self.order = order
    self.heading = heading
    self.chunks: list[str] = []
    self.code_chunks: list[str] = []
    self.code_done = False
    self.in_code = False
    self.is_leaf = True
    self.list_depth = 0


class HtmlListItemCollector(HTMLParser):
  """
  Collect <li> items.

  For each item we keep its full text, the text of its first <code> element
  and whether it contained any nested markup (a "leaf" item holds bare text).
  Omitted </li> end tags are tolerated.
  """
  def __init__(self) -> None:
    super().__init__()
    self._in_heading = False
    self._heading_buf: list[str] = []
    self.current_heading: str | None = None

    self._stack: list[_OpenItem] = []
    self._opened = 0
    self._finished: list[tuple[int, HtmlListItem]] = []

  @property
  def items(self) -> list[HtmlListItem]:
    # Nested items finish before their parents; report them in document order.
    return [item for _, item in sorted(self._finished, key=lambda x: x[0])]

  def _finish_top(self) -> None:
    item = self._stack.pop()
    code = normalize_whitespace("".join(item.code_chunks)) if item.code_done else None
    self._finished.append((item.order, HtmlListItem(
      heading=item.heading,
      text=normalize_whitespace("".join(item.chunks)),
      code=code,
      is_leaf=item.is_leaf,
    )))

  def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
    t = tag.lower()

    if t in _HEADING_TAGS:
      self._in_heading = True
      self._heading_buf = []
      return

    if t == "li":
      if self._stack and self._stack[-1].list_depth == 0:
        self._finish_top()
      self._stack.append(_OpenItem(self._opened, self.current_heading))
      self._opened += 1
      return

    if not self._stack:
      return

    item = self._stack[-1]
    item.is_leaf = False
    if t in {"ul", "ol"}:
      item.list_depth += 1
    elif t == "code" and not item.code_done:
      item.in_code = True

  def handle_endtag(self, tag: str) -> None:
    t = tag.lower()

    if t in _HEADING_TAGS and self._in_heading:
      self._in_heading = False
      text = normalize_whitespace("".join(self._heading_buf))
      if text:
        self.current_heading = text
      return

    if not self._stack:
      return

    if t == "li":
      self._finish_top()
      return

    if t in {"ul", "ol"}:
      while self._stack and self._stack[-1].list_depth == 0:
        self._finish_top()
      if self._stack:
        self._stack[-1].list_depth -= 1
      return

    item = self._stack[-1]
    if t == "code" and item.in_code:
      item.in_code = False
      item.code_done = True

  def handle_data(self, data: str) -> None:
    if not data:
      return
    if self._in_heading:
      self._heading_buf.append(data)
    for item in self._stack:
      item.chunks.append(data)
    if self._stack and self._stack[-1].in_code:
      self._stack[-1].code_chunks.append(data)

  def close(self) -> None:
    super().close()
    while self._stack:
      self._finish_top()


def collect_list_items(html: str) -> list[HtmlListItem]:
  p = HtmlListItemCollector()
  p.feed(html)
  p.close()
  return p.items
