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
import time
import urllib.error
import urllib.request
from collections import deque
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Protocol

from keywords.errors import FetchError

"""
Source fetching.

The pipeline only depends on the KeywordSourceFetcher capability, so tests
and offline runs can inject documents instead of touching the network.
All sources are fetched concurrently; fetch_sources returns once every fetch
has finished or overrun its own timeout (the barrier before extraction).
"""

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "sqlkw-keyword-generator/1.0"


class KeywordSourceFetcher(Protocol):
  def fetch(self, source_id: str) -> str:
    """Return the raw document text of `source_id` or raise FetchError."""
    ...


class HttpSourceFetcher:
  """Fetch documentation pages over HTTP(S)."""

  def __init__(
    self,
    urls: Mapping[str, str],
    *,
    timeout: float = 30.0,
    user_agent: str = DEFAULT_USER_AGENT,
  ) -> None:
    self.urls = dict(urls)
    self.timeout = timeout
    self.user_agent = user_agent

  def fetch(self, source_id: str) -> str:
    url = self.urls.get(source_id)
    if not url:
      raise FetchError(source_id, "no URL configured")

    req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
    try:
      with urllib.request.urlopen(req, timeout=self.timeout) as resp:
        raw = resp.read()
        charset = resp.headers.get_content_charset() or "utf-8"
    except (urllib.error.URLError, OSError, ValueError) as exc:
      raise FetchError(source_id, exc) from exc

    text = raw.decode(charset, errors="replace")
    if not text.strip():
      raise FetchError(source_id, f"empty response body from {url}")
    return text


class FixtureSourceFetcher:
  """
  Serve documents from memory or from a directory of saved pages.

  Directory lookup tries <source_id>.html, <source_id>.htm and <source_id>.txt.
  """

  SUFFIXES = (".html", ".htm", ".txt")

  def __init__(
    self,
    documents: Mapping[str, str] | None = None,
    directory: Path | str | None = None,
  ) -> None:
    self.documents = dict(documents or {})
    self.directory = Path(directory) if directory else None

  def fetch(self, source_id: str) -> str:
    if source_id in self.documents:
      return self.documents[source_id]

    if self.directory is not None:
      for suffix in self.SUFFIXES:
        path = self.directory / f"{source_id}{suffix}"
        if path.is_file():
          try:
            return path.read_text(encoding="utf-8")
          except (OSError, UnicodeDecodeError) as exc:
            raise FetchError(source_id, exc) from exc

    raise FetchError(source_id, "no fixture document available")


# --------------------------------------------------------------------------------------
# Concurrent fetch with per-source deadlines
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class FetchOutcome:
  source_id: str
  text: str | None = None
  error: FetchError | None = None
  elapsed_ms: int = 0

  @property
  def ok(self) -> bool:
    return self.error is None


def _timed_fetch(fetcher: KeywordSourceFetcher, source_id: str) -> tuple[str, int]:
  t0 = time.perf_counter()
  text = fetcher.fetch(source_id)
  if not isinstance(text, str):
    raise FetchError(source_id, f"unexpected document type {type(text).__name__}")
  return text, int((time.perf_counter() - t0) * 1000)


def fetch_sources(
  fetcher: KeywordSourceFetcher,
  source_ids: Iterable[str],
  *,
  timeout: float | None = None,
  max_workers: int | None = None,
) -> dict[str, FetchOutcome]:
  """
  Fetch all sources concurrently and return one outcome per source.

  - At most `max_workers` fetches are in flight; the rest wait their turn.
  - `timeout` bounds each fetch from the moment it starts. A fetch that
    overruns is recorded as a FetchError for that source only and stops
    counting against `max_workers`; sibling fetches are not cancelled.
  - Failures never propagate: every source gets an outcome (input order).
  """
  ids = list(dict.fromkeys(source_ids))
  if not ids:
    return {}

  workers = max(1, min(max_workers or len(ids), len(ids)))
  limit = timeout if timeout and timeout > 0 else None

  # One thread per source, so a fetch never queues behind an overrunning one.
  executor = ThreadPoolExecutor(max_workers=len(ids), thread_name_prefix="sqlkw-fetch")
  queue = deque(ids)
  running: dict[Future, tuple[str, float]] = {}
  finished: dict[str, Future] = {}
  timed_out: set[str] = set()
  try:
    while queue or running:
      while queue and len(running) < workers:
        sid = queue.popleft()
        running[executor.submit(_timed_fetch, fetcher, sid)] = (sid, time.monotonic())

      wait_for = None
      if limit is not None:
        next_deadline = min(t0 for _sid, t0 in running.values()) + limit
        wait_for = max(0.0, next_deadline - time.monotonic())
      wait(running, timeout=wait_for, return_when=FIRST_COMPLETED)

      now = time.monotonic()
      for future, (sid, t0) in list(running.items()):
        if future.done():
          finished[sid] = future
        elif limit is not None and now - t0 >= limit:
          timed_out.add(sid)
        else:
          continue
        del running[future]
  finally:
    # Overrunning fetches are not joined here. The interpreter still joins
    # worker threads at exit, so a stuck request delays process exit until
    # its own socket timeout.
    executor.shutdown(wait=False)

  outcomes: dict[str, FetchOutcome] = {}
  for sid in ids:
    if sid in timed_out:
      err = FetchError(sid, f"timed out after {timeout:g}s")
      logger.error("Fetch of %s timed out after %ss", sid, timeout)
      outcomes[sid] = FetchOutcome(source_id=sid, error=err)
      continue

    try:
      text, elapsed_ms = finished[sid].result()
    except FetchError as exc:
      logger.error("Fetch of %s failed: %s", sid, exc.cause)
      outcomes[sid] = FetchOutcome(source_id=sid, error=exc)
      continue
    except Exception as exc:
      logger.error("Fetch of %s failed unexpectedly", sid, exc_info=exc)
      outcomes[sid] = FetchOutcome(source_id=sid, error=FetchError(sid, exc))
      continue

    logger.info("Fetched %s (%d chars, %d ms)", sid, len(text), elapsed_ms)
    outcomes[sid] = FetchOutcome(source_id=sid, text=text, elapsed_ms=elapsed_ms)

  return outcomes
