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

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

from keywords.classification import classify_keywords
from keywords.config import PipelineConfig
from keywords.dialects import DialectId, all_dialects
from keywords.errors import (
  ClassificationConflict,
  ExtractionError,
  ExtractionWarning,
  NormalizationWarning,
)
from keywords.extractors import get_extractor
from keywords.fetching import FetchOutcome, KeywordSourceFetcher, fetch_sources
from keywords.merge import merge_keyword_sets
from keywords.normalization import normalize_extraction
from keywords.types import KeywordSet, MergedKeywordIndex
from keywords.writer import merged_keyword_texts, write_outputs

"""
Pipeline orchestration.

  fetch (concurrent, barrier) -> extract -> normalize -> classify -> merge -> write

Every source is processed on its own. A source that cannot be fetched,
yields nothing, or trips its extractor is recorded in the run report and
left out of the merge; the other dialects are still written. Only a failed
write aborts the run.
"""

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_EMPTY = "empty"
STATUS_FETCH_FAILED = "fetch_failed"
STATUS_EXTRACTION_FAILED = "extraction_failed"


# --------------------------------------------------------------------------------------
# Run report
# --------------------------------------------------------------------------------------

@dataclass
class DialectReport:
  dialect: DialectId
  source_id: str
  status: str = STATUS_OK
  keywords: int = 0
  reserved: int = 0
  non_reserved: int = 0
  observations: int = 0
  fetch_ms: int = 0
  error: str | None = None
  conflicts: list[ClassificationConflict] = field(default_factory=list)
  extraction_warnings: list[ExtractionWarning] = field(default_factory=list)
  normalization_warnings: list[NormalizationWarning] = field(default_factory=list)
  sanity_warnings: list[str] = field(default_factory=list)

  @property
  def ok(self) -> bool:
    return self.status == STATUS_OK

  @property
  def warning_count(self) -> int:
    return (
      len(self.extraction_warnings)
      + len(self.normalization_warnings)
      + len(self.sanity_warnings)
    )

  def to_dict(self) -> dict[str, Any]:
    data = asdict(self)
    data["dialect"] = self.dialect.value
    for c in data["conflicts"]:
      c["dialect"] = c["dialect"].value
    return data


@dataclass
class RunReport:
  started_at: str
  finished_at: str | None = None
  dialects: list[DialectReport] = field(default_factory=list)
  merged_keywords: int = 0
  merged: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
  written: list[str] = field(default_factory=list)

  def get(self, dialect: DialectId) -> DialectReport | None:
    return next((d for d in self.dialects if d.dialect == dialect), None)

  @property
  def failed(self) -> list[DialectReport]:
    return [d for d in self.dialects if not d.ok]

  @property
  def ok(self) -> bool:
    return not self.failed

  def to_dict(self) -> dict[str, Any]:
    return {
      "started_at": self.started_at,
      "finished_at": self.finished_at,
      "merged_keywords": self.merged_keywords,
      "written": list(self.written),
      "dialects": [d.to_dict() for d in self.dialects],
      "merged": {text: [dict(o) for o in obs] for text, obs in self.merged.items()},
    }

  def to_json(self) -> str:
    return json.dumps(self.to_dict(), indent=2, sort_keys=False) + "\n"


def _now_iso() -> str:
  return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


# --------------------------------------------------------------------------------------
# Per-dialect processing
# --------------------------------------------------------------------------------------

def process_document(
  dialect: DialectId,
  raw_text: str,
  *,
  source_id: str | None = None,
  min_count: int = 0,
) -> tuple[KeywordSet | None, DialectReport]:
  """
  Extract, normalize and classify one fetched document.

  Returns (keyword_set, report). keyword_set is None when the document
  produced no usable keywords; report.status says why.
  """
  extractor = get_extractor(dialect, source_id=source_id)
  report = DialectReport(dialect=dialect, source_id=extractor.source_id)

  try:
    extraction = extractor.extract(raw_text)
  except Exception as exc:
    report.status = STATUS_EXTRACTION_FAILED
    report.error = f"{type(exc).__name__}: {exc}"
    logger.error("%s: extraction failed", extractor.source_id, exc_info=exc)
    return None, report

  report.extraction_warnings = list(extraction.warnings)
  for w in extraction.warnings:
    logger.warning("%s: skipped %s (%s)", w.source_id, w.keyword, w.detail)

  normalized = normalize_extraction(extraction)
  report.normalization_warnings = list(normalized.warnings)

  if not normalized.keywords:
    err = ExtractionError(
      extractor.source_id,
      "document matched no keyword patterns" if not extraction.keywords
      else "no extracted token survived normalization",
    )
    report.status = STATUS_EMPTY
    report.error = str(err)
    logger.warning("%s", err)
    return None, report

  classified = classify_keywords(dialect, normalized.keywords)
  keyword_set = classified.keyword_set

  report.keywords = len(keyword_set)
  report.reserved = len(keyword_set.reserved())
  report.non_reserved = len(keyword_set.non_reserved())
  report.observations = classified.observations
  report.conflicts = list(classified.conflicts)

  if min_count and len(keyword_set) < min_count:
    msg = (
      f"only {len(keyword_set)} keywords extracted (expected at least {min_count}); "
      "the source layout may have changed"
    )
    report.sanity_warnings.append(msg)
    logger.warning("%s: %s", extractor.source_id, msg)

  return keyword_set, report


def _fetch_failed_report(dialect: DialectId, outcome: FetchOutcome) -> DialectReport:
  return DialectReport(
    dialect=dialect,
    source_id=outcome.source_id,
    status=STATUS_FETCH_FAILED,
    fetch_ms=outcome.elapsed_ms,
    error=str(outcome.error),
  )


def _attribution(index: MergedKeywordIndex) -> dict[str, list[dict[str, Any]]]:
  """Keyword text -> [{dialect, reserved}, ...] sorted by dialect name."""
  return {
    text: [{"dialect": o.dialect.value, "reserved": o.reserved} for o in observations]
    for text, observations in index.iter_sorted()
  }


# --------------------------------------------------------------------------------------
# Entry points
# --------------------------------------------------------------------------------------

def build_index(
  fetcher: KeywordSourceFetcher,
  config: PipelineConfig,
) -> tuple[MergedKeywordIndex, RunReport]:
  """Fetch, extract, classify and merge without touching the output directory."""
  report = RunReport(started_at=_now_iso())
  specs = [config.source_for(d) for d in config.dialects]

  outcomes = fetch_sources(
    fetcher,
    [s.source_id for s in specs],
    timeout=config.fetch_timeout,
    max_workers=config.fetch_workers,
  )

  # Barrier passed: everything below is a single-threaded reduction in dialect order.
  keyword_sets: list[KeywordSet] = []
  for spec in specs:
    outcome = outcomes[spec.source_id]
    if not outcome.ok:
      report.dialects.append(_fetch_failed_report(spec.dialect, outcome))
      continue

    keyword_set, dialect_report = process_document(
      spec.dialect,
      outcome.text or "",
      source_id=spec.source_id,
      min_count=config.min_counts.get(spec.dialect, 0),
    )
    dialect_report.fetch_ms = outcome.elapsed_ms
    report.dialects.append(dialect_report)
    if keyword_set is not None:
      keyword_sets.append(keyword_set)

  index = merge_keyword_sets(keyword_sets)
  report.merged_keywords = len(index)
  report.merged = _attribution(index)
  return index, report


def run_pipeline(fetcher: KeywordSourceFetcher, config: PipelineConfig) -> RunReport:
  """
  One full run: build the index and publish the keyword files.

  Files of dialects that failed in this run are removed so the output
  directory never mixes two runs. On a filtered run the dialects left out
  keep their files and total.txt still covers them. Raises OutputWriteError
  if a file cannot be written.
  """
  index, report = build_index(fetcher, config)

  carried = [d for d in all_dialects() if d not in config.dialects]
  total = merged_keyword_texts(config.out_root, index, carried_dialects=carried)
  written = write_outputs(
    config.out_root,
    index,
    stale_dialects=[d.dialect for d in report.failed],
    merged_texts=total,
  )
  report.merged_keywords = len(total)
  report.written = [str(p) for p in written]
  report.finished_at = _now_iso()

  if report.failed:
    logger.warning(
      "Keyword run finished with failed sources: %s",
      ", ".join(f"{d.source_id} ({d.status})" for d in report.failed),
    )
  else:
    logger.info("Keyword run finished: %d merged keywords", report.merged_keywords)
  return report
