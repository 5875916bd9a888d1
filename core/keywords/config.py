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

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from django.conf import settings

from keywords.dialects import DEFAULT_SOURCES, DialectId, SourceSpec

"""
Pipeline configuration.

Values come from Django settings (which read SQLKW_* environment variables)
and may be refined by an optional sqlkw_sources.yaml:

  fetch_timeout: 20
  sources:
    postgresql:
      url: https://www.postgresql.org/docs/16/sql-keywords-appendix.html
  min_counts:
    mysql: 500
"""

# Fewer keywords than this from a source usually means the page layout changed.
DEFAULT_MIN_COUNTS: dict[DialectId, int] = {
  DialectId.GENERIC: 300,
  DialectId.POSTGRESQL: 400,
  DialectId.MYSQL: 500,
  DialectId.SQLITE: 100,
}


@dataclass(frozen=True)
class PipelineConfig:
  out_root: Path
  fetch_timeout: float
  fetch_workers: int
  user_agent: str
  sources: Dict[DialectId, SourceSpec]
  min_counts: Dict[DialectId, int] = field(default_factory=dict)
  dialects: tuple[DialectId, ...] = tuple(DialectId)

  def source_for(self, dialect: DialectId) -> SourceSpec:
    return self.sources[dialect]

  def urls_by_source_id(self) -> dict[str, str]:
    return {s.source_id: s.url for s in self.sources.values()}


def _find_sources_path(explicit_path: str | None = None) -> Path | None:
  """
  Locate sqlkw_sources.yaml:

  1. explicit_path argument (must exist)
  2. Django settings.SQLKW_SOURCES_PATH (if set and exists)
  3. config/sqlkw_sources.yaml relative to the repository and to the CWD

  Returns None when no file is found (defaults apply).

  Raises:
      FileNotFoundError: if an explicit path was given but does not exist.
  """
  if explicit_path:
    p = Path(explicit_path)
    if not p.exists():
      raise FileNotFoundError(f"Sources config not found: {explicit_path}")
    return p

  candidates: list[Path] = []
  cfg_path = getattr(settings, "SQLKW_SOURCES_PATH", None)
  if cfg_path:
    candidates.append(Path(cfg_path))

  here = Path(__file__).resolve()
  candidates += [
    here.parents[2] / "config" / "sqlkw_sources.yaml",
    Path.cwd() / "config" / "sqlkw_sources.yaml",
  ]

  for c in candidates:
    if c.exists():
      return c
  return None


def _load_yaml(path: Path | None) -> dict[str, Any]:
  if path is None:
    return {}
  with open(path, "r", encoding="utf-8") as f:
    data = yaml.safe_load(f) or {}
  if not isinstance(data, dict):
    raise ValueError(f"{path}: expected a mapping at top level.")
  return data


def _merge_sources(overrides: dict[str, Any]) -> dict[DialectId, SourceSpec]:
  sources = dict(DEFAULT_SOURCES)
  for name, spec in (overrides or {}).items():
    dialect = DialectId.parse(name)
    base = sources[dialect]
    spec = spec or {}
    if isinstance(spec, str):
      spec = {"url": spec}
    sources[dialect] = SourceSpec(
      source_id=str(spec.get("source_id") or base.source_id),
      dialect=dialect,
      url=str(spec.get("url") or base.url),
    )
  return sources


def _merge_min_counts(overrides: dict[str, Any]) -> dict[DialectId, int]:
  counts = dict(DEFAULT_MIN_COUNTS)
  for name, value in (overrides or {}).items():
    counts[DialectId.parse(name)] = int(value)
  return counts


def resolve_dialects(requested: list[str] | None) -> tuple[DialectId, ...]:
  """Requested names -> DialectIds in declaration order; empty or 'all' means all dialects."""
  names = [r.strip() for r in (requested or []) if (r or "").strip()]
  if not names or any(n.lower() == "all" for n in names):
    return tuple(DialectId)
  wanted = {DialectId.parse(n) for n in names}
  return tuple(d for d in DialectId if d in wanted)


def load_config(
  *,
  sources_path: Optional[str] = None,
  out_root: Optional[str] = None,
  fetch_timeout: Optional[float] = None,
  dialects: Optional[list[str]] = None,
) -> PipelineConfig:
  """
  Build the effective configuration.

  Precedence: explicit arguments (CLI flags) > sqlkw_sources.yaml > Django settings.
  """
  data = _load_yaml(_find_sources_path(sources_path))

  timeout = fetch_timeout
  if timeout is None:
    timeout = float(data.get("fetch_timeout") or getattr(settings, "SQLKW_FETCH_TIMEOUT", 30.0))

  return PipelineConfig(
    out_root=Path(out_root or data.get("output_dir") or settings.SQLKW_OUTPUT_DIR).resolve(),
    fetch_timeout=timeout,
    fetch_workers=int(getattr(settings, "SQLKW_FETCH_WORKERS", 4) or 4),
    user_agent=str(getattr(settings, "SQLKW_USER_AGENT", "") or "sqlkw-keyword-generator/1.0"),
    sources=_merge_sources(data.get("sources") or {}),
    min_counts=_merge_min_counts(data.get("min_counts") or {}),
    dialects=resolve_dialects(dialects or getattr(settings, "SQLKW_DIALECTS", None)),
  )
