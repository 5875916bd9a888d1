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

from dataclasses import replace
from pathlib import Path

import pytest

from keywords.config import PipelineConfig
from keywords.dialects import DEFAULT_SOURCES, DialectId
from keywords.fetching import FixtureSourceFetcher


FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures" / "sources"


# -------------------------------------------------------------------
# Source documents
# -------------------------------------------------------------------
@pytest.fixture
def sources_dir() -> Path:
  """Folder with one saved page per default source id."""
  return FIXTURES_DIR


@pytest.fixture
def source_text(sources_dir):
  """Read a saved page by file name."""
  def _read(name: str) -> str:
    return (sources_dir / name).read_text(encoding="utf-8")

  return _read


@pytest.fixture
def fixture_fetcher(sources_dir):
  return FixtureSourceFetcher(directory=sources_dir)


@pytest.fixture
def minimal_documents():
  """
  Smallest documents that still exercise the PostgreSQL and SQLite layouts:
  SELECT (reserved) + COUNT (non-reserved), and a single SQLite entry ABORT.
  """
  return {
    "postgresql": (
      "<table>"
      "<tr><td>SELECT</td><td>reserved</td></tr>"
      "<tr><td>COUNT</td><td>non-reserved</td></tr>"
      "</table>"
    ),
    "sqlite": "<ul><li>ABORT</li></ul>",
  }


# -------------------------------------------------------------------
# Configuration
# -------------------------------------------------------------------
@pytest.fixture
def make_config(tmp_path):
  """
  Build a PipelineConfig writing below tmp_path.

  Sanity minimum counts are disabled; fixture documents are tiny.
  """
  def _make(**overrides) -> PipelineConfig:
    cfg = PipelineConfig(
      out_root=tmp_path / "out",
      fetch_timeout=5.0,
      fetch_workers=4,
      user_agent="sqlkw-tests",
      sources=dict(DEFAULT_SOURCES),
      min_counts={},
      dialects=tuple(DialectId),
    )
    return replace(cfg, **overrides)

  return _make
