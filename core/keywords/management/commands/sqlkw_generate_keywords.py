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

"""Generate SQL keyword lists for the tokenizer.

This Django management command runs one full keyword pipeline:
  fetch -> extract -> normalize -> classify -> merge -> write

It produces, under --out-root:
  <dialect>.txt, <dialect>_reserved.txt, <dialect>_non_reserved.txt, total.txt

Sources: SQL:2016 foundation grammar, PostgreSQL keyword appendix,
MySQL keyword page, SQLite keyword page.
"""

from pathlib import Path
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from keywords.config import load_config
from keywords.errors import OutputWriteError
from keywords.fetching import FixtureSourceFetcher, HttpSourceFetcher
from keywords.pipeline import RunReport, run_pipeline


class Command(BaseCommand):
  help = (
    "Fetch the SQL keyword documentation of all dialects and write sorted keyword lists.\n\n"
    "Examples:\n"
    "  python manage.py sqlkw_generate_keywords\n"
    "  python manage.py sqlkw_generate_keywords --dialect postgresql --dialect sqlite\n"
    "  python manage.py sqlkw_generate_keywords --fixtures-dir saved_pages --report-json run.json\n"
  )

  def add_arguments(self, parser) -> None:
    parser.add_argument(
      "--out-root",
      default=None,
      help="Output folder for keyword files (default: settings.SQLKW_OUTPUT_DIR).",
    )
    parser.add_argument(
      "--dialect",
      action="append",
      default=[],
      help="Dialect name (repeatable). Default: all dialects.",
    )
    parser.add_argument(
      "--timeout",
      type=float,
      default=None,
      help="Per-source fetch timeout in seconds (default: settings.SQLKW_FETCH_TIMEOUT).",
    )
    parser.add_argument(
      "--fixtures-dir",
      default=None,
      help="Read <source_id>.html|.htm|.txt from this folder instead of fetching over HTTP.",
    )
    parser.add_argument(
      "--report-json",
      default=None,
      help="Also write the run report as JSON to this path.",
    )
    parser.add_argument(
      "--sources-config",
      default=None,
      help="YAML file overriding source URLs and minimum keyword counts.",
    )

  def handle(self, *args: Any, **options: Any) -> None:
    timeout = options.get("timeout")
    if timeout is not None and timeout <= 0:
      raise CommandError("--timeout must be a positive number of seconds.")

    try:
      config = load_config(
        sources_path=options.get("sources_config"),
        out_root=options.get("out_root"),
        fetch_timeout=timeout,
        dialects=options.get("dialect") or None,
      )
    except (FileNotFoundError, ValueError) as exc:
      raise CommandError(str(exc)) from exc

    fixtures_dir = options.get("fixtures_dir")
    if fixtures_dir:
      fixtures_path = Path(fixtures_dir)
      if not fixtures_path.is_dir():
        raise CommandError(f"--fixtures-dir is not a directory: {fixtures_dir}")
      fetcher = FixtureSourceFetcher(directory=fixtures_path)
    else:
      fetcher = HttpSourceFetcher(
        config.urls_by_source_id(),
        timeout=config.fetch_timeout,
        user_agent=config.user_agent,
      )

    try:
      report = run_pipeline(fetcher, config)
    except OutputWriteError as exc:
      raise CommandError(str(exc)) from exc

    self._print_summary(report, config.out_root)

    report_path = options.get("report_json")
    if report_path:
      try:
        path = Path(report_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report.to_json(), encoding="utf-8")
      except OSError as exc:
        raise CommandError(f"Failed to write report {report_path}: {exc}") from exc
      self.stdout.write(f"Report written to {report_path}")

  def _print_summary(self, report: RunReport, out_root: Path) -> None:
    if report.ok:
      self.stdout.write(self.style.SUCCESS(f"SQL keyword lists generated in {out_root}:"))
    else:
      self.stdout.write(self.style.WARNING(
        f"SQL keyword lists generated in {out_root} with {len(report.failed)} failed source(s):"
      ))

    for d in report.dialects:
      line = (
        f"  - {d.dialect.value:<12} {d.keywords:>6} keywords"
        f"  ({d.reserved} reserved, {d.non_reserved} non-reserved,"
        f" {len(d.conflicts)} conflicts, {d.warning_count} warnings)  [{d.status}]"
      )
      if d.ok and not d.sanity_warnings:
        self.stdout.write(line)
      elif d.ok:
        self.stdout.write(self.style.WARNING(line))
        for msg in d.sanity_warnings:
          self.stdout.write(self.style.WARNING(f"      {msg}"))
      else:
        self.stdout.write(self.style.ERROR(line))
        self.stdout.write(self.style.ERROR(f"      {d.error}"))

    self.stdout.write(f"  = total        {report.merged_keywords:>6} keywords")
