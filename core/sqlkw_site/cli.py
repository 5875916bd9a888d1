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

import os
import sys

"""Console entry point: `sqlkw [options]` == `manage.py sqlkw_generate_keywords [options]`."""


def main(argv: list[str] | None = None) -> int:
  os.environ.setdefault("DJANGO_SETTINGS_MODULE", "sqlkw_site.settings")

  import django
  from django.core.management import execute_from_command_line

  django.setup()
  args = list(sys.argv[1:] if argv is None else argv)
  execute_from_command_line(["sqlkw", "sqlkw_generate_keywords", *args])
  return 0


if __name__ == "__main__":
  raise SystemExit(main())
