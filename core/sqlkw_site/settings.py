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

import sys
from pathlib import Path

"""
Django settings for sqlkw.

The project has no database and no web surface: Django only hosts the
`keywords` app and its management command. Every knob can be overridden
through SQLKW_* environment variables.
"""

BASE_DIR = Path(__file__).resolve().parent.parent
REPO_ROOT = BASE_DIR.parent

# utils/ lives next to core/ (same layout as manage.py expects)
if str(REPO_ROOT) not in sys.path:
  sys.path.insert(0, str(REPO_ROOT))

from utils.env import env_float, env_int, env_list, env_str  # noqa: E402

SECRET_KEY = env_str("SQLKW_SECRET_KEY", "sqlkw-not-a-secret")
DEBUG = False
ALLOWED_HOSTS: list[str] = []

INSTALLED_APPS = [
  "keywords",
]

DATABASES: dict = {}

USE_TZ = True

# --------------------------------------------------------------------------------------
# Keyword pipeline
# --------------------------------------------------------------------------------------

# Where <dialect>.txt, <dialect>_reserved.txt, <dialect>_non_reserved.txt and total.txt land.
SQLKW_OUTPUT_DIR = env_str("SQLKW_OUTPUT_DIR", str(REPO_ROOT / ".artifacts" / "keywords"))

# Per-source fetch timeout in seconds. A timed-out source is reported as failed.
SQLKW_FETCH_TIMEOUT = env_float("SQLKW_FETCH_TIMEOUT", 30.0)

# One worker per source is enough; there are four sources.
SQLKW_FETCH_WORKERS = env_int("SQLKW_FETCH_WORKERS", 4)

# Optional YAML file with source URL / sanity overrides (see keywords.config).
SQLKW_SOURCES_PATH = env_str("SQLKW_SOURCES_PATH")

# Restrict a run to a subset of dialects (comma separated). Empty means all.
SQLKW_DIALECTS = env_list("SQLKW_DIALECTS")

SQLKW_USER_AGENT = env_str("SQLKW_USER_AGENT", "sqlkw-keyword-generator/1.0")

# --------------------------------------------------------------------------------------
# Logging
# --------------------------------------------------------------------------------------

SQLKW_LOG_LEVEL = (env_str("SQLKW_LOG_LEVEL", "INFO") or "INFO").upper()

LOGGING = {
  "version": 1,
  "disable_existing_loggers": False,
  "formatters": {
    "console": {
      "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    },
  },
  "handlers": {
    "console": {
      "class": "logging.StreamHandler",
      "formatter": "console",
    },
  },
  "loggers": {
    "keywords": {
      "handlers": ["console"],
      "level": SQLKW_LOG_LEVEL,
      "propagate": True,
    },
  },
}
