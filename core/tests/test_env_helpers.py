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

from utils.env import env_float, env_int, env_list, env_str


def test_env_str_treats_empty_as_missing(monkeypatch):
  monkeypatch.setenv("SQLKW_TEST_STR", "")
  assert env_str("SQLKW_TEST_STR", "fallback") == "fallback"
  monkeypatch.setenv("SQLKW_TEST_STR", "value")
  assert env_str("SQLKW_TEST_STR", "fallback") == "value"


def test_env_numbers_fall_back_on_garbage(monkeypatch):
  monkeypatch.setenv("SQLKW_TEST_INT", "7")
  monkeypatch.setenv("SQLKW_TEST_FLOAT", "soon")
  assert env_int("SQLKW_TEST_INT", 1) == 7
  assert env_float("SQLKW_TEST_FLOAT", 30.0) == 30.0
  monkeypatch.setenv("SQLKW_TEST_FLOAT", "2.5")
  assert env_float("SQLKW_TEST_FLOAT", 30.0) == 2.5


def test_env_list_splits_and_strips(monkeypatch):
  monkeypatch.setenv("SQLKW_TEST_LIST", " postgresql, sqlite ,,")
  assert env_list("SQLKW_TEST_LIST") == ["postgresql", "sqlite"]
  monkeypatch.delenv("SQLKW_TEST_LIST")
  assert env_list("SQLKW_TEST_LIST") == []
