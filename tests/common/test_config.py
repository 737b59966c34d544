from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from synpull.config import (
    ConfigurationError,
    MissingConfigurationError,
    configure_logging,
    get_database_config,
    get_pull_config,
    get_storage_config,
    require_env_var,
    require_env_vars,
)
from synpull.config.env import env_bool, env_float, env_list
from synpull.config.pull import DEFAULT_HTTP_TIMEOUT_SECONDS, DEFAULT_TAXONOMIES

if TYPE_CHECKING:
    from pathlib import Path


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_lists_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.setenv("MISSING_A", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)
    assert exc.value.variables == ("MISSING_A", "MISSING_B")


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("Yes", True), ("on", True), ("0", False), ("false", False), ("OFF", False)],
)
def test_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("FLAG", raw)

    assert env_bool("FLAG", default=not expected) is expected


def test_env_bool_default_and_invalid(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FLAG", raising=False)
    assert env_bool("FLAG", default=True) is True

    monkeypatch.setenv("FLAG", "maybe")
    with pytest.raises(ConfigurationError) as exc:
        env_bool("FLAG", default=True)
    assert exc.value.variables == ("FLAG",)


def test_env_float(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TIMEOUT", "2.5")
    assert env_float("TIMEOUT", default=1.0) == 2.5

    for invalid in ("soon", "0", "-1"):
        monkeypatch.setenv("TIMEOUT", invalid)
        with pytest.raises(ConfigurationError):
            env_float("TIMEOUT", default=1.0)


def test_env_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITEMS", " category, genre ,,")
    assert env_list("ITEMS", default=()) == ("category", "genre")

    monkeypatch.delenv("ITEMS")
    assert env_list("ITEMS", default=["a"]) == ("a",)


def test_pull_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SYNPULL_FAIL_FAST", "SYNPULL_HTTP_TIMEOUT", "SYNPULL_TAXONOMIES"):
        monkeypatch.delenv(name, raising=False)

    config = get_pull_config()

    assert config.fail_fast is True
    assert config.http_timeout_seconds == DEFAULT_HTTP_TIMEOUT_SECONDS
    assert config.taxonomies == DEFAULT_TAXONOMIES
    assert config.identifier_meta_key == "syn_identifier"
    assert config.transport_type_option == "syn_transport_type"


def test_pull_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SYNPULL_FAIL_FAST", "no")
    monkeypatch.setenv("SYNPULL_HTTP_TIMEOUT", "30")
    monkeypatch.setenv("SYNPULL_TAXONOMIES", "category,genre")

    config = get_pull_config()

    assert config.fail_fast is False
    assert config.http_timeout_seconds == 30.0
    assert config.taxonomies == ("category", "genre")


def test_storage_config_uses_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SYNPULL_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.delenv("SYNPULL_SQL_ECHO", raising=False)

    storage = get_storage_config()
    database = get_database_config(storage=storage)

    data_dir = (tmp_path / "data").resolve()
    assert storage.data_dir == data_dir
    assert storage.database_path == data_dir / "synpull.db"
    assert database.uri == f"sqlite+pysqlite:///{data_dir / 'synpull.db'}"
    assert database.is_sqlite
    assert database.echo is False
    assert (tmp_path / "data").is_dir()


def test_database_uri_env_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"


def test_sql_echo_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://localhost/synpull")
    monkeypatch.setenv("SYNPULL_SQL_ECHO", "yes")

    database = get_database_config()

    assert database.echo is True
    assert not database.is_sqlite


def test_storage_config_falls_back_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("SYNPULL_DATA_DIR", raising=False)
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    assert get_storage_config().data_dir == (tmp_path / "synpull").resolve()


def test_configure_logging_quiets_http_loggers() -> None:
    configure_logging(level=logging.INFO, force=True)
    assert logging.getLogger("httpx").level == logging.WARNING

    configure_logging(level=logging.DEBUG, force=True)
    assert logging.getLogger("httpcore").level == logging.DEBUG
