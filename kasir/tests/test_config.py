from __future__ import annotations

import pytest

from kasir.config import Settings, load_settings, parse_bool, parse_duration


def test_defaults(tmp_path):
    s = load_settings(root=str(tmp_path), environ={})
    assert s.port == 8080
    assert s.database_driver == "sqlite"
    assert s.database_logging is True
    assert s.dsn == s.database_path


def test_priority_env_over_dotenv_over_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("port: 7000\nlog_level: DEBUG\ndatabase_name: fromyaml\n", encoding="utf-8")
    (tmp_path / ".env").write_text("PORT=7100\nDATABASE_NAME=fromdotenv\n", encoding="utf-8")
    s = load_settings(root=str(tmp_path), environ={"PORT": "7200"})
    assert s.port == 7200
    assert s.database_name == "fromdotenv"
    assert s.log_level == "DEBUG"


def test_broken_yaml_is_ignored(tmp_path):
    (tmp_path / "config.yaml").write_text("port: [unclosed\n", encoding="utf-8")
    s = load_settings(root=str(tmp_path), environ={})
    assert s.port == 8080


def test_postgres_dsn_and_pool(tmp_path):
    s = load_settings(
        root=str(tmp_path),
        environ={
            "DATABASE_DRIVER": "Postgres",
            "DATABASE_USER": "kasir",
            "DATABASE_PASSWORD": "secret",
            "DATABASE_HOST": "db",
            "DATABASE_PORT": "5433",
            "DATABASE_NAME": "kasir",
            "DATABASE_MAX_OPEN_CONNECTION": "20",
            "DATABASE_MAX_LIFETIME_CONNECTION": "30m",
            "DATABASE_LOGGING": "false",
        },
    )
    assert s.database_driver == "postgres"
    assert s.dsn == "postgresql://kasir:secret@db:5433/kasir"
    assert s.pool_options.max_open == 20
    assert s.pool_options.max_lifetime == 1800.0
    assert s.database_logging is False


@pytest.mark.parametrize("raw,expected", [("90s", 90.0), ("1h", 3600.0), ("250ms", 0.25), ("15", 15.0), (2, 2.0)])
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


def test_parse_duration_rejects_garbage():
    with pytest.raises(ValueError):
        parse_duration("soon")


def test_parse_bool():
    assert parse_bool("TRUE") and parse_bool("1") and parse_bool(True)
    assert not parse_bool("no")


def test_settings_is_plain_dataclass():
    assert Settings(port=1).port == 1
