"""
Tests for ledger configuration loading and the config -> kernel bridges.
"""

from pathlib import Path

import pytest
import yaml

from ledger_config import LedgerConfig, get_active_config
from ledger_config.bridges import export_locations_from_config, init_context_from_config
from ledger_config.loader import deep_merge, load_config, parse_config
from ledger_kernel.context import get_default_context, reset_default_context
from ledger_kernel.domain.accounts import AccountType
from ledger_kernel.domain.dtos import AccountSpec
from ledger_kernel.services.account_service import AccountService


def write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestDefaults:
    def test_bundled_defaults(self):
        config = load_config()
        assert isinstance(config, LedgerConfig)
        assert config.database_url == "sqlite:///ledger.db"
        assert config.echo is False
        assert config.logging.level == "INFO"
        base = Path("~/.ledger").expanduser()
        assert config.export.base_folder == base
        assert config.export.export_folder == base / "exports"
        assert config.export.backup_folder == base / "backups"
        assert config.export.label == "ledger_export"

    def test_get_active_config_is_logged(self, captured_logs):
        get_active_config()
        loaded = [r for r in captured_logs() if r["message"] == "ledger_config_loaded"]
        assert loaded[0]["database_backend"] == "sqlite"


class TestOverrides:
    def test_override_merges_onto_defaults(self, tmp_path):
        path = write_yaml(
            tmp_path / "ledger.yaml",
            {"database": {"url": "sqlite:///other.db"}, "export": {"base_folder": str(tmp_path)}},
        )
        config = get_active_config(path)
        assert config.database_url == "sqlite:///other.db"
        assert config.echo is False
        assert config.export.export_folder == tmp_path / "exports"

    def test_absolute_folder_not_anchored(self, tmp_path):
        backups = tmp_path / "elsewhere"
        path = write_yaml(tmp_path / "ledger.yaml", {"export": {"backup_folder": str(backups)}})
        assert get_active_config(path).export.backup_folder == backups

    def test_log_level_is_normalized(self, tmp_path):
        path = write_yaml(tmp_path / "ledger.yaml", {"logging": {"level": "debug"}})
        assert get_active_config(path).logging.level == "DEBUG"

    def test_unknown_log_level(self, tmp_path):
        path = write_yaml(tmp_path / "ledger.yaml", {"logging": {"level": "LOUD"}})
        with pytest.raises(ValueError, match="logging.level"):
            get_active_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("database: [unclosed", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            get_active_config(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = write_yaml(tmp_path / "list.yaml", ["a", "b"])
        with pytest.raises(ValueError, match="mapping"):
            get_active_config(path)

    def test_wrong_type(self, tmp_path):
        path = write_yaml(tmp_path / "ledger.yaml", {"database": {"echo": "yes"}})
        with pytest.raises(ValueError, match="database.echo"):
            get_active_config(path)


class TestLoaderHelpers:
    def test_deep_merge_does_not_mutate(self):
        base = {"a": {"b": 1, "c": 2}}
        merged = deep_merge(base, {"a": {"c": 3}})
        assert merged == {"a": {"b": 1, "c": 3}}
        assert base == {"a": {"b": 1, "c": 2}}

    def test_missing_key_named(self):
        with pytest.raises(ValueError, match="export.base_folder"):
            parse_config({"database": {"url": "sqlite://", "echo": False}})


class TestBridges:
    @pytest.fixture
    def config(self, tmp_path):
        path = write_yaml(
            tmp_path / "ledger.yaml",
            {
                "database": {"url": f"sqlite:///{tmp_path / 'ledger.db'}"},
                "export": {"base_folder": str(tmp_path), "label": "household"},
            },
        )
        return get_active_config(path)

    def test_init_context_from_config(self, config, clock):
        try:
            ctx = init_context_from_config(config, clock)
            assert get_default_context() is ctx
            assert ctx.autocommit
            info = AccountService(ctx).create_account(
                AccountSpec(name="Cash", account_type=AccountType.CASH, currency="USD")
            )
            assert AccountService(ctx).get_account(info.uid).name == "Cash"
        finally:
            reset_default_context()

    def test_export_locations_from_config(self, config, clock, tmp_path):
        locations = export_locations_from_config(config, clock)
        assert locations.export_folder == tmp_path / "exports"
        assert locations.backup_folder == tmp_path / "backups"
        assert locations.create_export_file("QIF").name == "20240101_120000_household.qif"
