"""Tests for host profile configuration."""

from unittest.mock import patch

import pytest
import yaml
from keyring.errors import NoKeyringError

from fwchain.config import ConfigManager, HostProfile, ProfileError
from fwchain.connector.ssh import SSHConfig


def test_creates_empty_profiles_file(tmp_path):
    mgr = ConfigManager(tmp_path / "cfg")

    assert mgr.profiles_file.exists()
    assert mgr.list_profiles() == {}


def test_env_override(tmp_path, monkeypatch):
    monkeypatch.setenv("FWCHAIN_CONFIG", str(tmp_path / "env"))

    mgr = ConfigManager()

    assert mgr.config_dir == (tmp_path / "env").resolve()


def test_password_goes_to_keyring_not_yaml(tmp_path):
    mgr = ConfigManager(tmp_path)
    with patch("fwchain.config.keyring") as mock_keyring:
        mock_keyring.get_password.return_value = "s3cret"
        mgr.add_profile("fw1", SSHConfig(host="10.0.0.1", user="deploy", password="s3cret"))
        cfg = mgr.get_profile("fw1")

    mock_keyring.set_password.assert_called_once_with("fwchain", "fw1", "s3cret")
    assert "s3cret" not in mgr.profiles_file.read_text()
    assert mgr.list_profiles()["fw1"].keyring_password is True
    assert cfg.host == "10.0.0.1"
    assert cfg.user == "deploy"
    assert cfg.password == "s3cret"


def test_keyring_failure_refuses_to_store_password(tmp_path):
    mgr = ConfigManager(tmp_path)
    with patch("fwchain.config.keyring.set_password", side_effect=NoKeyringError("no backend")):
        with pytest.raises(ProfileError, match="keyring"):
            mgr.add_profile("fw1", SSHConfig(host="10.0.0.1", password="s3cret"))

    assert "s3cret" not in mgr.profiles_file.read_text()
    assert mgr.list_profiles() == {}


def test_profile_without_password(tmp_path):
    mgr = ConfigManager(tmp_path)
    with patch("fwchain.config.keyring") as mock_keyring:
        mgr.add_profile("fw2", SSHConfig(host="fw2.example.com", port=2222, use_sudo=False))
        cfg = mgr.get_profile("fw2")

    mock_keyring.set_password.assert_not_called()
    mock_keyring.get_password.assert_not_called()
    assert cfg.port == 2222
    assert cfg.use_sudo is False
    assert cfg.password is None
    assert mgr.get_profile("unknown") is None


def test_invalid_profile_is_rejected(tmp_path):
    mgr = ConfigManager(tmp_path)

    with pytest.raises(ProfileError):
        mgr.add_profile("bad", SSHConfig(host="fw1", port=70000))


def test_invalid_entries_in_file_are_skipped(tmp_path):
    mgr = ConfigManager(tmp_path)
    mgr.profiles_file.write_text(yaml.safe_dump({
        "good": {"host": "10.0.0.2"},
        "no-host": {"user": "deploy"},
        "bad-port": {"host": "10.0.0.3", "port": "ssh"},
    }))

    profiles = mgr.list_profiles()

    assert list(profiles) == ["good"]
    assert profiles["good"] == HostProfile(host="10.0.0.2")
    assert profiles["good"].target == "root@10.0.0.2:22"
    assert mgr.get_profile("no-host") is None


def test_unreadable_file_yields_no_profiles(tmp_path):
    mgr = ConfigManager(tmp_path)
    mgr.profiles_file.write_text("good: [unclosed\n")

    assert mgr.list_profiles() == {}


def test_remove_profile(tmp_path):
    mgr = ConfigManager(tmp_path)
    with patch("fwchain.config.keyring") as mock_keyring:
        mgr.add_profile("fw1", SSHConfig(host="10.0.0.1", password="pw"))

        assert mgr.remove_profile("fw1") is True
        assert mgr.remove_profile("fw1") is False

    mock_keyring.delete_password.assert_called_once_with("fwchain", "fw1")
    assert mgr.list_profiles() == {}
