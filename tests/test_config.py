import pytest

from certsweep.config import DEFAULT_PATTERNS, Config
from certsweep.models import GroupMode


def test_defaults_without_file(tmp_path):
    cfg = Config.load(str(tmp_path / "missing.yaml"))
    assert cfg.scan_paths == ["."]
    assert cfg.expiration_days == 30
    assert cfg.mode is GroupMode.BASENAME
    assert cfg.cert_pattern().pattern == DEFAULT_PATTERNS[GroupMode.BASENAME][0]


def test_recursive_implies_directory_mode():
    cfg = Config(recursive=True)
    assert cfg.mode is GroupMode.DIRECTORY
    assert cfg.key_pattern().search("privkey.pem")
    assert not cfg.key_pattern().search("site.key")


def test_group_by_overrides_recursive():
    assert Config(recursive=True, group_by=GroupMode.BASENAME).mode is GroupMode.BASENAME


def test_yaml_and_env(tmp_path, monkeypatch):
    path = tmp_path / "certsweep.yaml"
    path.write_text(
        "scan_paths: /etc/ssl\n"
        "recursive: true\n"
        "certfile: '\\.crt$'\n"
        "expiration_days: 14\n"
        "slack_webhook_url: https://hooks.example/file\n"
        "inspector: native\n"
        "inspect_timeout: 5\n"
    )
    monkeypatch.setenv("CERTSWEEP_SLACK_WEBHOOK_URL", "https://hooks.example/env")
    cfg = Config.load(str(path))
    assert cfg.scan_paths == ["/etc/ssl"]
    assert cfg.recursive is True
    assert cfg.cert_pattern().pattern == r"\.crt$"
    assert cfg.key_pattern().pattern == DEFAULT_PATTERNS[GroupMode.DIRECTORY][1]
    assert cfg.expiration_days == 14
    assert cfg.slack_webhook_url == "https://hooks.example/env"
    assert cfg.inspector == "native"
    assert cfg.inspect_timeout == 5.0


def test_unknown_inspector_rejected(tmp_path):
    path = tmp_path / "certsweep.yaml"
    path.write_text("inspector: gnutls\n")
    with pytest.raises(ValueError):
        Config.load(str(path))


def test_override_ignores_none():
    cfg = Config(expiration_days=10).override(expiration_days=None, hook="/bin/true")
    assert cfg.expiration_days == 10
    assert cfg.hook == "/bin/true"


def test_zero_expiration_days_is_kept(tmp_path):
    path = tmp_path / "certsweep.yaml"
    path.write_text("expiration_days: 0\n")
    assert Config.load(str(path)).expiration_days == 0


def test_zero_workers_rejected(tmp_path):
    path = tmp_path / "certsweep.yaml"
    path.write_text("workers: 0\n")
    with pytest.raises(ValueError):
        Config.load(str(path))
