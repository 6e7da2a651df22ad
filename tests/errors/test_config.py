from __future__ import annotations

from pathlib import Path

import pytest

from hmmpath.errors.config import ConfigError, ErrorHandlingConfig, load_config, resolve_out_dir


def test_resolved_run_id_returns_explicit_id() -> None:
    cfg = ErrorHandlingConfig(run_id="myrun")
    assert cfg.resolved_run_id() == "myrun"


def test_resolved_run_id_auto_is_stable_per_config() -> None:
    cfg = ErrorHandlingConfig(run_id="auto")
    a = cfg.resolved_run_id()
    assert isinstance(a, str) and len(a) > 0
    assert cfg.resolved_run_id() == a
    # Very low probability of collision
    assert ErrorHandlingConfig(run_id="auto").resolved_run_id() != a


def test_from_env_reads_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ERROR_MODE", "debug")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "mylogs"))
    monkeypatch.setenv("WRITE_JSONL", "0")
    monkeypatch.setenv("MAX_FAILURES", "7")

    cfg = ErrorHandlingConfig.from_env()

    assert cfg.mode == "debug"
    assert cfg.log_dir == tmp_path / "mylogs"
    assert cfg.write_jsonl is False
    assert cfg.max_failures == 7


def test_from_env_invalid_values_fall_back(monkeypatch) -> None:
    base = ErrorHandlingConfig(mode="run", write_jsonl=True, max_failures=None, log_dir=Path("logs"))

    monkeypatch.setenv("ERROR_MODE", "nonsense")
    monkeypatch.setenv("WRITE_JSONL", "maybe")  # treated as truthy
    monkeypatch.setenv("MAX_FAILURES", "abc")   # invalid -> fallback to base.max_failures

    cfg = ErrorHandlingConfig.from_env(default=base)

    assert cfg.mode == "run"
    assert cfg.max_failures is None
    assert cfg.write_jsonl is True


def test_from_env_respects_prefix(monkeypatch, tmp_path: Path) -> None:
    base = ErrorHandlingConfig(env_prefix="HMMPATH_", log_dir=Path("logs"))

    monkeypatch.setenv("HMMPATH_ERROR_MODE", "debug")
    monkeypatch.setenv("HMMPATH_LOG_DIR", str(tmp_path / "pref_logs"))

    cfg = ErrorHandlingConfig.from_env(default=base)

    assert cfg.mode == "debug"
    assert cfg.log_dir == tmp_path / "pref_logs"


def test_load_config_prefers_hmmpath_yaml(tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text("paths:\n  out_dir: from_config\n")
    (tmp_path / "hmmpath.yaml").write_text("paths:\n  out_dir: from_hmmpath  # comment\n")

    config = load_config(tmp_path)

    assert config == {"paths": {"out_dir": "from_hmmpath"}}
    assert resolve_out_dir(config, None) == Path("from_hmmpath")


def test_load_config_missing_or_empty(tmp_path: Path) -> None:
    assert load_config(tmp_path) == {}
    (tmp_path / "config.yaml").write_text("")
    assert load_config(tmp_path) == {}


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text("- a\n- b\n")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text("paths: [unclosed\n")
    with pytest.raises(ConfigError, match="Could not parse"):
        load_config(tmp_path)


def test_resolve_out_dir_priority(tmp_path: Path) -> None:
    config = {"io": {"out_dir": "io_out"}}
    assert resolve_out_dir(config, tmp_path) == tmp_path
    assert resolve_out_dir(config, None) == Path("io_out")
    with pytest.raises(ConfigError, match="No out_dir"):
        resolve_out_dir({}, None)
