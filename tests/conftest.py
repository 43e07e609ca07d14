"""Shared test fixtures for luadeob."""

import pytest

from luadeob.config.models import DeobConfig


SAMPLE_OBFUSCATED = (
    'local aaaaaaaaaaaaaaaaaaaa = "SGVsbG8gV29ybGQ="\n'
    "local bbbbbbbbbbbbbbb = function(x) return x..x end\n"
    'print(aaaaaaaaaaaaaaaaaaaa..bbbbbbbbbbbbbbb("test"))\n'
)


@pytest.fixture
def sample_config():
    return DeobConfig()


@pytest.fixture
def sample_source():
    return SAMPLE_OBFUSCATED


@pytest.fixture
def metadata():
    """Fresh stage metadata, as the pipeline builds it for one run."""
    def _make(source: str = "") -> dict:
        return {"source": source, "renamed": {}}
    return _make


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with no project-local or user-global luadeob.yaml in reach."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    return tmp_path
