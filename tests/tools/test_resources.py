from __future__ import annotations

from pathlib import Path

import pytest

from mcp_log_insights.core.formats import parse_line
from mcp_log_insights.core.models import LATENCY_BUCKETS, LogFormat
from mcp_log_insights.resources import registry


@pytest.mark.parametrize("fmt", list(LogFormat))
def test_sample_lines_parse_with_their_format(fmt: LogFormat) -> None:
    for line in registry.SAMPLE_LINES[fmt]:
        assert parse_line(line, fmt) is not None


def test_latency_bucket_table() -> None:
    table = registry.latency_bucket_table()
    assert [b["label"] for b in table] == list(LATENCY_BUCKETS)
    assert table[0] == {"label": "<10ms", "min_ms": 0, "max_ms": 10}
    assert table[-1] == {"label": ">10s", "min_ms": 10000, "max_ms": None}


def test_resolve_log_path_stays_in_base_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(registry.BASE_DIR_ENV, str(tmp_path))
    (tmp_path / "app.log").write_text("x\n", encoding="utf-8")
    (tmp_path / "app.bin").write_text("x\n", encoding="utf-8")

    assert registry._resolve_log_path("app.log") == (tmp_path / "app.log").resolve()
    with pytest.raises(ValueError, match="escapes"):
        registry._resolve_log_path("../outside.log")
    with pytest.raises(ValueError, match="not allowed"):
        registry._resolve_log_path("app.bin")
    with pytest.raises(FileNotFoundError):
        registry._resolve_log_path("missing.log")
