from __future__ import annotations

from pathlib import Path

import pytest

from mcp_log_insights.core.export import parse_csv
from mcp_log_insights.tools.analyze import HARD_LIMIT, analyze_log_impl, export_slow_requests_impl


def _write_tomcat_log(path: Path, access_line) -> None:
    path.write_text(
        "\n".join(
            [
                access_line("/shop/cart", "850", ts="01/Mar/2024:12:07:33 +0000"),
                access_line("/shop/cart", "45", ts="01/Mar/2024:12:08:00 +0000"),
                access_line("/shop/item?id=3", "120", ip="10.0.0.9", status=404),
                access_line("/health"),
            ]
        )
        + "\n",
        encoding="utf-8",
    )


@pytest.mark.asyncio
async def test_analyze_log_impl_returns_plain_summary(tmp_path: Path, access_line) -> None:
    log = tmp_path / "tomcat.log"
    _write_tomcat_log(log, access_line)

    out = await analyze_log_impl(log_path=str(log), log_format="tomcat")

    assert out["format"] == "tomcat"
    assert out["total_records"] == 4
    assert out["timed_records"] == 3
    assert out["error_rate"] == 25.0
    assert out["slow_request_count"] == 3
    assert [r["response_time_seconds"] for r in out["slow_requests"]] == [45.0, 0.85, 0.12]
    assert out["top_targets"][0] == {
        "name": "/shop/cart",
        "count": 2,
        "total_time": pytest.approx(45.85),
        "timed_count": 2,
        "mean_time": pytest.approx(22.925),
    }
    health = next(t for t in out["top_targets"] if t["name"] == "/health")
    assert health["mean_time"] is None


@pytest.mark.asyncio
async def test_analyze_log_impl_threshold_is_post_hoc(tmp_path: Path, access_line) -> None:
    log = tmp_path / "tomcat.log"
    _write_tomcat_log(log, access_line)

    out = await analyze_log_impl(
        log_path=str(log),
        log_format="tomcat",
        min_response_ms=500,
        sort_by="target",
        descending=False,
        limit=1,
    )

    assert out["timed_records"] == 3
    assert out["slow_request_count"] == 2
    assert len(out["slow_requests"]) == 1
    assert out["slow_requests"][0]["target"] == "/shop/cart"


@pytest.mark.asyncio
async def test_analyze_log_impl_validates_inputs(tmp_path: Path, access_line) -> None:
    log = tmp_path / "tomcat.log"
    _write_tomcat_log(log, access_line)

    with pytest.raises(ValueError, match="limit"):
        await analyze_log_impl(log_path=str(log), log_format="tomcat", limit=0)
    with pytest.raises(ValueError, match="min_response_ms"):
        await analyze_log_impl(log_path=str(log), log_format="tomcat", min_response_ms=-1)
    with pytest.raises(ValueError, match="Unknown log format"):
        await analyze_log_impl(log_path=str(log), log_format="iis")
    with pytest.raises(FileNotFoundError):
        await analyze_log_impl(log_path=str(tmp_path / "nope.log"), log_format="tomcat")

    out = await analyze_log_impl(log_path=str(log), log_format="tomcat", limit=HARD_LIMIT * 10)
    assert len(out["slow_requests"]) == 3


@pytest.mark.asyncio
async def test_export_slow_requests_impl_writes_dated_csv(tmp_path: Path, access_line) -> None:
    log = tmp_path / "tomcat.log"
    _write_tomcat_log(log, access_line)
    out_dir = tmp_path / "exports"
    out_dir.mkdir()

    out = await export_slow_requests_impl(
        log_path=str(log),
        log_format="tomcat",
        output_dir=str(out_dir),
        contains="cart",
    )

    path = Path(out["path"])
    assert path.parent == out_dir
    assert path.name.startswith("slow_requests_tomcat_")
    assert out["rows"] == 2
    rows = parse_csv(path.read_text(encoding="utf-8"))
    assert [r.response_time_ms for r in rows] == [45000.0, 850.0]


@pytest.mark.asyncio
async def test_export_slow_requests_impl_missing_output_dir(tmp_path: Path, access_line) -> None:
    log = tmp_path / "tomcat.log"
    _write_tomcat_log(log, access_line)

    with pytest.raises(FileNotFoundError, match="Output directory"):
        await export_slow_requests_impl(
            log_path=str(log), log_format="tomcat", output_dir=str(tmp_path / "absent")
        )
