from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


def _access_line(
    path: str,
    rt: str | None = None,
    *,
    ip: str = "10.0.0.1",
    ts: str = "01/Mar/2024:12:07:33 +0000",
    method: str = "GET",
    status: int = 200,
    size: str = "512",
) -> str:
    line = f'{ip} - - [{ts}] "{method} {path} HTTP/1.1" {status} {size}'
    if rt is not None:
        line += f" {rt}"
    return line


def _sql_line(stmt: str, ms: int, *, ts: str | None = "2024-03-01 12:07:33") -> str:
    prefix = f"[{ts}.120] [INFO] " if ts else "[INFO] "
    return f"{prefix}[SQL_END] [{stmt}] [{ms}ms]"


@pytest.fixture
def write_lines() -> Callable[[Path, list[str]], None]:
    def _write(path: Path, lines: list[str]) -> None:
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    return _write


@pytest.fixture
def write_access_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text(
            "\n".join(
                [
                    _access_line("/api/x?id=1", "0.050", ts="01/Mar/2024:12:01:10 +0000"),
                    _access_line("/api/x", "1.500", ip="10.0.0.2", ts="01/Mar/2024:12:04:59 +0000"),
                    "this line does not match any grammar",
                    _access_line("/api/x", "12.000", ip="10.0.0.2", ts="01/Mar/2024:12:05:00 +0000"),
                ]
            )
            + "\n",
            encoding="utf-8",
        )

    return _write


@pytest.fixture
def access_line() -> Callable[..., str]:
    return _access_line


@pytest.fixture
def sql_line() -> Callable[..., str]:
    return _sql_line
