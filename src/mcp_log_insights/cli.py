from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from mcp_log_insights.core.config import AnalysisConfig
from mcp_log_insights.core.detail import SORT_KEYS, select_slow_requests
from mcp_log_insights.core.export import export_filename, write_csv
from mcp_log_insights.core.log_service import analyze_file
from mcp_log_insights.core.models import LATENCY_BUCKETS, LogFormat
from mcp_log_insights.core.reader import DEFAULT_CHUNK_SIZE
from mcp_log_insights.core.report import SlowRequestRow, Summary


def _positive_int(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {s!r}") from e
    if value < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return value


def _fmt_seconds(value: float | None) -> str:
    return "N/A" if value is None else f"{value:.3f}s"


def _print_summary(summary: Summary, rows: list[SlowRequestRow], limit: int) -> None:
    print(f"Format:          {summary.format.value}")
    print(f"Total requests:  {summary.total_records}")
    print(f"Unique sources:  {summary.unique_sources}")
    print(f"Unique targets:  {summary.unique_targets}")
    print(f"Error rate:      {summary.error_rate:.2f}%")
    print(f"Mean response:   {_fmt_seconds(summary.mean_response_time)}")
    print(f"Peak rate:       {summary.peak_rate}")

    if summary.top_targets:
        print("\nTop targets:")
        for t in summary.top_targets:
            print(f"  {t.count:>8}  {_fmt_seconds(t.mean_time):>10}  {t.name}")

    if summary.slowest_targets:
        print("\nSlowest targets (mean):")
        for t in summary.slowest_targets:
            print(f"  {t.mean_time * 1000:>10.2f}ms  x{t.count:<6}  {t.name}")

    if summary.histogram:
        print("\nLatency histogram:")
        print("  " + "bucket".ljust(20) + "".join(b.rjust(11) for b in LATENCY_BUCKETS) + "total".rjust(8))
        for row in summary.histogram:
            cells = "".join(str(n).rjust(11) for n in row.counts)
            print(f"  {row.key.ljust(20)}{cells}{str(row.total).rjust(8)}")

    print(f"\nSlow requests ({len(rows)}):")
    for r in rows[:limit]:
        print(f"  #{r.seq} {r.raw_timestamp} {r.method} {r.target} {r.response_time_ms:.2f}ms")


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Streaming performance insights for server/database logs.")
    p.add_argument("log_path")
    p.add_argument(
        "--format",
        dest="log_format",
        required=True,
        choices=[f.value for f in LogFormat],
        help="Log layout of the file",
    )
    p.add_argument("--min-ms", type=float, default=None, help="Only list slow requests >= this many ms")
    p.add_argument("--contains", default=None, help="Case-insensitive target filter for slow requests")
    p.add_argument("--sort", dest="sort_by", choices=sorted(SORT_KEYS), default="response_time")
    p.add_argument("--asc", action="store_true", help="Sort slow requests ascending")
    p.add_argument("--limit", type=_positive_int, default=20, help="Slow requests to print or emit as JSON (default: 20)")
    p.add_argument(
        "--chunk-size",
        type=_positive_int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Read window in bytes (default: {DEFAULT_CHUNK_SIZE})",
    )
    p.add_argument("--json", dest="as_json", action="store_true", help="Print the summary as JSON")
    csv_out = p.add_mutually_exclusive_group()
    csv_out.add_argument("--csv", dest="csv_path", default=None, help="Write slow requests to this CSV file")
    csv_out.add_argument("--csv-dir", default=None, help="Write slow requests CSV (dated name) into this directory")
    p.add_argument("--progress", action="store_true", help="Report read progress on stderr")
    p.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    def on_progress(pct: float) -> None:
        print(f"\r{pct:5.1f}%", end="\n" if pct >= 100 else "", file=sys.stderr, flush=True)

    try:
        summary = asyncio.run(
            analyze_file(
                Path(args.log_path),
                args.log_format,
                config=AnalysisConfig(chunk_size=args.chunk_size),
                on_progress=on_progress if args.progress else None,
            )
        )
        rows = select_slow_requests(
            summary.slow_requests,
            min_response_ms=args.min_ms,
            contains=args.contains,
            sort_by=args.sort_by,
            descending=not args.asc,
        )

        csv_target: Path | None = None
        if args.csv_path:
            csv_target = Path(args.csv_path)
        elif args.csv_dir:
            csv_target = Path(args.csv_dir) / export_filename(args.log_format)
        if csv_target is not None:
            n = write_csv(csv_target, rows)
            print(f"Wrote {n} rows to {csv_target}", file=sys.stderr)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    if args.as_json:
        out = summary.model_dump(mode="json")
        out["slow_requests"] = [r.model_dump(mode="json") for r in rows[: args.limit]]
        print(json.dumps(out, indent=2))
        return

    _print_summary(summary, rows, args.limit)


if __name__ == "__main__":
    main()
