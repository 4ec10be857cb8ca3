"""Command-line downloader that reports progress while aria2c fetches a URL."""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional, Sequence

from .client import Aria2Error, DownloadStatus, download, stop

DEFAULT_URL = (
    "https://repo.anaconda.com/miniconda/Miniconda3-py39_25.5.1-0-Windows-x86_64.exe"
)

_MEBIBYTE = 1024 * 1024


def _parse_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def format_status(status: DownloadStatus, elapsed: float) -> str:
    """Render a progress report for *status* after *elapsed* seconds."""
    lines = [f"Status: {status.status} (elapsed: {elapsed:.2f}s)"]

    if status.total_length:
        total = _parse_int(status.total_length)
        completed = _parse_int(status.completed_length)
        if total > 0:
            progress = completed / total * 100
            lines.append(
                f"Progress: {progress:.2f}% "
                f"({status.completed_length}/{status.total_length})"
            )

    if status.download_speed:
        try:
            speed = int(status.download_speed)
        except ValueError:
            lines.append(f"Speed: {status.download_speed}/s")
        else:
            lines.append(f"Speed: {speed / _MEBIBYTE:.2f} MB/s")

    if status.error_message:
        lines.append(f"Error: {status.error_message}")

    lines.append("---")
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ariafetch",
        description="Download a URL with aria2c and report progress.",
    )
    parser.add_argument("url", nargs="?", default=DEFAULT_URL, help="URL to fetch")
    parser.add_argument(
        "-d",
        "--dir",
        dest="directory",
        default="",
        help="directory to save into (aria2c's default when empty)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the downloader and return the process exit status."""
    args = _build_parser().parse_args(argv)
    started = time.monotonic()

    def report(status: DownloadStatus) -> None:
        print(format_status(status, time.monotonic() - started), flush=True)

    print("Starting download...")
    try:
        path = download(args.url, args.directory, report)
    except (Aria2Error, OSError) as exc:
        print(f"download failed: {exc}", file=sys.stderr)
        return 1
    finally:
        try:
            stop()
        except Aria2Error:
            pass
    print(f"Download complete, path: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())