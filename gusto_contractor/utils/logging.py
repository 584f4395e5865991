"""Logging utilities"""

import csv
import json
import os
from datetime import datetime
from zoneinfo import ZoneInfo

TIMEZONE = ZoneInfo("America/Detroit")

_LEVEL_TAGS = {
    "info": "INFO",
    "step": "STEP",
    "ok": " OK ",
    "warn": "WARN",
    "err": " ERR",
    "data": "DATA",
}


def log(level, *parts):
    """Print one console line: [HH:MM:SS.mmm] [TAG] message"""
    ts = datetime.now(TIMEZONE).strftime("%H:%M:%S.%f")[:-3]
    tag = _LEVEL_TAGS.get(level, level.upper())
    print(f"[{ts}] [{tag}]", *parts)


def format_elapsed_time(seconds):
    """Format elapsed time in human-readable format"""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        mins = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{mins}m {secs}s"
    else:
        hours = int(seconds // 3600)
        mins = int((seconds % 3600) // 60)
        return f"{hours}h {mins}m"


def log_result(path, row, name, status, reason="", steps_completed=()):
    """Append a row outcome to the JSONL result log (no-op when path is None)"""
    result = {
        "timestamp": datetime.now(TIMEZONE).isoformat(),
        "row": row,
        "name": name,
        "status": status,
        "steps_completed": list(steps_completed),
    }
    if reason:
        result["failure_reason"] = reason

    if path:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(result, ensure_ascii=False) + "\n")

    print(f"[{status}] row {row} {name or ''}".rstrip())
    if reason:
        print(f"  Reason: {reason}")


CSV_FIELDS = [
    "timestamp",
    "row",
    "name",
    "result",
    "reason",
    "steps_completed",
    "elapsed_seconds",
]


def write_csv_summary(records, directory):
    """Write one CSV line per row record; returns the file path or None"""
    if not records:
        return None

    os.makedirs(directory, exist_ok=True)
    stamp = datetime.now(TIMEZONE).strftime("%Y%m%d_%H%M%S")
    csv_filename = os.path.join(directory, f"run_results_{stamp}.csv")

    with open(csv_filename, "w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for record in records:
            row = dict(record)
            row["steps_completed"] = ",".join(row.get("steps_completed") or [])
            writer.writerow(row)

    return csv_filename
