#!/usr/bin/env python3
"""CoursePace CI helper.

Runs the backend test suites (unit + pytest) and writes `ci_report.json`.
"""

from __future__ import annotations

import json
import subprocess
import sys
import time
from datetime import datetime
from pathlib import Path


REPO_ROOT = Path(__file__).resolve().parents[1]

SUITES = [
    ("python -m pytest tests/unit -v", "Backend: pytest tests/unit"),
    ("python -m pytest tests/pytest -v", "Backend: pytest tests/pytest"),
]


def run_command(cmd: str, description: str, *, cwd: Path, timeout: int = 900):
    print(f"\n{'=' * 60}")
    print(f"[RUN] {description}")
    print(f"[CMD] {cmd}")
    print(f"{'=' * 60}")

    start_time = time.time()
    try:
        result = subprocess.run(
            cmd,
            shell=True,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired:
        duration = time.time() - start_time
        print(f"[FAIL] {description} (timeout after {timeout}s)")
        return False, f"Command timeout after {timeout}s", duration

    duration = time.time() - start_time
    if result.returncode == 0:
        print(f"[OK] {description} ({duration:.2f}s)")
        return True, result.stdout, duration

    print(f"[FAIL] {description} ({duration:.2f}s)")
    if result.stdout:
        print("STDOUT:\n" + result.stdout)
    if result.stderr:
        print("STDERR:\n" + result.stderr)
    return False, result.stderr or result.stdout, duration


def generate_report(results: list[dict]) -> dict:
    passed = sum(1 for r in results if r["success"])
    report = {
        "timestamp": datetime.now().isoformat(),
        "total_duration": sum(r["duration"] for r in results),
        "results": results,
        "summary": {
            "total_suites": len(results),
            "passed": passed,
            "failed": len(results) - passed,
        },
    }
    report_path = REPO_ROOT / "ci_report.json"
    with open(report_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)
    return report


def main() -> bool:
    print(f"\n[CI] START {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    results = []
    for cmd, name in SUITES:
        success, _, duration = run_command(cmd, name, cwd=REPO_ROOT)
        results.append({"name": name, "success": success, "duration": duration})

    report = generate_report(results)
    failed = report["summary"]["failed"]
    print(f"\nTotal duration: {report['total_duration']:.2f}s")
    print(f"Passed: {report['summary']['passed']}")
    print(f"Failed: {failed}")
    for result in results:
        if not result["success"]:
            print(f"  - {result['name']}")

    print("\n[CI] SUCCESS" if failed == 0 else "\n[CI] FAILED")
    return failed == 0


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
