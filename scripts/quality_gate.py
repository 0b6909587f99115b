"""Run lint, format, type, and test checks for tracker-cli; report JSON.

Usage:
    python scripts/quality_gate.py              # run everything
    python scripts/quality_gate.py --skip-tests # lint + types only
    python scripts/quality_gate.py --fix        # let ruff fix what it can first
"""

from __future__ import annotations

import argparse
import json
import re
import subprocess
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

MYPY_TARGETS = ["tracker_cli/"]

_ERROR_LINE = {
    "ruff_lint": re.compile(r"^\S+:\d+:\d+:"),
    "ruff_format": re.compile(r"^Would reformat"),
    "mypy": re.compile(r": error:"),
}


def _run(cmd: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(cmd, capture_output=True, text=True, cwd=str(ROOT), timeout=300)


def _tool(*args: str) -> list[str]:
    return [sys.executable, "-m", *args]


def run_check(name: str, cmd: list[str]) -> dict:
    """Run one tool and summarize it as {status, errors, duration_s[, output]}."""
    t0 = time.monotonic()
    r = _run(cmd)
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        "duration_s": round(time.monotonic() - t0, 1),
    }
    if r.returncode != 0:
        lines = (r.stdout + "\n" + r.stderr).splitlines()
        result["errors"] = sum(1 for line in lines if _ERROR_LINE[name].search(line))
        result["output"] = (r.stdout or r.stderr).strip()
    return result


def check_pytest() -> dict:
    t0 = time.monotonic()
    r = _run(_tool("pytest", "tests/", "-q", "--no-header", "--tb=short"))
    counts = {"passed": 0, "failed": 0, "skipped": 0}
    for line in reversed(r.stdout.strip().splitlines()):
        found = {key: re.search(rf"(\d+)\s+{key}", line) for key in counts}
        if any(found.values()):
            for key, match in found.items():
                if match:
                    counts[key] = int(match.group(1))
            break
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        **counts,
        "duration_s": round(time.monotonic() - t0, 1),
    }
    if r.returncode != 0:
        result["output"] = r.stdout.strip()[-2000:]
    return result


def main() -> None:
    parser = argparse.ArgumentParser(description="Run tracker-cli quality checks")
    parser.add_argument("--skip-tests", action="store_true", help="Skip pytest")
    parser.add_argument("--fix", action="store_true", help="Apply ruff fixes first")
    args = parser.parse_args()

    t0 = time.monotonic()
    if args.fix:
        _run(_tool("ruff", "check", "--fix", "."))

    steps = [
        ("ruff_lint", _tool("ruff", "check", ".")),
        ("ruff_format", _tool("ruff", "format", "--check", ".")),
        ("mypy", _tool("mypy", *MYPY_TARGETS)),
    ]
    checks: dict[str, dict] = {}
    for name, cmd in steps:
        print(f"Running {name}...", file=sys.stderr)
        checks[name] = run_check(name, cmd)

    if args.skip_tests:
        checks["pytest"] = {"status": "skip", "reason": "--skip-tests"}
    else:
        print("Running pytest...", file=sys.stderr)
        checks["pytest"] = check_pytest()

    ok = all(c["status"] in ("pass", "skip") for c in checks.values())
    report = {
        "overall": "pass" if ok else "fail",
        "checks": checks,
        "total_duration_s": round(time.monotonic() - t0, 1),
    }
    print(json.dumps(report, indent=2))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
