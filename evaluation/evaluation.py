#!/usr/bin/env python3
"""
Evaluation runner for the Shannon-Fano coder.

This script:
- Runs the pytest suite in tests/ against the modules in src/
- Collects individual test outcomes from pytest's verbose output
- Writes a JSON report with run metadata and environment details

Run with:
    python evaluation/evaluation.py [--output PATH]
"""
import os
import sys
import json
import uuid
import platform
import subprocess
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
OUTCOMES = {
    " PASSED": "passed",
    " FAILED": "failed",
    " ERROR": "error",
    " SKIPPED": "skipped",
}


def generate_run_id():
    """Generate a short unique run ID."""
    return uuid.uuid4().hex[:8]


def _git(*args):
    try:
        result = subprocess.run(["git", *args], capture_output=True, text=True, timeout=5)
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    return result.stdout.strip() if result.returncode == 0 else "unknown"


def get_environment_info():
    """Collect environment information for the report."""
    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "os": platform.system(),
        "architecture": platform.machine(),
        "hostname": platform.node(),
        "git_commit": _git("rev-parse", "HEAD")[:8],
        "git_branch": _git("rev-parse", "--abbrev-ref", "HEAD"),
    }


def parse_pytest_verbose_output(output):
    """Turn lines like ``tests/test_core.py::test_x PASSED`` into result dicts."""
    tests = []
    for line in output.splitlines():
        line = line.strip()
        if "::" not in line:
            continue
        for marker, outcome in OUTCOMES.items():
            if marker in line:
                nodeid = line.split(marker)[0].strip()
                tests.append({
                    "nodeid": nodeid,
                    "name": nodeid.split("::")[-1],
                    "outcome": outcome,
                })
                break
    return tests


def summarize(tests):
    summary = {outcome: 0 for outcome in OUTCOMES.values()}
    for test in tests:
        summary[test["outcome"]] += 1
    summary["total"] = len(tests)
    return summary


def run_tests(tests_dir=PROJECT_ROOT / "tests", timeout=300):
    """
    Run pytest on the tests/ folder with src/ on PYTHONPATH.

    Returns:
        dict with per-test outcomes, counts and captured output
    """
    print(f"\n{'=' * 60}")
    print("RUNNING TESTS")
    print(f"{'=' * 60}")

    env = os.environ.copy()
    env["PYTHONPATH"] = str(PROJECT_ROOT / "src")
    cmd = [sys.executable, "-m", "pytest", str(tests_dir), "-v", "--tb=short"]

    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, cwd=str(PROJECT_ROOT), env=env, timeout=timeout
        )
    except subprocess.TimeoutExpired:
        print("❌ Test execution timed out")
        return {"success": False, "exit_code": -1, "tests": [], "summary": {"error": "timeout"}}

    tests = parse_pytest_verbose_output(result.stdout)
    summary = summarize(tests)
    print(
        f"\nResults: {summary['passed']} passed, {summary['failed']} failed, "
        f"{summary['error']} errors, {summary['skipped']} skipped (total: {summary['total']})"
    )
    for test in tests:
        icon = {"passed": "✅", "failed": "❌", "error": "💥", "skipped": "⏭️"}[test["outcome"]]
        print(f"  {icon} {test['nodeid']}: {test['outcome']}")

    return {
        "success": result.returncode == 0,
        "exit_code": result.returncode,
        "tests": tests,
        "summary": summary,
        "stdout": result.stdout[-3000:],
        "stderr": result.stderr[-1000:],
    }


def generate_output_path(now=None):
    """Output path in the form evaluation/YYYY-MM-DD/HH-MM-SS/report.json"""
    now = now or datetime.now()
    return PROJECT_ROOT / "evaluation" / now.strftime("%Y-%m-%d") / now.strftime("%H-%M-%S") / "report.json"


def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description="Run the Shannon-Fano test suite and write a report")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON file path (default: evaluation/YYYY-MM-DD/HH-MM-SS/report.json)",
    )
    args = parser.parse_args(argv)

    run_id = generate_run_id()
    started_at = datetime.now()
    print(f"Run ID: {run_id}")
    print(f"Started at: {started_at.isoformat()}")

    results = run_tests()
    finished_at = datetime.now()
    duration = (finished_at - started_at).total_seconds()

    report = {
        "run_id": run_id,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "duration_seconds": round(duration, 6),
        "success": results["success"],
        "error": None if results["success"] else "tests failed",
        "environment": get_environment_info(),
        "results": results,
    }

    output_path = Path(args.output) if args.output else generate_output_path(started_at)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)
    print(f"\n✅ Report saved to: {output_path}")
    print(f"Duration: {duration:.2f}s")
    print(f"Success: {'✅ YES' if results['success'] else '❌ NO'}")

    return 0 if results["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
