#!/usr/bin/env python3
"""
Test runner script for Edit Pilot.

Wraps pytest with the marker selections and reporting options used in
development.
"""

import argparse
import subprocess
import sys
from pathlib import Path


def run_tests(args):
    """Run the test suite with specified options."""
    cmd = [sys.executable, "-m", "pytest", "src/edit_pilot/tests"]

    if args.verbose:
        cmd.extend(["-v", "-s", "--capture=no"])
    else:
        cmd.append("-v")

    markers = []
    if args.unit:
        markers.append("unit")
    elif args.integration:
        markers.append("integration")
    if not args.include_slow:
        markers.append("not slow")
    if markers:
        cmd.extend(["-m", " and ".join(markers)])

    if args.coverage:
        cmd.extend([
            "--cov=src/edit_pilot",
            "--cov-report=html",
            "--cov-report=term-missing"
        ])

    if args.pytest_args:
        cmd.extend(args.pytest_args.split())

    print(f"Running command: {' '.join(cmd)}")
    print("-" * 60)

    try:
        result = subprocess.run(cmd, cwd=Path(__file__).parent)
        return result.returncode
    except KeyboardInterrupt:
        print("\nTest run interrupted by user")
        return 1
    except OSError as e:
        print(f"Error running tests: {e}")
        return 1


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Run Edit Pilot tests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_tests.py                    # Run all tests
  python run_tests.py --unit             # Run only unit tests
  python run_tests.py --integration      # Run only integration tests
  python run_tests.py --coverage         # Run with coverage reporting
        """
    )

    parser.add_argument("--unit", action="store_true", help="Run only unit tests")
    parser.add_argument("--integration", action="store_true", help="Run only integration tests")
    parser.add_argument("--verbose", "-v", action="store_true", help="Run tests with verbose output")
    parser.add_argument("--coverage", action="store_true", help="Generate coverage report")
    parser.add_argument("--include-slow", action="store_true", help="Include slow tests in the run")
    parser.add_argument("--pytest-args", type=str, help="Additional arguments to pass to pytest")

    args = parser.parse_args()

    try:
        subprocess.run(
            [sys.executable, "-m", "pytest", "--version"],
            capture_output=True,
            check=True
        )
    except subprocess.CalledProcessError:
        print("❌ pytest is not installed or not available")
        print("💡 Install with: pip install -e \".[dev]\"")
        return 1

    return run_tests(args)


if __name__ == "__main__":
    sys.exit(main())
