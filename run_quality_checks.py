#!/usr/bin/env python
"""Local quality checks and tests runner with auto-fix capabilities.

Runs formatting, import ordering, lint, type, dead code, complexity and test
checks over the svdhtml package, optionally applying black/isort fixes.

Usage:
    python run_quality_checks.py                    # Run all checks (no fixes)
    python run_quality_checks.py --fix              # Run all checks + auto fixes
    python run_quality_checks.py --fix --skip lint  # Fix but skip linting
    python run_quality_checks.py --verbose          # Detailed output
"""

import argparse
import subprocess
import sys

# Directories to check
PACKAGE_DIR = "svdhtml"
TESTS_DIR = "tests"
DIRS_TO_CHECK = [PACKAGE_DIR, TESTS_DIR]

CHECK_KEYS = ["formatting", "imports", "lint", "type", "deadcode", "complexity", "tests"]


class CheckRunner:
    """Runs quality checks and tests with optional auto-fixes."""

    def __init__(self, fix: bool = False, verbose: bool = False, skip_checks=None):
        self.fix = fix
        self.verbose = verbose
        self.skip_checks = set(skip_checks or [])
        self.failed_checks: list[str] = []
        self.passed_checks: list[str] = []

    def run_command(self, key: str, cmd: list[str], name: str, show_output: bool = False) -> bool:
        """Run one check command and record the result.

        Args:
            key: Short check key matched against --skip
            cmd: Command and arguments as list
            name: Friendly name for the summary
            show_output: Stream output even without --verbose

        Returns:
            True if the command succeeded or was skipped
        """
        if key in self.skip_checks:
            print(f"-- skipping {name}")
            return True

        print(f"\n{'=' * 70}")
        print(f"Running: {name}")
        print(f"{'=' * 70}")

        try:
            if self.verbose or show_output:
                result = subprocess.run(cmd, check=False)
            else:
                result = subprocess.run(cmd, check=False, capture_output=True, text=True)
                if result.returncode != 0:
                    print(result.stdout)
                    print(result.stderr)
        except FileNotFoundError as e:
            print(f"error: {e}")
            print("   Install the dev tools: pip install -e .[dev]")
            self.failed_checks.append(name)
            return False

        if result.returncode == 0:
            print(f"OK   {name}")
            self.passed_checks.append(name)
            return True
        print(f"FAIL {name}")
        self.failed_checks.append(name)
        return False

    def checks(self) -> list[tuple[str, list[str], str, bool]]:
        """(key, command, name, show_output) for every check, in run order."""
        black = ["black", *DIRS_TO_CHECK] if self.fix else ["black", "--check", *DIRS_TO_CHECK]
        isort = ["isort", *DIRS_TO_CHECK] if self.fix else ["isort", "--check-only", *DIRS_TO_CHECK]
        return [
            ("formatting", black, "Black formatting", False),
            ("imports", isort, "isort import ordering", False),
            ("lint", ["pylint", PACKAGE_DIR], "Pylint", False),
            ("type", ["mypy", PACKAGE_DIR], "Mypy", False),
            ("deadcode", ["vulture", PACKAGE_DIR], "Vulture dead code", False),
            ("complexity", ["radon", "cc", PACKAGE_DIR, "-a"], "Radon complexity", True),
            (
                "tests",
                [
                    "pytest",
                    f"--cov={PACKAGE_DIR}",
                    "--cov-report=term-missing",
                    "--cov-report=xml",
                    TESTS_DIR,
                ],
                "Pytest + coverage",
                True,
            ),
        ]

    def print_summary(self) -> None:
        print(f"\n{'=' * 70}")
        print("SUMMARY")
        print(f"{'=' * 70}")

        if self.passed_checks:
            print(f"\nPassed ({len(self.passed_checks)}):")
            for check in self.passed_checks:
                print(f"   - {check}")

        if self.failed_checks:
            print(f"\nFailed ({len(self.failed_checks)}):")
            for check in self.failed_checks:
                print(f"   - {check}")
        else:
            print("\nAll checks passed!")

    def run_all(self) -> int:
        """Run all checks in order.

        Returns:
            0 if all checks passed, non-zero otherwise
        """
        fix_text = "with auto-fixes" if self.fix else "without fixes"
        print(f"\nStarting quality checks {fix_text}...\n")

        for key, cmd, name, show_output in self.checks():
            self.run_command(key, cmd, name, show_output)

        self.print_summary()
        return 0 if not self.failed_checks else 1


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Run local quality checks and tests with optional auto-fixes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_quality_checks.py              # Run all checks
  python run_quality_checks.py --fix        # Run + auto-fix formatting/imports
  python run_quality_checks.py --skip deadcode  # Skip dead code check
        """,
    )
    parser.add_argument(
        "--fix",
        "--apply",
        action="store_true",
        dest="fix",
        help="Automatically fix issues (formatting, imports) where possible",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show detailed output from all commands",
    )
    parser.add_argument(
        "--skip",
        nargs="+",
        default=[],
        choices=CHECK_KEYS,
        help="Skip specific checks",
    )
    args = parser.parse_args()

    runner = CheckRunner(fix=args.fix, verbose=args.verbose, skip_checks=args.skip)
    return runner.run_all()


if __name__ == "__main__":
    sys.exit(main())
