"""
Console Output Helpers
======================

[CLI] Human-facing progress output for the scripts. Library modules log;
scripts print through Console.
"""

import sys


class Console:
    """Formatted console output."""

    @staticmethod
    def header(text: str):
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    @staticmethod
    def section(text: str):
        print(f"\n=== {text} ===")

    @staticmethod
    def info(text: str):
        print(f"[INFO] {text}")

    @staticmethod
    def success(text: str):
        print(f"[OK] {text}")

    @staticmethod
    def warning(text: str):
        print(f"[WARN] {text}")

    @staticmethod
    def error(text: str):
        print(f"[ERROR] {text}", file=sys.stderr)

    @staticmethod
    def step(num: int, total: int, text: str):
        print(f"\n[{num}/{total}] {text}")
        print("-" * 40)

    @staticmethod
    def kv(key: str, value, indent: int = 2):
        print(f"{' '*indent}{key}: {value}")

    @staticmethod
    def env_line(key: str, value):
        print(f"{key}={value}")
