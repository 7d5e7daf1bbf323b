"""Pytest configuration for the es6-spread test suite."""

import shutil
import sys
from pathlib import Path

import pytest

# Add the project root to path so es6_spread imports without installing
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))


def parse_spec_file(path: Path) -> list[tuple[str, list[str], list[str]]]:
    """Parse a .tests file into (name, input_lines, expected_lines) tuples.

    Format:

        === test name
        input lines
        ---
        expected lines
        ---
    """
    lines = path.read_text().split("\n")
    result: list[tuple[str, list[str], list[str]]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            result.append((test_name, input_lines, expected_lines))
        else:
            i += 1
    return result


def discover_specs(test_dir: Path) -> list[tuple[str, list[str], list[str]]]:
    """Glob *.tests in test_dir, return (test_id, input_lines, expected_lines)."""
    results = []
    for test_file in sorted(test_dir.glob("*.tests")):
        for name, input_lines, expected_lines in parse_spec_file(test_file):
            results.append((f"{test_file.stem}/{name}", input_lines, expected_lines))
    return results


@pytest.fixture(scope="session")
def node() -> str:
    """Path to the node binary; skips the test when node is not installed."""
    path = shutil.which("node")
    if path is None:
        pytest.skip("node not installed")
    return path
