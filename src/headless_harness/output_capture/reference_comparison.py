"""Comparison of collected guest output against a reference artifact."""

from __future__ import annotations

import difflib
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from headless_harness.verdicts import Verdict

_FAILURE_FRAME = "=============="


@dataclass(frozen=True)
class OutputComparison:
    """Result of comparing collected output with the reference artifact."""

    verdict: Verdict
    reference_path: Path
    diff: tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return self.verdict == Verdict.PASSED


def reference_path_for(boot_path: str | Path, suffix: str) -> Path:
    """Return the sibling reference artifact for a boot path."""
    return Path(boot_path).with_suffix(suffix)


def compare_output(
    boot_path: str | Path,
    captured: str,
    *,
    suffix: str,
    test_name: str,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> OutputComparison:
    """Compare collected output byte for byte with the reference artifact.

    A missing reference is reported on stderr. A mismatch prints the collected
    output followed by a unified diff; a match prints `OK`.
    """
    out = stdout or sys.stdout
    err = stderr or sys.stderr
    reference_path = reference_path_for(boot_path, suffix)
    try:
        expected_bytes = reference_path.read_bytes()
    except OSError:
        err.write(f"Expectation file {reference_path} not read\n")
        return OutputComparison(verdict=Verdict.REFERENCE_MISSING, reference_path=reference_path)

    actual_bytes = captured.encode("utf-8")
    if actual_bytes == expected_bytes:
        out.write("OK\n")
        return OutputComparison(verdict=Verdict.PASSED, reference_path=reference_path)

    expected_text = expected_bytes.decode("utf-8", errors="replace")
    diff = tuple(
        difflib.unified_diff(
            expected_text.splitlines(keepends=True),
            captured.splitlines(keepends=True),
            fromfile=str(reference_path),
            tofile=f"{test_name} (actual)",
        )
    )
    out.write(captured)
    if captured and not captured.endswith("\n"):
        out.write("\n")
    out.write(f"{_FAILURE_FRAME} output from failed {test_name}:\n")
    for line in diff:
        out.write(line if line.endswith("\n") else f"{line}\n")
    out.write(f"{_FAILURE_FRAME}\n")
    return OutputComparison(
        verdict=Verdict.CONTENT_MISMATCH,
        reference_path=reference_path,
        diff=diff,
    )
