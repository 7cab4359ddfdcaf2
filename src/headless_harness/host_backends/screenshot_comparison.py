"""Pixel-level comparison of a rendered frame against a reference image."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageChops


@dataclass(frozen=True)
class ScreenshotComparison:
    """Outcome of comparing one frame with the reference screenshot."""

    reference_path: Path
    differing_pixels: int = 0
    total_pixels: int = 0
    error_message: str | None = None

    @property
    def passed(self) -> bool:
        return self.error_message is None and self.differing_pixels == 0

    @property
    def error_ratio(self) -> float:
        if not self.total_pixels:
            return 0.0
        return self.differing_pixels / self.total_pixels

    def describe(self) -> str:
        """Render the line sent through the host debug channel."""
        if self.error_message is not None:
            return f"Screenshot comparison failed: {self.error_message}\n"
        return f"Screenshot error: {self.error_ratio * 100.0:f}%\n"

    @staticmethod
    def failed(reference_path: Path, error_message: str) -> ScreenshotComparison:
        return ScreenshotComparison(reference_path=reference_path, error_message=error_message)


def compare_screenshot(
    frame: Image.Image | None, reference_path: str | Path
) -> ScreenshotComparison:
    """Count pixels of `frame` that differ from the reference image in any channel."""
    reference_file = Path(reference_path)
    if frame is None:
        return ScreenshotComparison.failed(reference_file, "no frame available")
    try:
        with Image.open(reference_file) as reference_image:
            reference = reference_image.convert("RGB")
    except OSError as exc:
        return ScreenshotComparison.failed(reference_file, f"cannot read {reference_file}: {exc}")

    actual = frame.convert("RGB")
    if actual.size != reference.size:
        return ScreenshotComparison.failed(
            reference_file,
            f"size mismatch: frame {actual.size[0]}x{actual.size[1]}, "
            f"reference {reference.size[0]}x{reference.size[1]}",
        )

    red, green, blue = ImageChops.difference(actual, reference).split()
    peak = ImageChops.lighter(ImageChops.lighter(red, green), blue)
    mask = peak.point(lambda value: 255 if value else 0)
    differing = mask.histogram()[255]
    return ScreenshotComparison(
        reference_path=reference_file,
        differing_pixels=differing,
        total_pixels=actual.size[0] * actual.size[1],
    )
