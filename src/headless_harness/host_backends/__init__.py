"""Host backend domain exports."""

from .graphical_hosts import GlesHost, GraphicalHost, NativeHost, SoftwareHost
from .host_contracts import FrameReader, GraphicsInitResult, HeadlessHost
from .host_selection import available_backends, select_host
from .screenshot_comparison import ScreenshotComparison, compare_screenshot

__all__ = [
    "FrameReader",
    "GraphicsInitResult",
    "HeadlessHost",
    "GraphicalHost",
    "GlesHost",
    "NativeHost",
    "SoftwareHost",
    "available_backends",
    "select_host",
    "ScreenshotComparison",
    "compare_screenshot",
]
