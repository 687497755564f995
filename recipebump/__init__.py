"""recipebump — keep package recipes in step with their upstream releases."""

__version__ = "0.1.0"
