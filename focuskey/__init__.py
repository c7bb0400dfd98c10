"""FocusKey: focus sessions that block distracting apps, with counted breaks."""

__version__ = "0.1.0"
