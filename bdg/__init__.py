"""README badge block management and version classification."""

__version__ = "0.3.0"
