"""PrepWise interview response evaluation service."""

__version__ = "1.0.0"
