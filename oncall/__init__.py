"""Voice-to-mockup ticket pipeline."""

__version__ = "0.1.0"
