"""entroscan - find high-entropy strings (likely secrets) in files."""

__version__ = "0.3.0"
