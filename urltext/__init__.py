"""urltext: fetch a URL and return its plain text."""

__version__ = "1.0.0"
