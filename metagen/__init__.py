"""metagen — run external metadata commands and detect changes."""

__version__ = "0.1.0"
