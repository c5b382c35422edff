"""Release tooling for Zulip Server."""

__version__ = "0.1.0"
