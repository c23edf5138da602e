"""thoth - ask several models, keep the answer they agree on."""

__version__ = "0.1.0"
