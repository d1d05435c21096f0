"""Inworld JWT token generation with IW1-HMAC-SHA256 request signing."""

__version__ = "0.1.0"
