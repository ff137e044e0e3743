"""Backend proxy server module."""

from .app import create_app, decode_data_url

__all__ = ["create_app", "decode_data_url"]
