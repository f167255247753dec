"""Flask JSON API over the investment calculations."""

from .app import create_app

__all__ = ["create_app"]
