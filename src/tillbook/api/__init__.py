"""HTTP API for tillbook."""

from tillbook.api.app import create_app

__all__ = ["create_app"]
