"""HTTP service exposing expression evaluation."""

from pemdas.api.app import app, create_app

__all__ = ["app", "create_app"]
