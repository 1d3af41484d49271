"""Command-line interface for the glossary tooling."""

from .main import app

__all__ = ["app"]
