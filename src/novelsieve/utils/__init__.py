"""Utility modules for novelsieve."""

from .atomic import atomic_write_json, atomic_write_text
from .urls import resolve_http_url

__all__ = ["atomic_write_json", "atomic_write_text", "resolve_http_url"]
