"""Output module for rendering inventory reports."""

from .render import render_human, render_json

__all__ = ["render_human", "render_json"]
