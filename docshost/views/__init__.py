"""Presentation layer: navigation header view-model and template helpers."""
from .helpers import register_template_helpers
from .navigation import NavigationView, render_navigation

__all__ = ["NavigationView", "register_template_helpers", "render_navigation"]
