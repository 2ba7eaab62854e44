"""Weekly earthquake significance clustering package."""

from .color import color_for
from .config import Settings
from .significance import build_significance_map, get_clusters, get_window

__all__ = ["Settings", "build_significance_map", "color_for", "get_clusters", "get_window"]
