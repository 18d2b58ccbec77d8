"""Dependency trackers.

A tracker is called as ``tracker.call(name, template, view_paths)`` and
returns virtual paths. ``RenderTracker`` parses embedded code;
``RegexTracker`` is the text-scanning fallback.
"""

from viewdeps.trackers.regex import RegexTracker
from viewdeps.trackers.render import RenderTracker

__all__ = ["RegexTracker", "RenderTracker"]
