"""
UI module for tunnelconf.

Renders resolved settings as a human readable tree.
"""

from tunnelconf.ui.tree import LineStyle, Node

__all__ = ["LineStyle", "Node"]
