"""
Tree rendering for settings.

A ``Node`` holds a title and child nodes. Rendering walks the tree once:
every child line gets the branch prefix except the last one of its parent,
which gets the leaf prefix, and nested children are indented one unit per
depth. Glyphs and indentation come from an explicit ``LineStyle``, with the
defaults producing::

    OpenVPN settings:
    ├── OpenVPN version: 2.5
    └── Flags:
        ├── --fast-io
        └── --pull-filter
"""

from __future__ import annotations

import typing as _typing

import tunnelconf.settings.base as base
import tunnelconf.settings.optional as optional

DEFAULT_INDENT = "    "
DEFAULT_FIELD_PREFIX = "├── "
DEFAULT_LAST_FIELD_PREFIX = "└── "


class LineStyle(base.SettingsBase):
    """Prefixes and indentation used when rendering a tree."""

    indent: str | optional.Unset = optional.UNSET
    field_prefix: str | optional.Unset = optional.UNSET
    last_field_prefix: str | optional.Unset = optional.UNSET

    def _defaults(self, context: base.DefaultsContext) -> dict[str, _typing.Any]:  # noqa: ARG002
        return {
            "indent": DEFAULT_INDENT,
            "field_prefix": DEFAULT_FIELD_PREFIX,
            "last_field_prefix": DEFAULT_LAST_FIELD_PREFIX,
        }

    def resolved(self) -> LineStyle:
        """Return a copy with every unset prefix filled with its default."""
        return self._with_defaults()


class Node:
    """A titled tree node."""

    def __init__(self, title: str = "") -> None:
        """
        Args:
            title: Text of this node. A node with an empty title renders
                only its children (a root-less list).
        """
        self.title = title
        self.children: list[Node] = []

    def append(self, text: str) -> Node:
        """Append a child with the given text and return it."""
        child = Node(text)
        self.children.append(child)
        return child

    def appendf(self, fmt: str, *args: _typing.Any) -> Node:
        """Append a child from a ``%`` format string and return it."""
        return self.append(fmt % args if args else fmt)

    def add(self, node: Node) -> None:
        """Append an existing node as a child."""
        self.children.append(node)

    def to_lines(self, style: LineStyle | None = None) -> list[str]:
        """
        Render the tree as a list of lines.

        Args:
            style: Prefix configuration. Unset prefixes use the defaults.
        """
        resolved = (style or LineStyle()).resolved()
        lines = [self.title] if self.title else []
        lines.extend(self._child_lines(resolved, depth=0))
        return lines

    def _child_lines(self, style: LineStyle, depth: int) -> list[str]:
        lines: list[str] = []
        indent = _typing.cast(str, style.indent) * depth
        last_index = len(self.children) - 1
        for index, child in enumerate(self.children):
            prefix = style.last_field_prefix if index == last_index else style.field_prefix
            lines.append(f"{indent}{prefix}{child.title}")
            lines.extend(child._child_lines(style, depth + 1))
        return lines

    def __str__(self) -> str:
        return "\n".join(self.to_lines())
