"""Nodes of the overlay layer tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from ..models.config import Extent
from ..models.sources import LayerSourceSpec


@dataclass(slots=True, kw_only=True)
class TreeNode:
    """Attributes shared by layers and groups.

    ``parent_name`` is a lookup key into the tree index, never a reference to
    the parent object: ownership only flows from a group to its children.
    """

    name: str
    parent_name: Optional[str] = None
    visible: bool = False


@dataclass(slots=True, kw_only=True)
class LayerNode(TreeNode):
    source: LayerSourceSpec
    title: Optional[str] = None
    extent: Optional[Extent] = None
    min_resolution: Optional[float] = None
    max_resolution: Optional[float] = None

    def renders_at(self, resolution: float) -> bool:
        """Return ``True`` when *resolution* lies within the layer's scale range."""

        if self.min_resolution is not None and resolution < self.min_resolution:
            return False
        if self.max_resolution is not None and resolution >= self.max_resolution:
            return False
        return True


@dataclass(slots=True, kw_only=True)
class GroupNode(TreeNode):
    # Paint order: the last child is drawn on top.
    children: list["Node"] = field(default_factory=list)
    mutually_exclusive: bool = False
    group_as_layer: bool = False

    def iter_layers(self) -> Iterator[LayerNode]:
        """Yield every leaf layer below the group in paint order."""

        for child in self.children:
            if isinstance(child, GroupNode):
                yield from child.iter_layers()
            else:
                yield child


Node = Union[LayerNode, GroupNode]


__all__ = ["GroupNode", "LayerNode", "Node", "TreeNode"]
