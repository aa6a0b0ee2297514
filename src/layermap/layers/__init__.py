"""Base layer set, overlay tree and the builder connecting them to configuration."""

from .base_layers import BaseLayer, BaseLayerSet, web_mercator_tile_grid
from .builder import TreeBuilder, build_overlay_tree
from .nodes import GroupNode, LayerNode, Node, TreeNode
from .overlay_tree import OverlayTree

__all__ = [
    "BaseLayer",
    "BaseLayerSet",
    "GroupNode",
    "LayerNode",
    "Node",
    "OverlayTree",
    "TreeBuilder",
    "TreeNode",
    "build_overlay_tree",
    "web_mercator_tile_grid",
]
