"""Overlay layer tree with name index and visibility propagation."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from PySide6.QtCore import QObject, Signal

from .nodes import GroupNode, LayerNode, Node

_LOGGER = logging.getLogger(__name__)


class OverlayTree(QObject):
    """Own the overlay nodes and keep their ``visible`` flags consistent.

    Rules applied on every explicit toggle:

    * showing a node shows every hidden ancestor;
    * showing a child of a mutually exclusive group hides its siblings, at
      each level of the walk;
    * hiding never propagates;
    * layers directly inside a group-as-layer group stay visible, only the
      group itself can be toggled.

    Propagation runs as one iterative pass per request so a single call never
    interleaves with another.  ``visibilityChanged`` is emitted once per call
    with the final ``{name: visible}`` state of every node that changed.
    """

    visibilityChanged = Signal(object)

    def __init__(
        self,
        root: GroupNode,
        nodes: Iterable[Node],
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._root = root
        self._nodes: list[Node] = list(nodes)
        self._index: dict[str, Node] = {node.name: node for node in self._nodes}

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------
    @property
    def root(self) -> GroupNode:
        return self._root

    @property
    def layers_and_groups(self) -> list[Node]:
        """Every indexed node in construction order (children before groups)."""

        return list(self._nodes)

    @property
    def layers(self) -> list[LayerNode]:
        """Leaf layers in paint order."""

        return list(self._root.iter_layers())

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def get_layer_or_group_by_name(self, name: str) -> Optional[Node]:
        return self._index.get(name)

    def get_layer_by_name(self, name: str) -> Optional[LayerNode]:
        node = self._index.get(name)
        return node if isinstance(node, LayerNode) else None

    def get_layer_by_type_name(self, type_name: str) -> Optional[LayerNode]:
        """Return the leaf whose source advertises *type_name* as its layer id."""

        for layer in self._root.iter_layers():
            if layer.source.layer_identifier == type_name:
                return layer
        return None

    def parent_of(self, node: Node) -> Optional[GroupNode]:
        parent = self._index.get(node.parent_name) if node.parent_name else None
        return parent if isinstance(parent, GroupNode) else None

    def is_locked(self, node: Node) -> bool:
        """Return ``True`` when *node* is a layer whose group acts as a single layer."""

        if not isinstance(node, LayerNode):
            return False
        parent = self.parent_of(node)
        return parent is not None and parent.group_as_layer

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------
    def set_visible(self, name: str, visible: bool) -> bool:
        """Apply one toggle; return ``False`` when *name* is unknown."""

        node = self._index.get(name)
        if node is None:
            _LOGGER.debug("Ignoring visibility change for unknown node %s", name)
            return False
        self._commit(self._apply(node, visible, {}))
        return True

    def apply_visibility(self, requests: Mapping[str, bool]) -> dict[str, bool]:
        """Apply several toggles in order and notify observers once.

        Unknown names are skipped.  Returns the nodes whose state changed.
        """

        previous: dict[str, bool] = {}
        for name, visible in requests.items():
            node = self._index.get(name)
            if node is None:
                _LOGGER.debug("Ignoring visibility change for unknown node %s", name)
                continue
            self._apply(node, visible, previous)
        return self._commit(previous)

    def enforce_invariants(self) -> dict[str, bool]:
        """Bring the initial state in line with the group rules.

        Layers inside group-as-layer groups are shown, and mutually exclusive
        groups keep only their first configured visible child.  Nothing is
        propagated upwards: configured group states are kept as they are.
        """

        previous: dict[str, bool] = {}
        for node in self._nodes:
            if not isinstance(node, GroupNode):
                continue
            if node.group_as_layer:
                for child in node.children:
                    if isinstance(child, LayerNode) and not child.visible:
                        self._assign(child, True, previous)
                continue
            if node.mutually_exclusive:
                # Children are stored reversed, so the last visible one was
                # configured first.
                visible = [child for child in node.children if child.visible]
                for child in visible[:-1]:
                    self._assign(child, False, previous)
        return self._commit(previous)

    def _apply(self, node: Node, visible: bool, previous: dict[str, bool]) -> dict[str, bool]:
        if self.is_locked(node):
            _LOGGER.debug("Layer %s is controlled by its group", node.name)
            return previous
        if node.visible == visible:
            return previous
        self._assign(node, visible, previous)
        if visible:
            self._show_ancestors(node, previous)
        return previous

    def _show_ancestors(self, node: Node, previous: dict[str, bool]) -> None:
        child = node
        while True:
            parent = self.parent_of(child)
            if parent is None:
                return
            if parent.mutually_exclusive and not parent.group_as_layer:
                for sibling in parent.children:
                    if sibling is not child and sibling.visible:
                        self._assign(sibling, False, previous)
            if parent.visible:
                return
            self._assign(parent, True, previous)
            child = parent

    @staticmethod
    def _assign(node: Node, visible: bool, previous: dict[str, bool]) -> None:
        previous.setdefault(node.name, node.visible)
        node.visible = visible

    def _commit(self, previous: dict[str, bool]) -> dict[str, bool]:
        changes = {
            name: self._index[name].visible
            for name, before in previous.items()
            if self._index[name].visible != before
        }
        if changes:
            self.visibilityChanged.emit(changes)
        return changes


__all__ = ["OverlayTree"]
