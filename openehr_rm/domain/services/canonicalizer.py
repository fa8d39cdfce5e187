"""Canonicalizer - stamps every node with its authoritative type name.

Canonicalization is functional: the input tree is never mutated and a new
tree is returned in which every node's ``_type`` equals its ``rm_type``.
Subtrees that are already canonical are shared with the input rather than
copied, which also makes the pass idempotent by construction.

Architecture:
    - One generic walker over ``model_fields``; no per-type code
    - Recurses into fixed children, list elements and populated union slots
    - Union slots holding the unknown kind are passed through untouched
    - Depth is bounded; a deeper tree raises ``MaxDepthExceededError``
"""

import logging
from typing import Any, Optional, TypeVar

from openehr_rm.domain.base import RMObject, default_max_depth
from openehr_rm.domain.ports import MaxDepthExceededError
from openehr_rm.domain.union import TaggedUnion

logger = logging.getLogger(__name__)

N = TypeVar('N', bound=RMObject)


class Canonicalizer:
    """Walks a tree and returns a copy with every ``_type`` stamped.

    Parameters:
        max_depth: Maximum node nesting (defaults to the configured limit)
    """

    def __init__(self, max_depth: Optional[int] = None):
        self.max_depth = max_depth if max_depth is not None else default_max_depth()

    def canonicalize(self, node: N) -> N:
        """Return ``node`` with its whole subtree stamped.

        Raises:
            MaxDepthExceededError: If the tree nests deeper than ``max_depth``
        """
        return self._node(node, 1)

    def _node(self, node: RMObject, depth: int) -> RMObject:
        if depth > self.max_depth:
            logger.warning("Canonicalization stopped at depth %d in %s", depth, node.rm_type)
            raise MaxDepthExceededError(self.max_depth, path=node.rm_type)

        update: dict[str, Any] = {}
        if node.type_ != node.rm_type:
            update["type_"] = node.rm_type
        for name in type(node).model_fields:
            if name == "type_":
                continue
            value = getattr(node, name)
            if value is None:
                continue
            stamped = self._value(value, depth)
            if stamped is not value:
                update[name] = stamped

        if not update:
            return node
        return node.model_copy(update=update)

    def _value(self, value: Any, depth: int) -> Any:
        if isinstance(value, RMObject):
            return self._node(value, depth + 1)
        if isinstance(value, TaggedUnion):
            if value.is_unknown:
                return value
            stamped = self._node(value.value, depth + 1)
            return value if stamped is value.value else type(value)(stamped)
        if isinstance(value, list):
            items = [self._value(item, depth) for item in value]
            if all(new is old for new, old in zip(items, value)):
                return value
            return items
        return value


def canonicalize(node: N, max_depth: Optional[int] = None) -> N:
    """Stamp ``node`` and all descendants with their type names.

    Parameters:
        node: Root of the tree (any concrete type)
        max_depth: Optional override of the configured nesting limit

    Returns:
        A tree equal to ``node`` except that every ``_type`` is set
    """
    return Canonicalizer(max_depth).canonicalize(node)
