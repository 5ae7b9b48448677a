"""
Snapshots hold the last observed value of every dependency of a
computed property. Comparing a snapshot with the live target tells
whether the cached value of the property can still be used.
"""

import logging

import patchdiff

from .paths import (
    CONTAINER_TYPES,
    SCALAR_TYPES,
    assign_segments,
    copy_containers,
    deep_copy,
    resolve,
    resolve_segments,
    split_path,
)

logger = logging.getLogger(__name__)

# Key under which a node of the snapshot stores the value of its path.
# Keeping values next to (instead of in place of) the child nodes
# means that watching both "name" and "name.first" never writes into
# the stored value of "name".
_VALUE = object()


class Snapshot:
    """
    Nested record that mirrors the shape of the dependency paths.

    deep: Compare container values structurally instead of by identity
    """

    __slots__ = ("_tree", "deep")

    def __init__(self, deep=False):
        self._tree = {}
        self.deep = deep

    def get(self, path):
        return resolve_segments(self._tree, (*split_path(path), _VALUE))

    def set(self, path, value):
        assign_segments(self._tree, (*split_path(path), _VALUE), value)

    def __contains__(self, path):
        return _has_value(self._tree, path)

    def __repr__(self):
        return f"Snapshot({_to_plain(self._tree)!r}, deep={self.deep})"


def _has_value(tree, path):
    node = resolve_segments(tree, split_path(path))
    return isinstance(node, dict) and _VALUE in node


def _to_plain(node):
    plain = {}
    for key, child in node.items():
        if key is _VALUE:
            continue
        plain[key] = child[_VALUE] if set(child) == {_VALUE} else _to_plain(child)
    return plain


def init_watch(snapshot, target, dependencies):
    """
    Stores a copy of the current value of every dependency in the
    snapshot. Returns whether there is anything to watch at all.
    """
    for path in dependencies:
        snapshot.set(path, deep_copy(resolve(target, path)))
    return len(dependencies) > 0


def differs(stored, current, deep=False):
    if current is stored:
        return False
    if isinstance(current, SCALAR_TYPES) and isinstance(stored, SCALAR_TYPES):
        return type(current) is not type(stored) or current != stored
    if not deep:
        return True
    if not (
        isinstance(current, CONTAINER_TYPES) and type(stored) is type(current)
    ):
        return True
    ops, _ = patchdiff.diff(stored, current)
    if ops:
        logger.debug("Detected changes: %s", ops)
    return bool(ops)


def has_changed(snapshot, target, dependencies):
    """
    Compares every dependency of the target with its stored value
    and stores the new value of every dependency that changed.
    All dependencies are checked, even after a change was found,
    so that the snapshot is fully up to date afterwards.
    """
    changed = False
    for path in dependencies:
        current = resolve(target, path)
        if differs(snapshot.get(path), current, deep=snapshot.deep):
            logger.debug("Dependency %r changed", path)
            snapshot.set(path, copy_containers(current) if snapshot.deep else current)
            changed = True
    return changed
