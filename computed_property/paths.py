"""
Dependency paths address values in nested records, e.g. ``"name.first"``.
Every segment is looked up as a key on mappings, as an index on
sequences and as an attribute on anything else.
"""

import logging
from collections.abc import (
    Iterable,
    Mapping,
    MutableMapping,
    MutableSequence,
    Sequence,
)
from copy import Error as CopyError
from copy import copy

from .errors import InvalidArgumentError
from .settings import settings

logger = logging.getLogger(__name__)


class Missing:
    """
    Value of a path that doesn't resolve. There is only ever one
    instance: MISSING.
    """

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return "MISSING"


MISSING = Missing()

# values that are compared by value instead of by identity
SCALAR_TYPES = (type(None), bool, int, float, complex, str, bytes, Missing)


def split_path(path):
    if not isinstance(path, str):
        raise InvalidArgumentError(
            f"Expected dependency path to be a string but got {type(path).__name__}"
        )
    return tuple(path.split(settings.separator))


def flatten(dependencies):
    """
    Collapses a (possibly nested) collection of dependency paths
    into a flat list. A single string counts as a single path.
    """
    if dependencies is None:
        return []
    return list(_iter_paths(dependencies))


def _iter_paths(dependencies):
    if isinstance(dependencies, str):
        yield dependencies
        return
    if not isinstance(dependencies, Iterable):
        raise InvalidArgumentError(
            "Expected dependencies to be a string or a collection of strings "
            f"but got {type(dependencies).__name__}"
        )
    for dependency in dependencies:
        yield from _iter_paths(dependency)


def _as_index(segment):
    if isinstance(segment, int) and not isinstance(segment, bool):
        return segment
    if isinstance(segment, str) and segment.isdigit():
        return int(segment)
    return None


def get_segment(node, segment):
    if isinstance(node, Mapping):
        return node.get(segment, MISSING)
    if isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
        index = _as_index(segment)
        if index is None:
            return MISSING
        try:
            return node[index]
        except IndexError:
            return MISSING
    if isinstance(segment, str):
        return getattr(node, segment, MISSING)
    return MISSING


def set_segment(node, segment, value):
    if isinstance(node, MutableMapping):
        node[segment] = value
    elif isinstance(node, MutableSequence) and _as_index(segment) is not None:
        index = _as_index(segment)
        if index == len(node):
            node.append(value)
        else:
            node[index] = value
    else:
        setattr(node, segment, value)


def resolve_segments(record, segments, default=MISSING):
    node = record
    for segment in segments:
        node = get_segment(node, segment)
        if node is MISSING:
            return default
    return node


def assign_segments(record, segments, value):
    if not segments:
        raise InvalidArgumentError("Can't assign to an empty path")
    *parents, leaf = segments
    node = record
    for segment in parents:
        child = get_segment(node, segment)
        if isinstance(child, SCALAR_TYPES):
            child = {}
            set_segment(node, segment, child)
        node = child
    set_segment(node, leaf, value)


def resolve(record, path, default=MISSING):
    """
    Returns the value at the given path, or `default` when any
    of the segments of the path is absent.
    """
    return resolve_segments(record, split_path(path), default=default)


def assign(record, path, value):
    """
    Writes the value at the given path. Intermediate segments that
    are absent (or hold a plain value) are replaced by new dicts.
    """
    assign_segments(record, split_path(path), value)


def deep_copy(value):
    """
    Returns a copy of the value that shares no references with it.
    Plain values are returned as is. Values that can't be copied
    are returned as is as well.
    """
    if isinstance(value, SCALAR_TYPES):
        return value
    try:
        return settings.copier(value)
    except (CopyError, TypeError) as e:
        logger.debug(
            "Keeping a reference to %s value, it can't be copied: %s",
            type(value).__name__,
            e,
        )
        return value


# values that deep change detection looks inside of
CONTAINER_TYPES = (dict, list, set, tuple)


def copy_containers(value):
    """
    Returns a copy of the nested dicts, lists, sets and tuples of the value.
    Anything else inside of them is kept by reference, so that it can
    still be compared by identity.
    """
    if isinstance(value, dict):
        copied = copy(value)
        for key, item in value.items():
            copied[key] = copy_containers(item)
        return copied
    if isinstance(value, list):
        copied = copy(value)
        copied[:] = [copy_containers(item) for item in value]
        return copied
    if isinstance(value, set):
        return copy(value)
    if type(value) is tuple:
        return tuple(copy_containers(item) for item in value)
    return value
