"""
Computed property state is kept on the target object itself, in its
__dict__, so that it is collected together with the target even when a
cached value refers back to the target.
"""

from .errors import InvalidArgumentError

STATE_KEY = "__computed_state__"


class ComputedState:
    """
    The computed properties that were installed on one target and the
    computed slot of every computed property that has been read on it.

    owner: id of the object whose __dict__ holds the state
    """

    __slots__ = ("owner", "properties", "slots")

    def __init__(self, owner=None, properties=None):
        self.owner = owner
        self.properties = {} if properties is None else properties
        self.slots = {}

    def adopt(self, owner):
        """
        Returns the state for a copy of the target: the same installed
        properties, but none of the cached values.
        """
        return ComputedState(owner, dict(self.properties))

    def __deepcopy__(self, memo):
        return ComputedState(None, dict(self.properties))

    def __reduce__(self):
        # getters are usually lambdas or closures, so installed
        # properties are not pickled along with the target
        return (ComputedState, ())

    def __repr__(self):
        return f"ComputedState({list(self.properties)!r})"


def namespace_of(target):
    try:
        return vars(target)
    except TypeError as e:
        raise InvalidArgumentError(
            f"Can't track computed properties on {type(target).__name__!r} "
            "objects, they have no __dict__"
        ) from e


def get_state(target):
    """
    Returns the state of the target, or None when nothing was installed
    on or read from it yet
    """
    namespace = getattr(target, "__dict__", None)
    if namespace is None:
        return None
    state = namespace.get(STATE_KEY)
    if state is not None and state.owner != id(target):
        # the __dict__ was copied from another object
        state = namespace[STATE_KEY] = state.adopt(id(target))
    return state


def ensure_state(target):
    state = get_state(target)
    if state is None:
        state = namespace_of(target)[STATE_KEY] = ComputedState(id(target))
    return state
