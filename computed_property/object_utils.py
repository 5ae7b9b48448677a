from functools import cache
from itertools import chain

from .computed_state import STATE_KEY, get_state
from .installer import ComputedAttribute, ComputedProperty
from .paths import MISSING


@cache
def get_class_slots(cls):
    """utility to collect all __slots__ entries for a given type and its supertypes"""
    # collect via iterables for performance
    # deduplicate via set
    slots = chain.from_iterable(_own_slots(klass) for klass in cls.__mro__)
    return {slot for slot in slots if slot not in ("__dict__", "__weakref__")}


def _own_slots(cls):
    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        return (slots,)
    return slots


def get_computed_names(cls):
    """utility to collect the names of the computed properties declared on a type"""
    # walk the mro from the base so that subclasses can shadow
    # a computed property with a plain attribute and vice versa
    names = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, ComputedAttribute):
                # routes to installations, look at what it replaced
                if value.previous is MISSING:
                    continue
                value = value.previous
            names[name] = isinstance(value, ComputedProperty)
    return [name for name, is_computed in names.items() if is_computed]


def get_installed_names(obj):
    """utility to collect the names of the computed properties installed on an object"""
    state = get_state(obj)
    return list(state.properties) if state is not None else []


def get_object_attrs(obj):
    """utility to collect all stateful attributes of an object"""
    # __slots__ from full class ancestry
    attrs = get_class_slots(type(obj))
    try:
        # all __dict__ entries
        obj_keys = vars(obj).keys() - {STATE_KEY}
        if obj_keys:
            attrs = attrs.copy()
            attrs.update(obj_keys)
    except TypeError:
        pass
    return attrs


def fields(obj):
    """
    Returns the names of the attributes of an object: the entries of its
    __dict__, its __slots__ and its computed properties, in that order.
    """
    names = dict.fromkeys(getattr(obj, "__dict__", ()))
    names.pop(STATE_KEY, None)
    names.update(dict.fromkeys(sorted(get_object_attrs(obj))))
    names.update(dict.fromkeys(get_computed_names(type(obj))))
    names.update(dict.fromkeys(get_installed_names(obj)))
    return list(names)


def to_dict(obj):
    """
    Returns a dict with the value of every attribute of an object.
    Computed properties contribute their current value. Slots that
    have not been assigned are left out.
    """
    result = {}
    for name in fields(obj):
        value = getattr(obj, name, MISSING)
        if value is not MISSING:
            result[name] = value
    return result
