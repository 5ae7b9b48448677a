"""
Computed properties are read-only attributes whose value is derived
from other attributes of the same object. The value is cached and only
recomputed when one of the declared dependencies changed since the
previous read.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar, Union

from .computed_state import ensure_state, get_state, namespace_of
from .errors import InvalidArgumentError, ReadOnlyPropertyError
from .paths import MISSING, flatten
from .snapshot import Snapshot, has_changed, init_watch

logger = logging.getLogger(__name__)

T = TypeVar("T")
Getter = Union[Callable[[Any], T], Callable[[], T]]
Dependencies = Union[str, Iterable[Any], None]


class ComputedSlot:
    """
    Cached value of one computed property on one target, together with
    the snapshot of the dependencies it was computed from.
    """

    __slots__ = ("computed", "snapshot", "value")

    def __init__(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot
        self.value = None
        self.computed = False

    def __repr__(self) -> str:
        state = f"cached={self.value!r}" if self.computed else "dirty"
        return f"ComputedSlot({state})"


def accepts_target(fn: Callable) -> bool:
    """
    Returns whether the getter should be called with the target as
    argument. Raises InvalidArgumentError if the getter can be called
    neither with nor without the target.
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # builtins without a signature
        return True

    for args in ((None,), ()):
        try:
            signature.bind(*args)
        except TypeError:
            continue
        return len(args) == 1

    raise InvalidArgumentError(
        f"Expected getter {fn!r} to accept the target as its only argument"
    )


class ComputedProperty(Generic[T]):
    """
    Data descriptor that implements a computed property.

    Can be declared on a class (see `computed`) or installed on
    a single object (see `install`).
    """

    on_installed: Optional[Callable[[ComputedProperty, Any], None]] = None
    on_recomputed: Optional[Callable[[ComputedProperty, Any], None]] = None

    def __init__(
        self,
        getter: Getter[T],
        dependencies: Dependencies = None,
        name: str | None = None,
        deep: bool = False,
    ) -> None:
        """
        getter: Function that computes the value from the target
        dependencies: Paths of the attributes the value depends on
        name: Name of the attribute, set automatically on classes
        deep: Detect in-place changes of container dependencies
        """
        if not callable(getter):
            raise InvalidArgumentError(
                f"Expected getter to be callable but got {type(getter).__name__}"
            )
        self.getter = getter
        self.pass_target = accepts_target(getter)
        self.dependencies = flatten(dependencies)
        self.deep = bool(deep)
        self.name = None
        if name is not None:
            self.__set_name__(None, name)
        self.__doc__ = getattr(getter, "__doc__", None)

    def __set_name__(self, owner: type, name: str) -> None:
        if name in self.dependencies:
            raise InvalidArgumentError(
                f"Computed property {name!r} can't depend on itself"
            )
        if self.name is None:
            self.name = name
        elif self.name != name:
            raise InvalidArgumentError(
                f"Can't use the same computed property for two different names "
                f"({self.name!r} and {name!r})"
            )

    def __get__(self, instance: Any, owner: type | None = None) -> T:
        if instance is None:
            return self

        slot = ensure_state(instance).slots.get(self)
        if slot is None:
            slot = self.watch(instance)

        if self.dependencies:
            changed = has_changed(slot.snapshot, instance, self.dependencies)
            if slot.computed and not changed:
                return slot.value

        return self.evaluate(instance, slot)

    def __set__(self, instance: Any, value: Any) -> None:
        raise ReadOnlyPropertyError(type(instance), self.name)

    def __delete__(self, instance: Any) -> None:
        raise ReadOnlyPropertyError(type(instance), self.name)

    def watch(self, instance: Any) -> ComputedSlot:
        """
        Creates a fresh slot for the instance, with a snapshot of the
        current value of all dependencies
        """
        snapshot = Snapshot(deep=self.deep)
        init_watch(snapshot, instance, self.dependencies)
        slot = ComputedSlot(snapshot)
        ensure_state(instance).slots[self] = slot
        return slot

    def evaluate(self, instance: Any, slot: ComputedSlot) -> T:
        # a getter that raises leaves the slot dirty
        slot.computed = False
        value = self.getter(instance) if self.pass_target else self.getter()
        slot.value = value
        slot.computed = True
        logger.debug("Computed %s.%s", type(instance).__name__, self.name)

        if ComputedProperty.on_recomputed:
            ComputedProperty.on_recomputed(self, instance)
        return value

    def __repr__(self) -> str:
        name = getattr(self.getter, "__name__", repr(self.getter))
        return f"ComputedProperty({self.name!r}, {name}, {self.dependencies!r})"


def computed(*dependencies: Any, deep: bool = False):
    """
    Decorator that turns a method into a computed property.

    Usage:
        class File:
            def __init__(self, name, ext, dirname):
                self.name = name
                self.ext = ext
                self.dirname = dirname

            @computed("ext", "dirname")
            def path(self):
                return f"{self.dirname}/{self.name}{self.ext}"

    Without dependencies the value is computed on every read.
    """
    if len(dependencies) == 1 and callable(dependencies[0]):
        return ComputedProperty(dependencies[0], deep=deep)

    def decorator_computed(fn: Getter[T]) -> ComputedProperty[T]:
        return ComputedProperty(fn, dependencies, deep=deep)

    return decorator_computed


def _bind(attr: Any, instance: Any, owner: type) -> Any:
    getter = getattr(type(attr), "__get__", None)
    return attr if getter is None else getter(attr, instance, owner)


def _is_data_descriptor(attr: Any) -> bool:
    cls = type(attr)
    return hasattr(cls, "__set__") or hasattr(cls, "__delete__")


class ComputedAttribute:
    """
    Class attribute that routes access to the computed property that was
    installed on an instance under the same name. Instances without such
    an installation see the attribute as if this one wasn't there: the
    class attribute it replaced, their own __dict__ entry, or whatever
    the rest of the mro provides.
    """

    __slots__ = ("cls", "name", "previous")

    def __init__(self, cls: type, name: str) -> None:
        self.cls = cls
        self.name = name
        self.previous = cls.__dict__.get(name, MISSING)

    def installed(self, instance: Any) -> ComputedProperty | None:
        state = get_state(instance)
        if state is None:
            return None
        return state.properties.get(self.name)

    def fallback(self, owner: type) -> Any:
        if self.previous is not MISSING:
            return self.previous
        mro = owner.__mro__
        for klass in mro[mro.index(self.cls) + 1 :]:
            if self.name in klass.__dict__:
                return klass.__dict__[self.name]
        return MISSING

    def missing(self, owner: type) -> AttributeError:
        return AttributeError(
            f"{owner.__name__!r} object has no attribute {self.name!r}"
        )

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if owner is None:
            owner = type(instance)
        if instance is None:
            attr = self.fallback(owner)
            if attr is MISSING:
                raise AttributeError(
                    f"type object {owner.__name__!r} has no attribute {self.name!r}"
                )
            return _bind(attr, None, owner)

        prop = self.installed(instance)
        if prop is not None:
            return prop.__get__(instance, owner)

        attr = self.fallback(owner)
        if _is_data_descriptor(attr):
            return _bind(attr, instance, owner)
        namespace = getattr(instance, "__dict__", None)
        if namespace is not None and self.name in namespace:
            return namespace[self.name]
        if attr is MISSING:
            raise self.missing(owner)
        return _bind(attr, instance, owner)

    def __set__(self, instance: Any, value: Any) -> None:
        if self.installed(instance) is not None:
            raise ReadOnlyPropertyError(type(instance), self.name)
        attr = self.fallback(type(instance))
        setter = getattr(type(attr), "__set__", None)
        if setter is not None:
            setter(attr, instance, value)
            return
        namespace = getattr(instance, "__dict__", None)
        if namespace is None:
            raise self.missing(type(instance))
        namespace[self.name] = value

    def __delete__(self, instance: Any) -> None:
        if self.installed(instance) is not None:
            raise ReadOnlyPropertyError(type(instance), self.name)
        attr = self.fallback(type(instance))
        deleter = getattr(type(attr), "__delete__", None)
        if deleter is not None:
            deleter(attr, instance)
            return
        namespace = getattr(instance, "__dict__", None)
        if namespace is None or self.name not in namespace:
            raise self.missing(type(instance))
        del namespace[self.name]

    def __repr__(self) -> str:
        return f"ComputedAttribute({self.cls.__name__}.{self.name})"


def computed_attribute(cls: type, name: str) -> ComputedAttribute:
    """
    Returns the attribute that routes `name` on instances of the class,
    adding it to the class on first use
    """
    for klass in cls.__mro__:
        if name in klass.__dict__:
            attr = klass.__dict__[name]
            if isinstance(attr, ComputedAttribute):
                return attr
            break

    attr = ComputedAttribute(cls, name)
    try:
        setattr(cls, name, attr)
    except (TypeError, AttributeError) as e:
        raise InvalidArgumentError(
            f"Can't install a computed property on {cls.__name__!r} objects"
        ) from e
    return attr


def install(
    target: Any,
    name: str,
    dependencies: Union[Dependencies, Getter[T]] = None,
    getter: Getter[T] | None = None,
    *,
    deep: bool = False,
) -> ComputedProperty[T]:
    """
    Adds a computed property to the target object. The value is computed
    by `getter` and recomputed only when one of the `dependencies` changed
    since the previous read. Without dependencies, every read recomputes.

    The dependencies may be omitted, in which case the getter can be
    passed as third argument:

        install(file, "path", lambda file: file.dirname + "/" + file.name)

    Any existing attribute with the same name is replaced. Assigning to the
    computed property raises ReadOnlyPropertyError. The class of the target
    and its other instances are left as they were.
    """
    if callable(dependencies):
        if getter is not None:
            raise InvalidArgumentError(
                "Expected dependencies and a getter, but got two callables"
            )
        dependencies, getter = None, dependencies
    if not isinstance(name, str) or not name.isidentifier():
        raise InvalidArgumentError(
            f"Expected name to be an identifier but got {name!r}"
        )
    if name.startswith("__") and name.endswith("__"):
        raise InvalidArgumentError(
            f"Can't install a computed property under the special name {name!r}"
        )

    prop = ComputedProperty(getter, dependencies, name=name, deep=deep)

    if inspect.isclass(target) or inspect.ismodule(target):
        raise InvalidArgumentError(
            f"Can't install a computed property on {target!r}, "
            "expected an instance of a class"
        )
    namespace = namespace_of(target)
    cls = type(target)
    computed_attribute(cls, name)

    state = ensure_state(target)
    previous = state.properties.get(name)
    if previous is not None:
        state.slots.pop(previous, None)
    state.properties[name] = prop
    namespace.pop(name, None)

    prop.watch(target)
    logger.debug(
        "Installed computed property %s.%s depending on %s",
        cls.__name__,
        name,
        prop.dependencies,
    )
    if ComputedProperty.on_installed:
        ComputedProperty.on_installed(prop, target)
    return prop
