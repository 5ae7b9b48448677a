from importlib.metadata import version

__version__ = version("computed-property")


from .errors import (
    ComputedPropertyError,
    InvalidArgumentError,
    ReadOnlyPropertyError,
)
from .installer import (
    ComputedAttribute,
    ComputedProperty,
    ComputedSlot,
    computed,
    install,
)
from .object_utils import fields, to_dict
from .paths import MISSING, assign, deep_copy, resolve
from .settings import init, settings
from .snapshot import Snapshot, has_changed, init_watch
