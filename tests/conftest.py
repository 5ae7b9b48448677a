import pytest

from computed_property import settings
from computed_property.installer import ComputedProperty


@pytest.fixture(autouse=True)
def reset_settings():
    try:
        yield
    finally:
        settings.reset()


@pytest.fixture(autouse=True)
def clear_hooks():
    try:
        yield
    finally:
        ComputedProperty.on_installed = None
        ComputedProperty.on_recomputed = None
