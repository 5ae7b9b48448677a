"""
Settings control how dependency paths are split and how dependency
values are copied into snapshots.
"""

from copy import deepcopy

DEFAULT_SEPARATOR = "."


class Settings:
    __slots__ = ("copier", "separator")

    def __init__(self):
        self.reset()

    def reset(self):
        """
        Restore the default separator and copier
        """
        self.separator = DEFAULT_SEPARATOR
        self.copier = deepcopy

    def register_separator(self, separator):
        """
        Register the delimiter used to split string dependency paths
        """
        if not isinstance(separator, str) or not separator:
            raise ValueError("Separator should be a non-empty string")
        self.separator = separator

    def register_copier(self, copier):
        """
        Register the function that produces reference-independent
        copies of dependency values
        """
        if not callable(copier):
            raise ValueError("Copier should be callable")
        self.copier = copier


settings = Settings()


def init(separator=None, copier=None):
    if separator is not None:
        settings.register_separator(separator)
    if copier is not None:
        settings.register_copier(copier)
