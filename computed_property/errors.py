class ComputedPropertyError(Exception):
    """
    Base class for errors raised by computed_property.
    """

    pass


class InvalidArgumentError(ComputedPropertyError, TypeError):
    """
    Raised when a computed property can't be installed with the
    given arguments. Nothing is attached to the target in that case.
    """

    pass


class ReadOnlyPropertyError(ComputedPropertyError, AttributeError):
    """
    Raised when a computed property is assigned to or deleted.
    """

    def __init__(self, owner, name):
        super().__init__(
            f"computed property {name!r} of {owner.__name__!r} object is read-only"
        )
        self.name = name
