"""
Domain errors shared by services, routers and the API client
"""


class ValidationError(ValueError):
    """Malformed input or a violated business rule; rejected before persistence"""


class NotFoundError(LookupError):
    """Referenced saved search, favorite, profile or property does not exist"""


class ConflictError(ValueError):
    """Write would break a uniqueness rule (e.g. duplicate favorite)"""


class RemoteFailure(RuntimeError):
    """A remote call failed; raised after any optimistic state was rolled back"""


class CoercionFailure(ValueError):
    """A field expected to be numeric could not be parsed"""

    def __init__(self, field: str, value):
        super().__init__(f"Cannot coerce {field}={value!r} to a number")
        self.field = field
        self.value = value
