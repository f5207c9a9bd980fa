"""
Errors raised by the sorting, shaping and paging helpers.

Client errors are turned into 400 responses by the handler installed in main.py,
anything else is a server misconfiguration.
"""


class ResourceQueryError(Exception):
    client_error = True


class MappingNotFoundError(ResourceQueryError):
    client_error = False

    def __init__(self, wire_type: type, storage_type: type):
        self.wire_type = wire_type
        self.storage_type = storage_type
        super().__init__(
            f"No property mapping registered for {wire_type.__name__} -> {storage_type.__name__}"
        )


class UnknownSortFieldError(ResourceQueryError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Cannot sort by unknown field '{field}'")


class UnknownFieldError(ResourceQueryError):
    def __init__(self, field: str, type_: type):
        self.field = field
        self.type = type_
        super().__init__(f"Property {field} wasn't found on {type_.__name__}")


class InvalidPaginationParameterError(ResourceQueryError):
    def __init__(self, name: str, value):
        self.name = name
        self.value = value
        super().__init__(f"{name} must be a positive integer, got {value!r}")
