from __future__ import annotations


class CompileError(Exception):
    """Base class for every failure while compiling an operation."""


class MalformedRequestError(CompileError, ValueError):
    """Invalid method or path pattern, or path parameters not matching the pattern."""


class DuplicateOperationError(CompileError):
    """An operation is already registered for the method and path pattern."""

    def __init__(self, method: str, path_pattern: str):
        super().__init__(f"operation already exists: {method} {path_pattern}")
        self.method = method
        self.path_pattern = path_pattern


class DuplicateParameterError(CompileError):
    """A parameter name is declared twice in the same location."""

    def __init__(self, name: str, location: str):
        super().__init__(f"parameter {name} in {location} is already defined")
        self.name = name
        self.location = location


class SchemaAdapterError(CompileError):
    """The schema builder could not translate a shape."""


class ContextMismatchError(CompileError, TypeError):
    """An object that is not an OperationContext was passed to add_operation."""
