"""Request dump domain exceptions."""


class RequestDumpError(Exception):
    """Base exception for request dump operations."""


class InvalidArgumentError(RequestDumpError, ValueError):
    """An argument passed to the dumper is missing or unusable."""
