"""Observability helpers for diagnostic request dumps."""

from .exceptions import InvalidArgumentError, RequestDumpError
from .request_dump import PROPERTIES, RequestDump, dump

__all__ = ['InvalidArgumentError', 'PROPERTIES', 'RequestDump', 'RequestDumpError', 'dump']
