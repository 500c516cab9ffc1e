"""reqdump - diagnostic text dumps of inbound web requests."""

from reqdump.observability import InvalidArgumentError, RequestDump, dump

__all__ = ['InvalidArgumentError', 'RequestDump', 'dump']

__version__ = '0.1.0'
