"""Adapters exposing framework request objects as ``DumpableRequest``."""

from .starlette_request import HeaderSanitizer, StarletteRequestAdapter

__all__ = ['HeaderSanitizer', 'StarletteRequestAdapter']
