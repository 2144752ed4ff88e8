"""Request resolution — path parsing and catalog validation."""

from imgresize.request.resolver import RequestResolver

__all__ = ["RequestResolver"]
