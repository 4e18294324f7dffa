"""
Resolution of reference chains against records, and the request context
that serves configuration and rendering.
"""

from refchain.execution.context import ReferenceContext
from refchain.execution.resolver import PathResolver, ResolvedPath

__all__ = [
    "PathResolver",
    "ReferenceContext",
    "ResolvedPath",
]
