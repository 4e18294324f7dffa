"""
refchain - discover chains of reference fields and resolve them against records

refchain walks a host schema to enumerate every chain of reference fields up
to a bounded depth, and resolves a configured chain against a root record
with a selection rule at every hop.
"""

from importlib.metadata import version

from refchain.catalog import CatalogEntry, flatten
from refchain.config import DiscoveryConfig, ReferenceSettings
from refchain.core import FieldRef, PathId
from refchain.execution import PathResolver, ReferenceContext, ResolvedPath
from refchain.schema import SchemaWalker
from refchain.selection import SelectionMode, SelectionRule, select

__version__ = version("refchain")

__all__ = [
    "__version__",
    "CatalogEntry",
    "DiscoveryConfig",
    "FieldRef",
    "PathId",
    "PathResolver",
    "ReferenceContext",
    "ReferenceSettings",
    "ResolvedPath",
    "SchemaWalker",
    "SelectionMode",
    "SelectionRule",
    "flatten",
    "select",
]
