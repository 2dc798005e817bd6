from .mappings import MappingsFunction
from .merge import MergeFunction
from .rename import RenameFunction, REMAPPER_TOOL
from .strip import StripFunction
from .unbundle import UnbundleFunction

__all__ = [
    "MappingsFunction",
    "MergeFunction",
    "RenameFunction",
    "REMAPPER_TOOL",
    "StripFunction",
    "UnbundleFunction",
]
