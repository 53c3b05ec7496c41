"""
osmwd - OpenStreetMap to Wikidata identifier resolution

Parses the loose annotation strings of an OSM dump (one row per element),
builds the membership graph between ways, relations and nodes, and infers
candidate Wikidata identifiers for elements from the elements that contain
or are contained by them.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("osmwd")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from osmwd.graph.elements import ElementKey, ElementRecord, ElementType
from osmwd.graph.factory import ParseRun, run_parse
from osmwd.graph.metrics import ClosureResult, aggregate_candidates
from osmwd.graph.resolver import ResolverConfig, ResolveStrategy

__all__ = [
    "__version__",
    "ElementKey",
    "ElementRecord",
    "ElementType",
    "ClosureResult",
    "ParseRun",
    "ResolverConfig",
    "ResolveStrategy",
    "aggregate_candidates",
    "run_parse",
]
