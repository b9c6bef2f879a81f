"""Location search: parsing, ranking and orchestration."""

from .errors import SearchError, SearchFailure, SearchFailureKind
from .orchestrator import SearchOrchestrator, SearchOutcome
from .query_parser import parse_location_query, validate_zip_code
from .session import SearchSession

__all__ = [
    "parse_location_query",
    "validate_zip_code",
    "SearchOrchestrator",
    "SearchOutcome",
    "SearchSession",
    "SearchError",
    "SearchFailure",
    "SearchFailureKind",
]
