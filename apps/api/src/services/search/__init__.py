"""Worker search: filter composition, geo narrowing, execution, and pagination."""

from .search import search_service
from .search_logic import run_worker_search

__all__ = ["search_service", "run_worker_search"]
