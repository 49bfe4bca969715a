from .search import search_service

__all__ = ["search_service"]
