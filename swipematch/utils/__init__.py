# Utilities package
from .pagination import calculate_offset, calculate_total_pages, PaginationParams, PaginationMeta
from .timeutils import utcnow, ensure_aware

__all__ = [
    "calculate_offset",
    "calculate_total_pages",
    "PaginationParams",
    "PaginationMeta",
    "utcnow",
    "ensure_aware",
]
