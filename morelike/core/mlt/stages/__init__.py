from .exclude import compute_exclusion
from .fetch import distribute_responses, fetch_term_vectors
from .fields import resolve_analyzer, resolve_fields
from .unsupported import remove_unsupported_fields

__all__ = [
    "compute_exclusion",
    "distribute_responses",
    "fetch_term_vectors",
    "resolve_analyzer",
    "resolve_fields",
    "remove_unsupported_fields",
]
