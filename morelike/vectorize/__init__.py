"""Term-statistics vectorizing and the sparse vector wire form."""
from .codec import EMPTY_SPARSE_VECTOR, SparseVector, encode_sparse_vector, read_vector
from .vectorizer import Term, ValueOption, Vectorizer, parse_value_option

__all__ = [
    "EMPTY_SPARSE_VECTOR",
    "SparseVector",
    "encode_sparse_vector",
    "read_vector",
    "Term",
    "ValueOption",
    "Vectorizer",
    "parse_value_option",
]
