from .analysis import make_analysis
from .common import create_provider, extract_provider_cfg
from .termvectors import make_term_vectors

__all__ = ["create_provider", "extract_provider_cfg", "make_analysis", "make_term_vectors"]
