"""
ClearLabel - health scoring and healthier-alternative ranking engine
"""

from .alternatives import AlternativeFinder, rank_alternatives
from .comparison import compare_products
from .quantity import compare_quantities, get_value_badge, parse_quantity
from .scoring import calculate_health_score
from .search_terms import get_search_terms

__version__ = "0.1.0"

__all__ = [
    'AlternativeFinder',
    'calculate_health_score',
    'compare_products',
    'compare_quantities',
    'get_search_terms',
    'get_value_badge',
    'parse_quantity',
    'rank_alternatives',
]
