"""
ClearLabel - search-term extraction
Turns a product name (and optional category list) into catalog search terms
"""

import re
import logging
from typing import List, Optional, Tuple, Pattern

logger = logging.getLogger(__name__)

MAX_TERMS = 3


def _rule(pattern: str, term: str) -> Tuple[Pattern, str]:
    return re.compile(pattern, re.IGNORECASE), term


# Ordered (pattern, canonical term) rules, grouped by archetype.
# Within a group, specific patterns come before the broader ones they contain.
NAME_RULES: List[Tuple[Pattern, str]] = [
    # Bars
    _rule(r"\bgranola bars?\b", "granola bar"),
    _rule(r"\bprotein bars?\b", "protein bar"),
    _rule(r"\b(?:cereal|breakfast) bars?\b", "cereal bar"),
    _rule(r"\b(?:energy|nut|snack) bars?\b", "snack bar"),

    # Cereals / breakfast
    _rule(r"\bgranola\b", "granola"),
    _rule(r"\bmuesli\b", "muesli"),
    _rule(r"\b(?:oatmeal|porridge|rolled oats)\b", "oatmeal"),
    _rule(r"\bcorn ?flakes\b", "cornflakes"),
    _rule(r"\bcereals?\b", "cereal"),
    _rule(r"\b(?:pancakes?|waffles?)\b", "pancakes"),

    # Snacks
    _rule(r"\b(?:tortilla|corn) chips\b", "tortilla chips"),
    _rule(r"\b(?:chips|crisps)\b", "chips"),
    _rule(r"\bcrackers?\b", "crackers"),
    _rule(r"\bpopcorn\b", "popcorn"),
    _rule(r"\bpretzels?\b", "pretzels"),
    _rule(r"\brice cakes?\b", "rice cakes"),
    _rule(r"\b(?:trail mix|mixed nuts)\b", "nuts"),

    # Dairy
    _rule(r"\b(?:greek|skyr) (?:yogh?urt|style)\b", "greek yogurt"),
    _rule(r"\byogh?o?urts?\b", "yogurt"),
    _rule(r"\bcheese\b", "cheese"),
    _rule(r"\b(?:almond|oat|soy|soya|rice) milk\b", "plant milk"),
    _rule(r"\bmilk\b(?! chocolate)", "milk"),
    _rule(r"(?<!peanut )(?<!almond )(?<!cashew )(?<!nut )\bbutter\b", "butter"),
    _rule(r"(?<!ice )\bcream\b(?! cheese)", "cream"),

    # Drinks
    _rule(r"\benergy drinks?\b", "energy drink"),
    _rule(r"\b(?:soda|cola|soft drinks?|lemonade)\b", "soda"),
    _rule(r"\bjuice\b", "juice"),
    _rule(r"\biced tea\b", "iced tea"),
    _rule(r"\btea\b", "tea"),
    _rule(r"\bcoffee\b", "coffee"),
    _rule(r"\bsparkling water\b", "sparkling water"),
    _rule(r"\bwater\b", "water"),
    _rule(r"\bsmoothies?\b", "smoothie"),

    # Sweets
    _rule(r"\bice cream\b", "ice cream"),
    _rule(r"\bchocolate\b", "chocolate"),
    _rule(r"\b(?:candy|candies|gumm(?:y|ies)|sweets)\b", "candy"),
    _rule(r"\b(?:cookies?|biscuits?)\b", "cookies"),

    # Bakery
    _rule(r"\bbread\b", "bread"),
    _rule(r"\bbagels?\b", "bagels"),
    _rule(r"\bmuffins?\b", "muffins"),
    _rule(r"\bcroissants?\b", "croissants"),
    _rule(r"\b(?:tortillas?|wraps?)\b", "tortillas"),
    _rule(r"(?<!rice )\bcakes?\b", "cake"),

    # Prepared foods
    _rule(r"\b(?:pasta|tomato|marinara) sauce\b", "pasta sauce"),
    _rule(r"\b(?:pasta|spaghetti|penne|macaroni)\b", "pasta"),
    _rule(r"\bnoodles?\b", "noodles"),
    _rule(r"\bsauce\b", "sauce"),
    _rule(r"\bsoups?\b", "soup"),
    _rule(r"\bpizza\b", "pizza"),
    _rule(r"\bfrozen (?:meal|dinner|entree)s?\b", "frozen meal"),
    _rule(r"\brice\b", "rice"),

    # Spreads
    _rule(r"\bpeanut butter\b", "peanut butter"),
    _rule(r"\b(?:almond|cashew|nut) butter\b", "nut butter"),
    _rule(r"\b(?:hazelnut|chocolate) spread\b", "chocolate spread"),
    _rule(r"\b(?:jam|jelly|preserves|marmalade)\b", "jam"),
    _rule(r"\bhummus\b", "hummus"),
    _rule(r"\bhoney\b", "honey"),
]

CATEGORY_KEYWORDS = [
    'cereals', 'breakfast', 'snacks', 'beverages', 'drinks', 'dairy',
    'yogurt', 'cheese', 'bread', 'cookies', 'biscuits', 'chocolate',
    'chips', 'crackers', 'juice', 'soda', 'water', 'tea', 'coffee',
    'pasta', 'rice', 'sauce', 'soup', 'frozen', 'ice cream', 'candy',
    'granola', 'bars', 'cereal', 'milk', 'butter', 'cream',
]

STOP_WORDS = {'with', 'from', 'made', 'flavor', 'flavour', 'original'}


def _dedupe(terms: List[str]) -> List[str]:
    seen = set()
    unique = []
    for term in terms:
        if term not in seen:
            seen.add(term)
            unique.append(term)
    return unique


def match_name_rules(name: str) -> List[str]:
    """Every canonical term whose pattern matches the name, in table order"""
    return [term for pattern, term in NAME_RULES if pattern.search(name)]


def match_category_keywords(categories: Optional[str]) -> List[str]:
    if not categories:
        return []

    terms = []
    for category in categories.split(','):
        category = re.sub(r'^[a-z]{2}:', '', category.strip().lower())
        if not category:
            continue
        for keyword in CATEGORY_KEYWORDS:
            if keyword in category:
                terms.append(keyword)
    return terms


def significant_words_term(name: str) -> List[str]:
    """First two significant words of the name as a single best-effort term"""
    words = [re.sub(r'[^\w-]', '', w) for w in name.lower().split()]
    significant = [w for w in words if len(w) > 3 and w not in STOP_WORDS]
    if not significant:
        return []
    return [' '.join(significant[:2])]


def get_search_terms(product_name: str, categories: Optional[str] = None) -> List[str]:
    """
    Extract up to three canonical catalog search terms

    Tiers are tried in order and the first one with any match wins:
    name rules, then category keywords, then significant words of the name.

    Args:
        product_name: free-text product name
        categories: optional comma-separated category string

    Returns:
        Ordered, de-duplicated list of at most three terms
    """
    product_name = product_name or ''

    terms = match_name_rules(product_name)
    if not terms:
        terms = match_category_keywords(categories)
    if not terms:
        terms = significant_words_term(product_name)

    terms = _dedupe(terms)[:MAX_TERMS]
    logger.debug(f"Search terms for {product_name!r}: {terms}")
    return terms
