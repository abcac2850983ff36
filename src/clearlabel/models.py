"""
ClearLabel - data models shared by the scoring, ranking and comparison engine
"""

from typing import Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class NutriScoreGrade(Enum):
    """Front-of-pack nutritional grade, A best and E worst"""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"

    @property
    def rank(self) -> int:
        return "ABCDE".index(self.value)

    @classmethod
    def parse(cls, value) -> Optional["NutriScoreGrade"]:
        """Accept 'a', 'B', a grade instance; anything else is None"""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        value = value.strip().upper()
        if value in cls.__members__:
            return cls[value]
        return None


class HealthRating(Enum):
    """Coarse tri-state rating"""
    HEALTHY = "healthy"
    MODERATE = "moderate"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


class ProductCategory(Enum):
    """Product families known to the catalog"""
    FOOD = "food"
    COSMETICS = "cosmetics"
    CLEANING = "cleaning"
    PET_FOOD = "petFood"
    OTHER = "other"


class QuantityUnit(Enum):
    GRAM = "g"
    MILLILITRE = "ml"
    OUNCE = "oz"
    POUND = "lb"
    COUNT = "count"


class ValueBadge(Enum):
    BEST_QUALITY = "best-quality"
    BETTER_VALUE = "better-value"
    BUDGET_PICK = "budget-pick"


class Winner(Enum):
    A = "A"
    B = "B"
    TIE = "tie"
    UNKNOWN = "unknown"


class ComparisonResult(Enum):
    """Outcome of one attribute row, from side A's perspective"""
    BETTER = "better"
    WORSE = "worse"
    EQUAL = "equal"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ProductHealthProfile:
    """Snapshot of the fields the health score is computed from"""
    nutriscore_grade: Optional[NutriScoreGrade] = None
    nova_group: Optional[int] = None
    flagged_ingredient_count: int = 0
    additive_count: int = 0
    health_rating_hint: Optional[HealthRating] = None
    # Not scored; shown by the comparison aggregator only
    allergen_count: Optional[int] = None

    def __post_init__(self):
        if self.nova_group is not None and self.nova_group not in (1, 2, 3, 4):
            raise ValueError(f"nova_group must be 1..4, got {self.nova_group}")
        if self.flagged_ingredient_count < 0 or self.additive_count < 0:
            raise ValueError("ingredient and additive counts must be >= 0")


@dataclass(frozen=True)
class CandidateProduct:
    """Catalog record considered as a potential alternative"""
    barcode: str
    name: str
    brand: Optional[str] = None
    image_url: Optional[str] = None
    nutriscore_grade: Optional[NutriScoreGrade] = None
    nova_group: Optional[int] = None
    additive_count: int = 0
    quantity: Optional[str] = None


@dataclass(frozen=True)
class ParsedQuantity:
    """Package size normalized to grams, millilitres or a count"""
    value: float
    unit: QuantityUnit
    normalized: float
    display: str
    is_volume: bool


@dataclass(frozen=True)
class QuantityComparison:
    diff: int  # percent, positive when the second quantity is larger
    description: str


@dataclass
class AlternativeResult:
    """A strictly healthier catalog product, ready for presentation"""
    barcode: str
    name: str
    health_score: int
    improvement_reasons: List[str]
    rank: int
    brand: Optional[str] = None
    image_url: Optional[str] = None
    nutriscore_grade: Optional[NutriScoreGrade] = None
    nova_group: Optional[int] = None
    health_rating: HealthRating = HealthRating.UNKNOWN
    quantity: Optional[ParsedQuantity] = None
    quantity_comparison: Optional[QuantityComparison] = None
    value_badge: Optional[ValueBadge] = None

    @property
    def improvement_reason(self) -> str:
        """Reasons joined for single-line display"""
        return " • ".join(self.improvement_reasons)


@dataclass(frozen=True)
class AttributeDelta:
    attribute: str
    value_a: Optional[object]
    value_b: Optional[object]
    result: ComparisonResult


@dataclass
class ComparisonVerdict:
    """Head-to-head outcome of two products"""
    score_a: int
    score_b: int
    winner: Winner
    deltas: Dict[str, AttributeDelta] = field(default_factory=dict)

    @property
    def margin(self) -> int:
        return abs(self.score_a - self.score_b)


@dataclass
class Ingredient:
    """One ingredient of a scanned product"""
    name: str
    is_flagged: bool = False
    flag_reasons: List[str] = field(default_factory=list)


@dataclass
class ScannedProduct:
    """Product record handed to the engine by the lookup collaborator"""
    barcode: str
    name: str
    brand: Optional[str] = None
    category: ProductCategory = ProductCategory.FOOD
    categories: Optional[str] = None
    quantity: Optional[str] = None
    image_url: Optional[str] = None
    nutriscore_grade: Optional[NutriScoreGrade] = None
    nova_group: Optional[int] = None
    ingredients: List[Ingredient] = field(default_factory=list)
    additives: List[str] = field(default_factory=list)
    allergens: List[str] = field(default_factory=list)
    health_rating: HealthRating = HealthRating.UNKNOWN
    data_source: Optional[str] = None
    scanned_at: Optional[datetime] = None

    @property
    def flagged_ingredients(self) -> List[Ingredient]:
        return [i for i in self.ingredients if i.is_flagged]
