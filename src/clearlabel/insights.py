"""
ClearLabel - scan history trends
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .models import ScannedProduct
from .scoring import calculate_health_score, profile_from_product

TOP_FLAGGED_LIMIT = 5


class TimeRange(Enum):
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class SafetyStatus(Enum):
    GOOD = "good"
    CAUTION = "caution"
    WARNING = "warning"
    UNKNOWN = "unknown"


RANGE_DAYS = {TimeRange.WEEK: 7, TimeRange.MONTH: 30}


@dataclass
class HistorySummary:
    total: int = 0
    average_health_score: Optional[float] = None
    status_counts: Dict[SafetyStatus, int] = field(default_factory=lambda: {s: 0 for s in SafetyStatus})
    top_flagged: List[Tuple[str, int]] = field(default_factory=list)

    def percent(self, status: SafetyStatus) -> float:
        if not self.total:
            return 0.0
        return self.status_counts[status] / self.total * 100


def product_status(product: ScannedProduct) -> SafetyStatus:
    if not product.ingredients:
        return SafetyStatus.UNKNOWN
    flagged = len(product.flagged_ingredients)
    if flagged == 0:
        return SafetyStatus.GOOD
    if flagged <= 2:
        return SafetyStatus.CAUTION
    return SafetyStatus.WARNING


def filter_by_range(products: List[ScannedProduct], time_range: TimeRange,
                    now: Optional[datetime] = None) -> List[ScannedProduct]:
    if time_range == TimeRange.ALL:
        return list(products)
    now = now or datetime.now()
    cutoff = now - timedelta(days=RANGE_DAYS[time_range])
    return [p for p in products if p.scanned_at and p.scanned_at >= cutoff]


def summarize_history(products: List[ScannedProduct],
                      time_range: TimeRange = TimeRange.WEEK,
                      now: Optional[datetime] = None) -> HistorySummary:
    """Average health score, status breakdown and most flagged ingredients"""
    selected = filter_by_range(products, time_range, now)
    summary = HistorySummary(total=len(selected))
    if not selected:
        return summary

    scores = [calculate_health_score(profile_from_product(p)) for p in selected]
    summary.average_health_score = sum(scores) / len(scores)

    flagged = Counter()
    for product in selected:
        summary.status_counts[product_status(product)] += 1
        flagged.update(i.name.lower() for i in product.flagged_ingredients)

    summary.top_flagged = flagged.most_common(TOP_FLAGGED_LIMIT)
    return summary
