from .fuzzy import FuzzyScore, fuzzy_score
from .resolver import category_score, resolve, suggest
from .ranges import RangeUnit, bounds
from .durations import compute_durations
from .aggregator import TotalsView, aggregate, human_hm, to_local_hm

__all__ = [
    "FuzzyScore", "fuzzy_score", "category_score", "resolve", "suggest",
    "RangeUnit", "bounds", "compute_durations", "TotalsView", "aggregate",
    "human_hm", "to_local_hm",
]
