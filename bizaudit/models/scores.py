"""
Score Models

CategoryScore and AuditScores as stored with an audit and sent to clients.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple

from bizaudit.scoring.weights import BASE_WEIGHTS, WeightProfile

CATEGORY_IDS = (
    "technology",
    "leads",
    "scheduling",
    "communication",
    "followUp",
    "operations",
    "financial",
)


@dataclass(frozen=True)
class CategoryScore:
    """One of the seven category scores. weight is a whole percentage."""
    category: str
    label: str
    score: int
    weight: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "label": self.label,
            "score": self.score,
            "weight": self.weight,
        }


@dataclass(frozen=True)
class AuditScores:
    """Seven category scores plus the weighted overall score."""
    categories: Tuple[CategoryScore, ...]
    overall: int
    weights: WeightProfile = BASE_WEIGHTS

    def score_for(self, category: str) -> int:
        for cat in self.categories:
            if cat.category == category:
                return cat.score
        raise KeyError(category)

    def weakest(self, count: int = 3) -> List[CategoryScore]:
        """Lowest-scoring categories first; ties keep category order."""
        return sorted(self.categories, key=lambda c: c.score)[:count]

    def strongest(self) -> CategoryScore:
        return max(self.categories, key=lambda c: c.score)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {cat.category: cat.score for cat in self.categories}
        data["overall"] = self.overall
        data["categories"] = [cat.to_dict() for cat in self.categories]
        data["weights"] = self.weights.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AuditScores":
        categories = tuple(
            CategoryScore(
                category=c["category"],
                label=c["label"],
                score=int(c["score"]),
                weight=int(c["weight"]),
            )
            for c in data.get("categories", [])
        )
        if data.get("weights"):
            weights = WeightProfile(**data["weights"])
        elif categories:
            weights = WeightProfile(**{c.category: c.weight / 100 for c in categories})
        else:
            weights = BASE_WEIGHTS
        return cls(categories=categories, overall=int(data.get("overall", 0)), weights=weights)
