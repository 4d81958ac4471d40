"""
Report Models

AIReportData is the one report shape every producer returns: the AI
generator, the template fallback, and the persisted row all read and write
it. Keys are camelCase on the wire.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

PRIORITIES = ("high", "medium", "low")

SOURCE_AI = "ai"
SOURCE_TEMPLATE = "template"


@dataclass
class ReportItem:
    """A gap, quick win, or strategic recommendation."""
    title: str
    description: str
    priority: str = "medium"
    cta: str = ""
    impact: Optional[str] = None
    timeframe: Optional[str] = None
    roi: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "cta": self.cta,
        }
        for key in ("impact", "timeframe", "roi"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReportItem":
        priority = str(data.get("priority") or "medium").lower()
        if priority not in PRIORITIES:
            priority = "medium"
        return cls(
            title=str(data.get("title") or "").strip(),
            description=str(data.get("description") or "").strip(),
            priority=priority,
            cta=str(data.get("cta") or "").strip(),
            impact=data.get("impact"),
            timeframe=data.get("timeframe"),
            roi=data.get("roi"),
        )


@dataclass
class AIReportData:
    """Executive summary plus the three item lists."""
    executive_summary: str
    gaps: List[ReportItem] = field(default_factory=list)
    quick_wins: List[ReportItem] = field(default_factory=list)
    strategic_recommendations: List[ReportItem] = field(default_factory=list)
    source: str = SOURCE_AI

    @property
    def is_empty(self) -> bool:
        return not (self.gaps or self.quick_wins or self.strategic_recommendations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "executiveSummary": self.executive_summary,
            "gaps": [g.to_dict() for g in self.gaps],
            "quickWins": [q.to_dict() for q in self.quick_wins],
            "strategicRecommendations": [s.to_dict() for s in self.strategic_recommendations],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: str = SOURCE_AI) -> "AIReportData":
        def items(key: str) -> List[ReportItem]:
            raw = data.get(key) or []
            return [ReportItem.from_dict(i) for i in raw if isinstance(i, Mapping)]

        return cls(
            executive_summary=str(data.get("executiveSummary") or "").strip(),
            gaps=items("gaps"),
            quick_wins=items("quickWins"),
            strategic_recommendations=items("strategicRecommendations"),
            source=source,
        )
