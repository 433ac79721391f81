from __future__ import annotations

from dataclasses import dataclass, field

IMPORTANCE_TIERS = ("critical", "important", "moderate", "optional")


@dataclass(frozen=True)
class Suggestion:
    rule_id: str
    label: str
    suggestion: str
    importance: str
    category: str
    points: int

    def to_dict(self) -> dict:
        return {
            "id": self.rule_id,
            "label": self.label,
            "suggestion": self.suggestion,
            "importance": self.importance,
            "category": self.category,
            "points": self.points,
        }


@dataclass(frozen=True)
class ScoreReport:
    score: int
    status: str
    suggestions: tuple[Suggestion, ...] = ()
    groups: dict[str, tuple[Suggestion, ...]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "configScore": self.score,
            "scoreStatus": self.status,
            "suggestions": [s.to_dict() for s in self.suggestions],
            "suggestionGroups": {
                tier: [s.to_dict() for s in self.groups.get(tier, ())]
                for tier in IMPORTANCE_TIERS
            },
        }
