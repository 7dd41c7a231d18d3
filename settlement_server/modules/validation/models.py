"""Value objects for replay validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


@dataclass(slots=True, frozen=True)
class Move:
    type: str
    timestamp: float
    direction: Optional[str] = None
    data: Any = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Move":
        return cls(
            type=str(payload["type"]),
            timestamp=float(payload["timestamp"]),
            direction=payload.get("direction"),
            data=payload.get("data"),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type, "timestamp": self.timestamp}
        if self.direction is not None:
            payload["direction"] = self.direction
        if self.data is not None:
            payload["data"] = self.data
        return payload


@dataclass(slots=True)
class ValidationResult:
    score: int
    valid: bool
    game_data: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @classmethod
    def accepted(cls, score: int, game_data: dict[str, Any]) -> "ValidationResult":
        return cls(score=score, valid=True, game_data=game_data)

    @classmethod
    def rejected(cls, *errors: str) -> "ValidationResult":
        return cls(score=0, valid=False, errors=list(errors))
