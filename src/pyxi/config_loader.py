"""Persist and load CLI generation profiles."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class GenerationProfile:
    sort_by: str = "general"
    league: Optional[str] = None
    nationality: Optional[str] = None
    fullback_flexibility: bool = False
    winger_flexibility: bool = False
    tactic_id: Optional[str] = None
    discarded_card_ids: List[str] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "GenerationProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            sort_by=data.get("sort_by", "general"),
            league=data.get("league"),
            nationality=data.get("nationality"),
            fullback_flexibility=bool(data.get("fullback_flexibility", False)),
            winger_flexibility=bool(data.get("winger_flexibility", False)),
            tactic_id=data.get("tactic_id"),
            discarded_card_ids=list(data.get("discarded_card_ids", [])),
        )

    def save(self, path: Path) -> None:
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")
