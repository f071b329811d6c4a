"""Staff member (``/funcionarios/``) referenced by sales."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from shared.domain.timestamps import parse_timestamp


@dataclass(frozen=True)
class StaffMember:
    id: int
    name: str
    email: str
    role: Optional[str] = None
    hired_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> StaffMember:
        hired = payload.get("data_contratacao")
        return cls(
            id=int(payload["id"]),
            name=payload.get("nome") or "",
            email=payload.get("email") or "",
            role=payload.get("cargo"),
            hired_at=parse_timestamp(hired),
        )
