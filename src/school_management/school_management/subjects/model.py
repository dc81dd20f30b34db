from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Subject:
    subject_id: int
    name: str

    def to_dict(self) -> dict:
        return {"id": self.subject_id, "name": self.name}
