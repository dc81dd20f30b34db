from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Subject]:
        raise NotImplementedError

    def get_many(self, subject_ids: Iterable[int]) -> Mapping[int, Subject]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Subject]:
        raise NotImplementedError

    def create(self, *, name: str) -> Subject:
        """Raises ValidationError when the name is already taken."""

        raise NotImplementedError
