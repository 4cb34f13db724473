from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    def get(self, user_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_by_roles(self, roles: Sequence[Role], *, active_only: bool = False) -> Sequence[Profile]:
        raise NotImplementedError

    def names_by_ids(self, user_ids: Iterable[str]) -> dict[str, str]:
        raise NotImplementedError

    def upsert(self, *, user_id: str, full_name: str, role: Role, active: bool = True) -> None:
        raise NotImplementedError

    def update(self, user_id: str, *, full_name: Optional[str] = None, active: Optional[bool] = None) -> bool:
        raise NotImplementedError
