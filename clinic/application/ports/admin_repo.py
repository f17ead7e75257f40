from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class AdminDto:
    id: int
    username: str
    password_hash: str


class AdminRepository(Protocol):
    def get_by_username(self, username: str) -> Optional[AdminDto]:
        ...
