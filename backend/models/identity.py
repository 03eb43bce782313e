"""Identity data models."""
from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass(frozen=True)
class Credential:
    """Public view of a registered user (never carries the password)."""
    id: str
    email: str
    name: str
    created_at: int  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Credential":
        return cls(
            id=data["id"],
            email=data["email"],
            name=data["name"],
            created_at=int(data["created_at"]),
        )
