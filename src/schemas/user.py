"""User schema definitions."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field

from core.identifiers import generate_id
from schemas.common import CamelModel, Identifier, RecordModel, utc_now_iso


class UserRole(str, Enum):
    """Closed set of account roles and their userId prefixes."""

    ADMIN = "Admin"
    SME = "SME"
    TRAINEE = "Trainee"

    @property
    def id_prefix(self) -> str:
        return {"Admin": "A", "SME": "S", "Trainee": "T"}[self.value]


class UserStatus(str, Enum):
    ACTIVE = "Active"
    ARCHIVED = "Archived"


class User(RecordModel):
    """A stored user account. ``password`` holds the bcrypt hash."""

    id: Identifier = Field(default_factory=generate_id)
    user_id: str
    full_name: str
    user_type: UserRole
    email: str
    password: str
    created_at: str = Field(default_factory=utc_now_iso)
    status: UserStatus = UserStatus.ACTIVE
    date_archived: Optional[str] = None

    @property
    def is_archived(self) -> bool:
        return self.status == UserStatus.ARCHIVED

    def to_public(self) -> Dict[str, Any]:
        """Serialize for API responses, without the password hash."""
        data = self.model_dump(by_alias=True, mode="json")
        data.pop("password", None)
        return data


class CreateUserRequest(CamelModel):
    full_name: Optional[str] = None
    user_type: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(CamelModel):
    success: bool = True
    user: Dict[str, Any]
    token: str
