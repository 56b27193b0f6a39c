from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["Admin", "User"]


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)

class UserCreate(UserBase):
    password: str = Field(..., min_length=6, max_length=72)

class UserLogin(BaseModel):
    username: str
    password: str


class UserRecord(BaseModel):
    """A stored user, as handed between the stores and the credential service."""
    id: Optional[int] = None
    username: str
    password_hash: str
    role: str = "User"
    reset_token_hash: Optional[str] = None
    reset_token_expires: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    username: str
    role: str
    model_config = ConfigDict(from_attributes=True)


class RoleUpdateIn(BaseModel):
    role: Role


class Principal(BaseModel):
    """Signed-in identity carried by the session cookie."""
    identity: str
    role: str = "User"
    model_config = ConfigDict(frozen=True)

    @property
    def is_admin(self) -> bool:
        return self.role == "Admin"
