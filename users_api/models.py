from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, StrictInt


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class UserRecord(BaseModel):
    """
    A user as it arrives in a request body.

    Fields are loosely typed so the business rules in ``validation`` decide
    what is acceptable and which error message wins. Unknown fields
    (``password``, ``role``, ...) are kept and stored as sent.
    """
    model_config = ConfigDict(extra="allow")

    id: Any = None
    name: Any = None
    email: Any = None

    def sent_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class StoredUser(BaseModel):
    """A record that passed ``validate_user`` and is about to be written."""
    model_config = ConfigDict(extra="allow")

    id: StrictInt
    name: str
    email: str


class DbUserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Optional[Role] = None
    # password column is never serialised
