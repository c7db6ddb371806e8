"""User account model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A registered user.

    Only ``id`` matters to the task engine: it namespaces the persisted
    task blob. Credentials are stored as given; this is a local demo
    account, not a security boundary.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Stable user id")
    username: str
    password: str
    email: str | None = None
    created_at: datetime = Field(..., alias="createdAt")

    def public_dict(self) -> dict:
        """Serialize without the password."""
        return self.model_dump(mode="json", by_alias=True, exclude={"password"})
