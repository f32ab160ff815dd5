from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field

from learnix.schemas.common import PortalModel


class EmailAddress(BaseModel):
    email_address: EmailStr


class ExternalIdentity(BaseModel):
    """User profile as reported by the hosted identity provider."""

    id: str
    email_addresses: List[EmailAddress] = Field(default_factory=list)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None
    public_metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def primary_email(self) -> Optional[str]:
        return self.email_addresses[0].email_address if self.email_addresses else None

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        if name:
            return name
        email = self.primary_email or ""
        return email.split("@")[0]


class CurrentUser(PortalModel):
    """The caller's local record, resolved once per request."""

    id: str
    external_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("external_id", "externalId", "clerkId")
    )
    name: str = ""
    email: str = ""
    image: Optional[str] = None
    role: Optional[str] = None
    banned: bool = False
    created_at: Optional[datetime] = None


class AdminUser(PortalModel):
    id: str
    name: str = ""
    email: str = ""
    image: Optional[str] = None
    role: Optional[str] = None
    banned: bool = False
    created_at: Optional[str] = None


class Mentor(PortalModel):
    id: str
    name: str = ""
    email: str = ""
    image: Optional[str] = None
    created_at: Optional[str] = None
    course_count: int = 0
    student_count: int = 0


class RoleUpdate(BaseModel):
    role: str
