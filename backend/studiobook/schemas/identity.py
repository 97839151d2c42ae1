"""Identity passed from the auth layer into services."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..core.enums import RoleName


class CurrentUser(BaseModel):
    """Verified caller: ``{id, email, role}`` from the access token."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    role: RoleName = RoleName.CUSTOMER
    name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN

    @property
    def display_name(self) -> str:
        return self.name or self.email.split("@")[0]
