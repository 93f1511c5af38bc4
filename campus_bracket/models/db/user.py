from enum import auto

from campus_bracket.models.db.shared import BaseModelORM
from campus_bracket.utils.id_types import UserId
from campus_bracket.utils.types import EnumAutoStr


class UserRole(EnumAutoStr):
    REGULAR = auto()
    ADMIN = auto()


class Principal(BaseModelORM):
    """Authenticated caller as issued by the identity layer."""

    id: UserId
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN
