"""
Per-request authentication context.

Built by the ``get_auth_context`` dependency once the access token has been
verified, then handed explicitly to routes and services. There is no
module-level current user: a context lives for exactly one request, a login
issues the token it is built from and a logout deletes it.
"""

from dataclasses import dataclass
from typing import Optional

from treinai.models.user import UserRole


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    email: str
    role: UserRole
    student_id: Optional[str] = None
    professional_id: Optional[str] = None

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.student

    @property
    def is_professional(self) -> bool:
        return self.role == UserRole.professional

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin
