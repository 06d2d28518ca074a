"""
Account registration for professionals and students, invite-code linking
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging
import secrets
import string

from sqlalchemy.orm import Session

from treinai.core.auth import get_password_hash, verify_password
from treinai.core.config import settings
from treinai.models.coaching import Professional, Student
from treinai.models.user import Profile, User, UserRole

logger = logging.getLogger(__name__)

INVITE_ALPHABET = string.ascii_uppercase + string.digits


class AccountError(Exception):
    pass


@dataclass
class Registration:
    email: str
    password: str
    full_name: str
    role: UserRole
    phone: Optional[str] = None
    cref_number: Optional[str] = None
    cref_state: Optional[str] = None
    invite_code: Optional[str] = None
    age: Optional[int] = None


def generate_invite_code(length: Optional[int] = None) -> str:
    length = length or settings.invite_code_length
    return "".join(secrets.choice(INVITE_ALPHABET) for _ in range(length))


class AccountService:
    def __init__(self, db: Session):
        self.db = db

    def _unique_invite_code(self, attempts: int = 10) -> str:
        for _ in range(attempts):
            code = generate_invite_code()
            if not self.db.query(Professional.id).filter(Professional.invite_code == code).first():
                return code
        raise AccountError("Could not allocate an invite code")

    def find_professional_by_invite(self, invite_code: str) -> Optional[Professional]:
        code = (invite_code or "").strip().upper()
        if not code:
            return None
        return self.db.query(Professional).filter(Professional.invite_code == code).first()

    def register(self, data: Registration) -> User:
        if data.role == UserRole.admin:
            raise AccountError("Admin accounts cannot be self-registered")

        email = data.email.strip().lower()
        if self.db.query(User.id).filter(User.email == email).first():
            raise AccountError("Email already registered")

        user = User(email=email, password_hash=get_password_hash(data.password), role=data.role.value)
        user.profile = Profile(email=email, full_name=data.full_name, phone=data.phone or None)
        self.db.add(user)
        self.db.flush()

        if data.role == UserRole.professional:
            self.db.add(Professional(
                user_id=user.id,
                cref_number=data.cref_number or "",
                cref_state=(data.cref_state or "").upper(),
                invite_code=self._unique_invite_code(),
            ))
        else:
            professional = None
            if data.invite_code:
                professional = self.find_professional_by_invite(data.invite_code)
                if professional is None:
                    logger.info(f"Invite code {data.invite_code!r} matched no professional; student left unlinked")
            self.db.add(Student(
                user_id=user.id,
                professional_id=professional.id if professional else None,
                age=data.age,
            ))

        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Registered {data.role.value} account {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self.db.query(User).filter(User.email == email.strip().lower()).first()
        if not user or not verify_password(password, user.password_hash):
            return None
        return user

    def link_student(self, student_id: str, invite_code: str) -> Student:
        professional = self.find_professional_by_invite(invite_code)
        if professional is None:
            raise AccountError("Invalid invite code")
        student = self.db.query(Student).filter(Student.id == student_id).first()
        if student is None:
            raise AccountError("Student not found")
        student.professional_id = professional.id
        self.db.commit()
        self.db.refresh(student)
        return student

    def students_of(self, professional_id: str) -> List[Tuple[Student, Optional[Profile]]]:
        rows = (
            self.db.query(Student, Profile)
            .outerjoin(Profile, Profile.user_id == Student.user_id)
            .filter(Student.professional_id == professional_id)
            .order_by(Student.created_at.asc())
            .all()
        )
        return [(student, profile) for student, profile in rows]
