from enum import Enum
from sqlalchemy import Column, String, Integer, Float, Date, DateTime, ForeignKey, Text, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from treinai.db.base import Base
import uuid


class CrefStatus(str, Enum):
    pending = "pending"
    active = "active"
    inactive = "inactive"
    rejected = "rejected"


class Professional(Base):
    __tablename__ = "professionals"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, unique=True)
    cref_number = Column(String, nullable=False, default="")
    cref_state = Column(String, nullable=False, default="")
    cref_status = Column(String, nullable=False, default=CrefStatus.pending.value)
    cref_validated_at = Column(DateTime(timezone=True), nullable=True)
    invite_code = Column(String, nullable=False, unique=True, index=True)
    specialties = Column(JSON, nullable=True)  # list of strings
    bio = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    students = relationship("Student", back_populates="professional")

    def __repr__(self):
        return f"<Professional(invite_code='{self.invite_code}')>"


class Student(Base):
    __tablename__ = "students"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, unique=True)
    professional_id = Column(String, ForeignKey("professionals.id", ondelete="SET NULL"), nullable=True)
    age = Column(Integer, nullable=True)
    height = Column(Float, nullable=True)
    weight = Column(Float, nullable=True)
    goal = Column(Text, nullable=True)
    streak_days = Column(Integer, nullable=False, default=0)
    xp = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    last_check_in = Column(Date, nullable=True)
    last_workout_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    professional = relationship("Professional", back_populates="students")

    def __repr__(self):
        return f"<Student(user_id='{self.user_id}', streak_days={self.streak_days})>"
