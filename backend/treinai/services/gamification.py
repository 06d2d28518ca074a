"""
Gamification Service - daily check-in streaks, XP and levels
"""

from dataclasses import dataclass, asdict
from datetime import date, timedelta
from typing import Optional, Tuple
import logging

from sqlalchemy.orm import Session

from treinai.core.config import settings
from treinai.models.coaching import Student

logger = logging.getLogger(__name__)


class CheckInError(Exception):
    pass


@dataclass(frozen=True)
class GamificationState:
    id: str
    user_id: str
    streak_days: int
    xp: int
    level: int
    last_check_in: Optional[date]
    goal: Optional[str]
    xp_gained: int = 0

    @classmethod
    def from_student(cls, student: Student, xp_gained: int = 0) -> "GamificationState":
        return cls(
            id=student.id,
            user_id=student.user_id,
            streak_days=student.streak_days or 0,
            xp=student.xp or 0,
            level=student.level or 1,
            last_check_in=student.last_check_in,
            goal=student.goal,
            xp_gained=xp_gained,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["last_check_in"] = self.last_check_in.isoformat() if self.last_check_in else None
        return data


class StreakCalculator:
    """Pure streak/XP arithmetic for one check-in"""

    @staticmethod
    def level_for(xp: int, xp_per_level: int) -> int:
        return max(0, xp) // xp_per_level + 1

    @staticmethod
    def apply_check_in(
        streak_days: int,
        xp: int,
        last_check_in: Optional[date],
        check_date: date,
        xp_per_check_in: int,
        xp_per_level: int,
    ) -> Tuple[int, int, int, Optional[date], int]:
        """
        Apply a check-in on ``check_date``

        Returns:
            (streak_days, xp, level, last_check_in, xp_gained)
        """
        level = StreakCalculator.level_for(xp, xp_per_level)

        if last_check_in is not None and check_date <= last_check_in:
            # Already checked in today, or a late check-in for a past day
            return streak_days, xp, level, last_check_in, 0

        if last_check_in is not None and check_date == last_check_in + timedelta(days=1):
            new_streak = streak_days + 1
        else:
            new_streak = 1

        new_xp = xp + xp_per_check_in
        return new_streak, new_xp, StreakCalculator.level_for(new_xp, xp_per_level), check_date, xp_per_check_in

    @staticmethod
    def get_streak_status(streak_days: int, last_check_in: Optional[date], as_of_date: Optional[date] = None) -> dict:
        """Get detailed streak status information"""
        if as_of_date is None:
            as_of_date = date.today()

        if not last_check_in or streak_days == 0:
            return {
                "status": "no_streak",
                "message": "No active streak",
                "checked_in_today": False,
                "is_at_risk": False,
            }

        days_since = (as_of_date - last_check_in).days
        if days_since <= 0:
            return {
                "status": "current",
                "message": f"🔥 {streak_days} day streak!",
                "checked_in_today": True,
                "is_at_risk": False,
            }
        if days_since == 1:
            return {
                "status": "at_risk",
                "message": f"🔥 {streak_days} day streak - check in today to keep it",
                "checked_in_today": False,
                "is_at_risk": True,
            }
        return {
            "status": "broken",
            "message": "💔 Streak broken",
            "checked_in_today": False,
            "is_at_risk": False,
        }


class CheckInService:
    def __init__(self, db: Session):
        self.db = db

    def get_state(self, student_id: str) -> GamificationState:
        student = self.db.query(Student).filter(Student.id == student_id).first()
        if not student:
            raise CheckInError("Student not found")
        return GamificationState.from_student(student)

    def increment_streak(self, student_id: str, check_date: date, commit: bool = True) -> GamificationState:
        """Atomically apply a check-in to the student's streak, XP and level"""
        student = (
            self.db.query(Student)
            .filter(Student.id == student_id)
            .with_for_update()
            .first()
        )
        if not student:
            raise CheckInError("Student not found")

        streak, xp, level, last, gained = StreakCalculator.apply_check_in(
            student.streak_days or 0,
            student.xp or 0,
            student.last_check_in,
            check_date,
            settings.xp_per_check_in,
            settings.xp_per_level,
        )
        student.streak_days = streak
        student.xp = xp
        student.level = level
        student.last_check_in = last
        self.db.add(student)

        if commit:
            self.db.commit()
            self.db.refresh(student)
        else:
            self.db.flush()

        if gained:
            logger.info(f"Check-in for student {student_id}: +{gained} XP, streak {streak}")
        else:
            logger.info(f"Check-in for student {student_id} on {check_date} ignored (already checked in)")
        return GamificationState.from_student(student, xp_gained=gained)
