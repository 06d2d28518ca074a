from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from treinai.core.context import AuthContext
from treinai.core.deps import get_student_context
from treinai.db.session import get_db
from treinai.services.gamification import CheckInError, CheckInService, StreakCalculator

router = APIRouter()


@router.get("/")
async def get_streak(
    ctx: AuthContext = Depends(get_student_context),
    db: Session = Depends(get_db),
):
    """Current streak, XP and level"""
    try:
        state = CheckInService(db).get_state(ctx.student_id)
    except CheckInError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {
        **state.to_dict(),
        "status": StreakCalculator.get_streak_status(state.streak_days, state.last_check_in),
    }


@router.post("/check-in")
async def check_in(
    ctx: AuthContext = Depends(get_student_context),
    db: Session = Depends(get_db),
):
    """Daily check-in; a second check-in on the same day gains no XP"""
    try:
        state = CheckInService(db).increment_streak(ctx.student_id, date.today())
    except CheckInError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if state.xp_gained > 0:
        message = f"+{state.xp_gained} XP! 🔥 Streak: {state.streak_days} days"
    else:
        message = "You already checked in today!"
    return {**state.to_dict(), "message": message}
