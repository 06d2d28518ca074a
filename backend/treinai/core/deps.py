from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from treinai.core.auth import verify_token
from treinai.core.context import AuthContext
from treinai.db.session import get_db
from treinai.models.user import User, UserRole
from treinai.models.coaching import Professional, Student


def _extract_token(request: Request) -> Optional[str]:
    # Cookie first (web UI), then Authorization header (programmatic access)
    token = request.cookies.get("access_token")
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip() or None
    return None


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    """Get the current authenticated user from JWT cookie or bearer token"""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    access_token = _extract_token(request)
    if not access_token:
        raise credentials_exception

    payload = verify_token(access_token)
    if payload is None:
        raise credentials_exception

    user_id: str = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception

    return user


async def get_current_user_optional(
    request: Request,
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Get the current user if authenticated, otherwise None"""
    try:
        return await get_current_user(request, db)
    except HTTPException:
        return None


async def get_auth_context(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> AuthContext:
    """Resolve the caller's role-specific record ids once per request"""
    role = UserRole(current_user.role)
    student_id = None
    professional_id = None
    if role == UserRole.student:
        student = db.query(Student.id).filter(Student.user_id == current_user.id).first()
        student_id = student.id if student else None
    elif role == UserRole.professional:
        professional = db.query(Professional.id).filter(Professional.user_id == current_user.id).first()
        professional_id = professional.id if professional else None

    return AuthContext(
        user_id=current_user.id,
        email=current_user.email,
        role=role,
        student_id=student_id,
        professional_id=professional_id,
    )


def require_role(*roles: UserRole):
    """Dependency factory restricting a route to the given roles"""

    async def _checker(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if ctx.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not allowed for this account type",
            )
        return ctx

    return _checker


async def get_student_context(ctx: AuthContext = Depends(require_role(UserRole.student))) -> AuthContext:
    """Student-only routes also need the student record to exist"""
    if not ctx.student_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return ctx


async def get_professional_context(ctx: AuthContext = Depends(require_role(UserRole.professional))) -> AuthContext:
    if not ctx.professional_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Professional not found")
    return ctx
