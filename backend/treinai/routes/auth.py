from typing import Optional, Literal
from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr, Field
from treinai.core.auth import create_access_token
from treinai.core.config import settings
from treinai.core.context import AuthContext
from treinai.core.deps import get_auth_context, get_current_user_optional
from treinai.db.session import get_db
from treinai.models.user import User, UserRole
from treinai.services.accounts import AccountError, AccountService, Registration

router = APIRouter()


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)
    role: Literal["professional", "student"]
    phone: Optional[str] = None
    cref_number: Optional[str] = None
    cref_state: Optional[str] = Field(None, max_length=2)
    invite_code: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=120)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    role: str
    created_at: Optional[str] = None


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        created_at=user.created_at.isoformat() if user.created_at else None,
    )


def _cookie_kwargs() -> dict:
    # Avoid setting an invalid empty domain
    kwargs = {
        "key": "access_token",
        "secure": settings.cookie_secure,
        "httponly": True,
        "samesite": settings.cookie_samesite,
    }
    if settings.cookie_domain:
        kwargs["domain"] = settings.cookie_domain
    return kwargs


@router.post("/signup", response_model=UserResponse)
async def signup(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create a professional or student account"""
    try:
        user = AccountService(db).register(Registration(
            email=user_data.email,
            password=user_data.password,
            full_name=user_data.full_name,
            role=UserRole(user_data.role),
            phone=user_data.phone,
            cref_number=user_data.cref_number,
            cref_state=user_data.cref_state,
            invite_code=user_data.invite_code,
            age=user_data.age,
        ))
    except AccountError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _user_response(user)


@router.post("/login", response_model=UserResponse)
async def login(user_data: UserLogin, response: Response, db: Session = Depends(get_db)):
    """Authenticate user and set JWT cookie"""
    user = AccountService(db).authenticate(user_data.email, user_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    access_token = create_access_token(data={"sub": user.id, "role": user.role})
    response.set_cookie(
        value=access_token,
        max_age=settings.jwt_expire_hours * 3600,
        **_cookie_kwargs(),
    )
    return _user_response(user)


@router.post("/logout")
async def logout(response: Response):
    """Logout user by clearing JWT cookie"""
    response.delete_cookie(**_cookie_kwargs())
    return {"message": "Successfully logged out"}


@router.get("/me")
async def me(ctx: AuthContext = Depends(get_auth_context)):
    """Current account with its role-specific ids"""
    return {
        "id": ctx.user_id,
        "email": ctx.email,
        "role": ctx.role.value,
        "student_id": ctx.student_id,
        "professional_id": ctx.professional_id,
    }


@router.get("/check")
async def check_auth(current_user: Optional[User] = Depends(get_current_user_optional)):
    """Check if user is authenticated"""
    if current_user:
        return {
            "authenticated": True,
            "user": {"id": current_user.id, "email": current_user.email, "role": current_user.role},
        }
    return {"authenticated": False}
