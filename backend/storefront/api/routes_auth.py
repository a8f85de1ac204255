from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_app_settings, get_current_user
from storefront.config import Settings
from storefront.db import get_db
from storefront.models.user import User
from storefront.schemas.user_schema import LoginIn, SignupIn, UserOut
from storefront.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", status_code=201, summary="Register a new user")
def signup(
    payload: SignupIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    token, user = AuthService(db, settings).signup(payload.name, payload.email, payload.password)
    return {
        "message": "User created successfully",
        "token": token,
        "user": UserOut.model_validate(user),
    }


@router.post("/login", summary="Log in and receive a bearer token")
def login(
    payload: LoginIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    token, user = AuthService(db, settings).login(payload.email, payload.password)
    return {"message": "Login successful", "token": token, "user": UserOut.model_validate(user)}


@router.get("/me", summary="Current user")
def me(user: User = Depends(get_current_user)):
    return {"user": UserOut.model_validate(user)}
