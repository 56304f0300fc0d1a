"""
Auth API endpoints.
"""

import logging
import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from onlyfunds.database import get_db
from onlyfunds.dependencies import get_current_user
from onlyfunds.models.user import User
from onlyfunds.schemas.auth import SignupRequest, LoginRequest, UserResponse
from onlyfunds.services.auth_service import hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=UserResponse, status_code=201)
def signup(
    request: SignupRequest,
    db: Session = Depends(get_db)
):
    """Create a local account."""
    email = request.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="An account with this email already exists")

    user = User(
        id=str(uuid.uuid4()),
        username=request.username,
        email=email,
        hashed_password=hash_password(request.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user.id}")
    return user


@router.post("/login", response_model=UserResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db)
):
    """Check credentials and return the user."""
    user = db.query(User).filter(User.email == request.email.lower()).first()
    if not user or not verify_password(request.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return user


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    """Get the calling user."""
    return user
