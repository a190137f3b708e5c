from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from datetime import datetime, timedelta
from typing import Optional
import logging

from ..database import get_db
from ..models import User, UserRole
from ..schemas.user import Token, TokenData, UserCreate, UserResponse
from ..utils.auth import verify_password, normalize_email
from ..utils.errors import error_response
from .. import crud
from ..core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """Self-registration always creates a STUDENT account."""
    if crud.user.get_user_by_email(db, user_data.email):
        raise error_response(
            "That email already has an account. Sign in instead.",
            {"email": "taken"},
            status.HTTP_409_CONFLICT,
        )
    try:
        return crud.user.create_user(db, user_data, role=UserRole.STUDENT)
    except Exception as e:
        db.rollback()
        logger.exception("Error during registration: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not register user",
        )


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    email = normalize_email(form_data.username)
    user = crud.user.get_user_by_email(db, email)
    if not user or not verify_password(form_data.password, user.password):
        logger.info("Failed login for %s", email)
        raise _unauthorized("Invalid credentials")
    if user.is_suspended:
        raise error_response(
            "Account suspended", {"account": "suspended"}, status.HTTP_403_FORBIDDEN
        )
    token = create_access_token({"sub": user.email, "role": user.role.value})
    return {"access_token": token, "token_type": "bearer", "user": user}


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token_subject(token: str) -> TokenData:
    """Return the email carried in ``sub``; expired or forged tokens are 401."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _unauthorized() from None
    email = payload.get("sub")
    if not email:
        raise _unauthorized()
    return TokenData(email=email)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    request: Request = None,
) -> User:
    # Bearer header first, then the access_token cookie set by browser clients.
    raw = token or (request.cookies.get("access_token") if request is not None else None)
    if not raw:
        raise _unauthorized("Not authenticated")
    user = crud.user.get_user_by_email(db, decode_token_subject(raw).email)
    if user is None:
        raise _unauthorized()
    return user


@router.get("/me", response_model=UserResponse)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
