from schemas.auth_schema import RegistrationRequest, LoginRequest, ResetPasswordRequest, MessageResponse, SessionClaims
from errors.user_errors import InvalidCredentialsError, DuplicateUserError, UserNotFoundError, WeakPasswordError
from services.user_service import authenticate_user, register, reset_password, get_user_by_id
from fastapi import APIRouter, Depends, HTTPException, Request, status
from config.rate_limit import limiter, LOGIN_RATE_LIMIT
from schemas.user_schema import UserResponse, LoginResponse
from errors.db_errors import IntegrityConstraintError
from middlewares.jwt_auth import get_current_user
from config.jwt import create_access_token
from sqlalchemy.orm import Session
from config.database import get_db

router = APIRouter(prefix = "/api/auth", tags = ["Auth"])

# Register new user
@router.post("/register", response_model = UserResponse, status_code = status.HTTP_201_CREATED)
def register_endpoint(data: RegistrationRequest, db: Session = Depends(get_db)):
    try:
        return register(db, data)
    except DuplicateUserError as e:
        raise HTTPException(status_code = status.HTTP_400_BAD_REQUEST, detail = str(e))
    except IntegrityConstraintError as e:
        raise HTTPException(status_code = status.HTTP_409_CONFLICT, detail = str(e))


# Login user, attempts are rate limited per client address
@router.post("/login", response_model = LoginResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
def login_endpoint(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = authenticate_user(db, req.email, req.password)
        token = create_access_token(subject = str(user.id), extra_claims = {
            "role": user.role.value,
        })
        return LoginResponse(user = UserResponse.model_validate(user), access_token = token)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code = status.HTTP_401_UNAUTHORIZED, detail = str(e))


# Logout user, tokens stay valid until they expire
@router.post("/logout", response_model = MessageResponse)
def logout_endpoint():
    return MessageResponse(message = "Logout successful")


# Reset password
@router.post("/reset-password", response_model = MessageResponse)
def reset_password_endpoint(req: ResetPasswordRequest, db: Session = Depends(get_db)):
    try:
        reset_password(db, req.email, req.new_password)
        return MessageResponse(message = "Password updated successfully")
    except WeakPasswordError as e:
        raise HTTPException(status_code = status.HTTP_400_BAD_REQUEST, detail = str(e))
    except UserNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))


# Current user
@router.get("/me", response_model = UserResponse)
def me_endpoint(current_user: SessionClaims = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return get_user_by_id(db, current_user.user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
