from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
import logging

from leavedesk.core.config import settings
from leavedesk.core.limiter import limiter
from leavedesk.database import get_db
from leavedesk.models.employee import Employee, EmployeeSession
from leavedesk.routers.auth_deps import get_current_employee, get_token_payload
from leavedesk.schemas.auth import LoginRequest, RefreshRequest, SessionResponse, SignUpRequest, Token
from leavedesk.schemas.employee import EmployeeResponse
from leavedesk.services import auth as auth_service
from leavedesk.services import employee_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


def _issue_tokens(db: Session, employee: Employee) -> dict:
    token_data = {
        "sub": employee.email,
        "role": employee.role.value,
        "employee_id": employee.id,
    }
    access_token = auth_service.create_access_token(data=token_data)
    refresh_token = auth_service.create_refresh_token(data={"sub": employee.email})

    expires_at = datetime.now(timezone.utc) + timedelta(days=auth_service.REFRESH_TOKEN_EXPIRE_DAYS)
    db.add(EmployeeSession(
        employee_id=employee.id,
        refresh_token=refresh_token,
        expires_at=expires_at
    ))
    db.commit()

    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer",
        "user": {
            "id": employee.id,
            "email": employee.email,
            "role": employee.role.value,
            "first_name": employee.first_name,
            "last_name": employee.last_name,
        }
    }


@router.post("/signup", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
def signup(data: SignUpRequest, db: Session = Depends(get_db)):
    employee = employee_service.register_employee(
        db,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
    )
    return employee


@router.post("/login", response_model=Token)
@limiter.limit(settings.login_rate_limit)
def login(request: Request, login_data: LoginRequest, db: Session = Depends(get_db)):
    employee = employee_service.get_employee_by_email(db, login_data.email)
    if not employee or not auth_service.verify_password(login_data.password, employee.hashed_password):
        logger.warning("Failed login", extra={"email": login_data.email, "reason": "invalid_credentials"})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not employee.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is inactive")

    try:
        tokens = _issue_tokens(db, employee)
    except Exception as e:
        db.rollback()
        logger.error(f"Login error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal login error. Please check server logs."
        )
    logger.info("Login", extra={"employee_id": employee.id})
    return tokens


@router.post("/refresh", response_model=Token)
def refresh(data: RefreshRequest, db: Session = Depends(get_db)):
    payload = auth_service.decode_access_token(data.refresh_token)
    if payload is None or payload.get("type") != "refresh":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    db_session = db.query(EmployeeSession).filter(
        EmployeeSession.refresh_token == data.refresh_token,
        EmployeeSession.is_revoked == False,  # noqa: E712
        EmployeeSession.expires_at > datetime.now(timezone.utc)
    ).first()

    if not db_session:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired or revoked")

    employee = db_session.employee
    if not employee or not employee.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User inactive or not found")

    # Rotation: revoke old, create new
    db_session.is_revoked = True
    return _issue_tokens(db, employee)


@router.post("/logout")
def logout(data: RefreshRequest, db: Session = Depends(get_db)):
    db_session = db.query(EmployeeSession).filter(EmployeeSession.refresh_token == data.refresh_token).first()
    if db_session:
        db_session.is_revoked = True
        db.commit()
    return {"message": "Successfully logged out"}


@router.get("/session", response_model=SessionResponse)
def current_session(
    payload: dict = Depends(get_token_payload),
    current_employee: Employee = Depends(get_current_employee),
):
    """The signed-in employee and the access-token expiry (epoch seconds)."""
    return {"employee": current_employee, "expires_at": payload.get("exp")}
