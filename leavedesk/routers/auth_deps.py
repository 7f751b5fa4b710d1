"""
Authentication and role dependencies.
Every data endpoint resolves the caller through get_current_employee; row-level
filtering by role happens in the service layer.
"""
import logging
from typing import Callable, List

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from leavedesk.database import get_db
from leavedesk.models.employee import Employee, EmployeeRole
from leavedesk.schemas.auth import TokenData
from leavedesk.services import auth as auth_service

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_token_payload(token: str = Depends(oauth2_scheme)) -> dict:
    payload = auth_service.decode_access_token(token)

    if payload is None:
        logger.warning("Authentication failed: Invalid token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("error") == "TOKEN_EXPIRED":
        logger.info("Authentication failed: Token expired")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="TOKEN_EXPIRED",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("type") != "access":
        logger.warning("Authentication failed: Invalid token type")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


def get_current_employee(payload: dict = Depends(get_token_payload), db: Session = Depends(get_db)) -> Employee:
    """
    Extracts and validates the current employee from the JWT token.
    """
    email = payload.get("sub")
    if email is None:
        logger.warning("Authentication failed: Missing subject (email) in token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing subject in token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_data = TokenData(email=email, role=payload.get("role"))
    employee = db.query(Employee).filter(Employee.email == token_data.email).first()

    if employee is None:
        logger.warning(f"Authentication failed: Employee {email} not found in database")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not employee.is_active:
        logger.warning(f"Authentication failed: Employee {email} is inactive")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive"
        )
    return employee


def require_role(allowed_roles: List[EmployeeRole]) -> Callable:
    """
    Dependency factory that checks if the employee has one of the allowed roles.

    Usage:
        @router.get("/admin-only")
        def admin_endpoint(admin: Employee = Depends(require_role([EmployeeRole.ADMIN]))):
            ...
    """
    def role_checker(current_employee: Employee = Depends(get_current_employee)):
        if current_employee.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {[r.value for r in allowed_roles]}"
            )
        return current_employee
    return role_checker


def require_admin():
    """Shorthand for requiring the admin role."""
    return require_role([EmployeeRole.ADMIN])
