from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from leavedesk.schemas.employee import EmployeeResponse

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)

class RefreshRequest(BaseModel):
    refresh_token: str

class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    user: Optional[dict] = None

class TokenData(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None

class SessionResponse(BaseModel):
    employee: EmployeeResponse
    expires_at: Optional[int] = None
