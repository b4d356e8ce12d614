from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: Optional[str] = None
    role: Literal["buyer", "seller", "agent"] = "buyer"


class RefreshRequest(BaseModel):
    refresh_token: str


class UserUpdateRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[Literal["buyer", "seller", "agent"]] = None
    avatar: Optional[str] = None


class PasswordUpdateRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class Identity(BaseModel):
    id: str
    email: Optional[str] = None


class User(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    role: str = "buyer"
    avatar: Optional[str] = None


class AuthResponse(BaseModel):
    status: str = "success"
    message: str
    token: str
    refresh_token: Optional[str] = None
    user: User


class StatusResponse(BaseModel):
    status: str = "success"
    message: str
