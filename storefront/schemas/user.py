from pydantic import AfterValidator, BaseModel, EmailStr, Field, field_validator
from typing import Annotated, Any, Dict, List, Optional, Union
from uuid import UUID

from storefront.schemas.common import Envelope


def _non_empty_address(value):
    if isinstance(value, str) and not value.strip():
        raise ValueError("Address is Required")
    if isinstance(value, dict) and not value:
        raise ValueError("Address must be a non-empty object")
    return value


Address = Annotated[Union[str, Dict[str, Any]], AfterValidator(_non_empty_address)]


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, example="John Doe")
    email: EmailStr = Field(..., example="john@example.com")
    password: str = Field(..., min_length=1, example="password123")
    phone: str = Field(..., min_length=1, pattern=r"^\d+$", example="1234567890")
    address: Address = Field(..., example="123 Street")
    answer: str = Field(..., min_length=1, description="Security answer used to reset the password", example="Blue")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is Required")
        return value


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., example="john@example.com")
    password: str = Field(..., min_length=1, example="password123")


class ForgotPasswordRequest(BaseModel):
    email: EmailStr
    answer: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    """Partial profile update; email cannot be changed"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = None
    phone: Optional[str] = Field(None, pattern=r"^\d+$")
    address: Optional[Address] = None


class UserResponse(BaseModel):
    id: UUID
    name: str
    email: str
    phone: str
    address: Union[str, Dict[str, Any]]
    role: int

    class Config:
        from_attributes = True


class RegisterResponse(Envelope):
    user: UserResponse


class LoginResponse(Envelope):
    user: UserResponse
    token: str


class ProfileResponse(Envelope):
    updated_user: UserResponse


class UserListResponse(Envelope):
    users: List[UserResponse]
