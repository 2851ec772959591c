# workforce/schemas/user.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from workforce.core.enums import Role


class UserBase(BaseModel):
    email: EmailStr
    name: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(min_length=8)
    role: Role = Role.EMPLOYEE
    employee_id: Optional[int] = None

class User(UserBase):
    id: int
    role: Role
    employee_id: Optional[int] = None

    class Config:
        from_attributes = True

class SessionOut(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    role: Role
    employee_id: Optional[int] = None

    class Config:
        from_attributes = True

class PasswordUpdate(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8)

class Ack(BaseModel):
    success: bool = True
