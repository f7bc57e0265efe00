from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

# Largest value a BIGINT primary key can hold
MAX_ID = 2 ** 63 - 1


# Submission Schemas
class SubmissionResponse(BaseModel):
    id: int
    projectName: str
    userName: str
    projectUrl: str
    imageUrl: str
    createdAt: Optional[datetime] = None


class SubmissionCreated(BaseModel):
    success: bool = True
    id: int
    imageUrl: str


# Registration Schemas
class RegistrationCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    vnumber: str = Field(..., min_length=1)


class RegistrationResponse(BaseModel):
    id: int
    name: str
    email: str
    vnumber: str
    createdAt: Optional[datetime] = None


class RegistrationCount(BaseModel):
    count: int


class SuccessResponse(BaseModel):
    success: bool = True


# Account Schemas
class AccountCreated(BaseModel):
    success: bool = True
    userId: int
    resume_path: Optional[str] = None


class UserLogin(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str] = None
    email: str
    vnumber: str
    bio: Optional[str] = None
    resume_path: Optional[str] = None
    resume_url: Optional[str] = None
    created_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    user: AccountResponse


# Event Schemas
class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    is_active: bool = True


class EventRegistrationCreate(BaseModel):
    userId: int = Field(..., ge=1, le=MAX_ID)
    eventId: int = Field(..., ge=1, le=MAX_ID)


class EventRegistrationCreated(BaseModel):
    success: bool = True
    id: int
    status: str
