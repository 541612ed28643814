"""Pydantic schemas for the user and profile endpoints."""

from datetime import datetime
from typing import Annotated, Any, Dict, Literal, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from ....domain.models import User


def _check_email(value: str) -> str:
    """Reject malformed addresses but keep the accepted one exactly as sent.

    Stored emails are compared case-sensitively, so the normalised form
    email-validator produces is never substituted for the input.
    """
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(str(exc)) from exc
    return value


EmailAddress = Annotated[str, AfterValidator(_check_email)]


class AddressPayload(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, alias="postalCode")

    model_config = ConfigDict(populate_by_name=True)


class SocialLinksPayload(BaseModel):
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None


class PreferencesPayload(BaseModel):
    language: str = "English"
    notifications: bool = True
    theme: str = "light"


class ProfileFields(BaseModel):
    """Profile attributes a user may set. Credentials are not part of it."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    profile_picture: Optional[str] = Field(default=None, alias="profilePicture")
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    date_of_birth: Optional[datetime] = Field(default=None, alias="dateOfBirth")
    gender: Optional[Literal["Male", "Female", "Other"]] = None
    company: Optional[str] = None
    job_title: Optional[str] = Field(default=None, alias="jobTitle")
    bio: Optional[str] = None
    address: Optional[AddressPayload] = None
    social_links: Optional[SocialLinksPayload] = Field(default=None, alias="socialLinks")
    preferences: Optional[PreferencesPayload] = None

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class SignupRequest(ProfileFields):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailAddress
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: EmailAddress
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"


class ForgotPasswordRequest(BaseModel):
    email: EmailAddress


class VerifyOtpRequest(BaseModel):
    email: EmailAddress
    otp: str = Field(..., min_length=1, max_length=12)


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailAddress
    otp: str = Field(..., min_length=1, max_length=12)
    new_password: str = Field(..., alias="newPassword", min_length=6, max_length=128)


class MessageResponse(BaseModel):
    message: str


class ProfileUpdateRequest(ProfileFields):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)


class UserProfileResponse(BaseModel):
    """Profile as returned to its owner; never includes password or OTP state."""

    id: int
    name: str
    email: str
    profile_picture: str
    phone_number: Optional[str]
    date_of_birth: Optional[datetime]
    gender: Optional[str]
    company: Optional[str]
    job_title: Optional[str]
    bio: Optional[str]
    address: Dict[str, Any]
    social_links: Dict[str, Any]
    preferences: Dict[str, Any]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_user(cls, user: User) -> "UserProfileResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            profile_picture=user.profile_picture,
            phone_number=user.phone_number,
            date_of_birth=user.date_of_birth,
            gender=user.gender,
            company=user.company,
            job_title=user.job_title,
            bio=user.bio,
            address=user.address,
            social_links=user.social_links,
            preferences=user.preferences,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserProfileResponse
