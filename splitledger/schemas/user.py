"""
SplitLedger Backend — User Request/Response Schemas
====================================================

What:  Pydantic models for the registration and user lookup endpoints.
Why:   Inputs are validated (and unknown fields rejected) before the Account
       Directory runs; responses expose only public fields, never the hash.
"""

import uuid

from pydantic import BaseModel, Field, field_validator

# local@domain.tld; deliberately loose, no RFC 5322 parsing
EMAIL_PATTERN = r"^.+@.+\..+$"
MOBILE_PATTERN = r"^\d{10}$"


class UserCreate(BaseModel):
    """
    Registration payload.

    Validation:
        name:           trimmed, at least 3 characters
        email:          trimmed, local@domain.tld shape
        mobile_number:  exactly 10 digits
        password:       non-empty; stored only as a bcrypt hash
    """
    name: str = Field(min_length=3, max_length=120, description="Display name")
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN, description="Unique email address")
    mobile_number: str = Field(pattern=MOBILE_PATTERN, description="Unique 10-digit mobile number")
    password: str = Field(min_length=1, description="Plaintext password (hashed before storage)")

    model_config = {"extra": "forbid"}

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class UserCreatedResponse(BaseModel):
    """Returned by POST /api/users with HTTP 201."""
    message: str = Field(default="User registration has been done successfully")
    user_id: uuid.UUID = Field(description="Identifier assigned to the new user")


class UserResponse(BaseModel):
    """Public view of a user. The credential hash is never part of it."""
    name: str
    email: str
    mobile_number: str

    model_config = {"from_attributes": True}
