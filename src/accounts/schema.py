"""Schema for accounts module."""

from ninja import ModelSchema, Schema
from pydantic import UUID4, EmailStr, Field

from common.schema import StrippedString

from .models import User


class UserSchema(ModelSchema):
    id: UUID4
    display_name: str

    class Meta:
        model = User
        fields = ["email", "name", "avatar_url", "email_verified", "email_verified_at", "created_at"]


class MinimalUserSchema(Schema):
    id: UUID4
    email: EmailStr
    name: str


class VerifyEmailSchema(Schema):
    token: StrippedString = Field(..., min_length=1, description="The token from the verification link.")


class VerifyEmailResponseSchema(Schema):
    message: str
    email: EmailStr


class ResendVerificationResponseSchema(Schema):
    message: str
    already_verified: bool = False


class VerificationStatusSchema(Schema):
    email_verified: bool
    email: EmailStr
