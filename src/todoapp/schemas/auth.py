"""Pydantic schemas for sign-up and sign-in."""

from pydantic import AliasChoices, BaseModel, Field


class SignUpRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("name", "displayName", "display_name"),
    )
    password: str = Field(..., min_length=1)


class SignInRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SignUpResponse(BaseModel):
    id: int


class SignInResponse(BaseModel):
    token: str
