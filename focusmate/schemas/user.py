"""Pydantic schemas for auth requests and the session user projection."""
from pydantic import BaseModel


class SessionUserSchema(BaseModel):
    """What leaves the identity store: never carries the password hash."""

    id: str
    email: str
    name: str
    avatar: str
    is_guest: bool = False

    class Config:
        from_attributes = True


class SignupSchema(BaseModel):
    email: str
    password: str
    name: str


class LoginSchema(BaseModel):
    email: str
    password: str


class AuthOutSchema(BaseModel):
    user: SessionUserSchema
    access_token: str
    token_type: str = "bearer"
