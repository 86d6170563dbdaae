from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import auth

router = APIRouter(prefix="/api/auth", tags=["auth"])


class Credentials(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class EmailIn(BaseModel):
    email: Optional[str] = None


@router.post("/login")
def login(body: Credentials):
    data = auth.sign_in(body.email, body.password)
    return {"message": "Login successful", **data}


@router.post("/signup")
def signup(body: Credentials):
    data = auth.sign_up(body.email, body.password)
    return JSONResponse(
        status_code=201,
        content={
            "message": "Signup successful. Please check your email to confirm your account.",
            **data,
        },
    )


@router.post("/logout")
def logout(authorization: Optional[str] = Header(None)):
    auth.sign_out(auth.bearer_token(authorization))
    return {"message": "Logout successful"}


@router.post("/reset-password")
def reset_password(body: EmailIn):
    auth.reset_password(body.email)
    return {"message": "Password reset email sent. Please check your inbox."}
