"""
AwardBoard Backend - Account Request/Response Schemas
=======================================================

What:  Pydantic models for signup, login, change-password and /me.
How:   FastAPI validates request bodies against these; a missing field is
       answered with FastAPI's own 422 validation response.
"""

from typing import List, Union

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """Body of POST /login and POST /signup."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(min_length=1)


class StatusResponse(BaseModel):
    """
    `{status: ...}` envelope shared by the account endpoints.

    Login answers the integer 200 on success and the failure message
    otherwise; signup and change-password answer "success" / "failed".
    """

    status: Union[int, str]


class MeResponse(BaseModel):
    username: str
    awards: List[int] = Field(description="Distinct status codes earned, ascending")
