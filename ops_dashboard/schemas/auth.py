"""
Authentication payload schemas.
"""

from pydantic import BaseModel


class LoginPayload(BaseModel):
    """Password submitted from the login form."""

    password: str = ""
