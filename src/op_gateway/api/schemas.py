"""Pydantic request/response schemas for op_gateway.

The login body keeps the short ``user``/``pass`` field names clients send.
"""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., alias="user", min_length=1)
    password: str = Field(..., alias="pass", min_length=1)


class LoginResponse(BaseModel):
    jwt: str
    token_type: str = "Bearer"
    expires_in: int = 3600  # seconds
