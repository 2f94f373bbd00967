"""
OAuth2 wire models shared by all authorization-code providers.
"""

from pydantic import BaseModel, ConfigDict, Field


class TokenResponse(BaseModel):
    """
    Successful response of an OAuth2 token endpoint (RFC 6749, 5.1).

    Only the access token is used; it authorizes exactly one profile fetch
    and is never stored. Other members (token_type, expires_in, ...) are
    kept as extras without validation.
    """

    access_token: str = Field(min_length=1, description="OAuth2 access token")

    model_config = ConfigDict(extra="allow")
