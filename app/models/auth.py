"""
Pydantic models for the Zalo login flow.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TokenExchangeRequest(BaseModel):
    """Request body for the token exchange relay."""
    model_config = ConfigDict(populate_by_name=True)

    code: Optional[str] = None
    code_verifier: Optional[str] = Field(default=None, alias="codeVerifier")

    @property
    def is_complete(self) -> bool:
        return bool(self.code) and bool(self.code_verifier)


class PKCEPair(BaseModel):
    """Model for PKCE verifier/challenge pair plus its anti-forgery state."""
    verifier: str
    challenge: str
    state: str

    @field_validator('verifier', 'challenge')
    @classmethod
    def validate_pkce_values(cls, v):
        if not v or len(v) < 43:
            raise ValueError('Invalid PKCE value')
        return v

    @field_validator('state')
    @classmethod
    def validate_state(cls, v):
        if not v or not v.strip():
            raise ValueError('State parameter cannot be empty')
        return v


class ZaloTokenRequest(BaseModel):
    """Form body sent to the Zalo token endpoint."""
    app_id: str
    code: str
    code_verifier: str
    grant_type: str = "authorization_code"
