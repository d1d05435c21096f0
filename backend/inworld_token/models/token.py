"""Credential, signing context and token payload models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel


@dataclass(frozen=True, slots=True)
class ApiKey:
    """Inworld API key pair supplied by the caller."""

    key: str
    secret: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class SignatureContext:
    """Per-request values covered by the IW1 signature."""

    timestamp: str
    host: str
    method_path: str
    nonce: str


class TokenRequest(BaseModel):
    """Body of the token:generate call."""

    key: str
    resources: List[str]


class TokenResponse(BaseModel):
    """JWT token returned by the Inworld auth service.

    Example::

        {
          "token": "...",
          "type": "Bearer",
          "expirationTime": "2025-05-16T02:50:26Z",
          "sessionId": "default:fbbbbaaa-4c59-4fe6-88ee-3d27f4741fae"
        }
    """

    token: str
    type: str
    expirationTime: str
    sessionId: Optional[str] = None

    class Config:
        extra = "allow"

    @property
    def authorization(self) -> str:
        return f"{self.type} {self.token}"
