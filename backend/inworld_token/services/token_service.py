"""Token service exchanging IW1-signed requests for Inworld JWT tokens."""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from inworld_token.models.settings import (
    DEFAULT_ENGINE_HOST,
    DEFAULT_HOST,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_WORKSPACE,
    Settings,
)
from inworld_token.models.token import TokenRequest, TokenResponse
from inworld_token.utils.inworld_signer import InworldSigner
from inworld_token.utils.structured_logging import key_preview, structured_log

TOKEN_GENERATE_PATH = "/auth/v1/tokens/token:generate"


class TokenRequestError(RuntimeError):
    """Raised when the token endpoint is unreachable or rejects the request."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TokenService:
    """Generates short-lived JWT tokens from an Inworld API key pair."""

    def __init__(
        self,
        *,
        api_key: str,
        api_secret: str,
        host: str = DEFAULT_HOST,
        engine_host: str = DEFAULT_ENGINE_HOST,
        workspace: str = DEFAULT_WORKSPACE,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        self.host = host
        self.engine_host = engine_host
        self.workspace = workspace
        self.endpoint = f"https://{host}{TOKEN_GENERATE_PATH}"
        self.http_timeout = http_timeout

        self.logger = logging.getLogger("token_service")
        self.signer = InworldSigner(api_key, api_secret)
        self.logger.info(
            "Token service initialized (host=%s, engine_host=%s, workspace=%s, API key: %s)",
            host,
            engine_host,
            workspace,
            key_preview(api_key),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            api_key=settings.inworld_key,
            api_secret=settings.inworld_secret,
            host=settings.inworld_host,
            engine_host=settings.inworld_engine_host,
            workspace=settings.inworld_workspace,
            http_timeout=settings.http_timeout,
        )

    def build_request(self) -> TokenRequest:
        return TokenRequest(key=self.signer.api_key, resources=[self.workspace])

    def build_headers(self) -> dict:
        """Return fresh request headers; each call signs with a new timestamp and nonce."""
        return {
            "Authorization": self.signer.authorization_header(self.engine_host),
            "Content-Type": "application/json",
        }

    async def generate_token(self) -> TokenResponse:
        """Request a JWT token for the configured workspace.

        Raises:
            TokenRequestError: on network failure, timeout or a non-2xx response
        """
        payload = self.build_request().model_dump()
        headers = self.build_headers()

        try:
            async with httpx.AsyncClient(timeout=self.http_timeout) as client:
                response = await client.post(self.endpoint, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body = exc.response.text
            status_code = exc.response.status_code
            structured_log(
                self.logger,
                "token_request_rejected",
                level=logging.ERROR,
                status_code=status_code,
                body=body,
                endpoint=self.endpoint,
            )
            raise TokenRequestError(
                f"Token request rejected with HTTP {status_code}: {body}",
                status_code=status_code,
                body=body,
            ) from exc
        except httpx.HTTPError as exc:
            structured_log(
                self.logger,
                "token_request_failed",
                level=logging.ERROR,
                error=str(exc) or exc.__class__.__name__,
                endpoint=self.endpoint,
            )
            raise TokenRequestError(f"Token request failed: {exc}") from exc

        token = TokenResponse.model_validate(response.json())
        structured_log(
            self.logger,
            "token_generated",
            type=token.type,
            expiration_time=token.expirationTime,
            session_id=token.sessionId,
        )
        return token


_token_service: Optional[TokenService] = None


def init_token_service(settings: Settings) -> TokenService:
    """Initialize the token service from settings.

    Args:
        settings: Settings carrying the Inworld credentials, hosts and workspace
    """
    global _token_service
    if _token_service is None:
        _token_service = TokenService.from_settings(settings)
    return _token_service


def get_token_service() -> TokenService:
    if _token_service is None:
        raise RuntimeError("TokenService has not been initialized yet")
    return _token_service


def reset_token_service() -> None:
    global _token_service
    _token_service = None
