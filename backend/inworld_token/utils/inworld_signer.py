"""Inworld IW1 request signer using chained HMAC-SHA256."""
import hashlib
import hmac
import secrets
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from inworld_token.models.token import ApiKey, SignatureContext

AUTH_SCHEME = "IW1-HMAC-SHA256"
SIGNATURE_PREFIX = "IW1"
SIGNATURE_TERMINATOR = "iw1_request"
GENERATE_TOKEN_PATH = "/ai.inworld.engine.WorldEngine/GenerateToken"
NONCE_LENGTH = 11
DEFAULT_TLS_PORT_SUFFIX = ":443"


class SignerInputError(ValueError):
    """Raised when credential or context fields cannot produce a valid signature."""


def get_date_time(now: Optional[datetime] = None) -> str:
    """Return the UTC time as ``YYYYMMDDHHMMSS``.

    Naive datetimes are treated as UTC.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y%m%d%H%M%S")


def generate_nonce() -> str:
    """Return an 11 character hex nonce cut from 16 random bytes."""
    return secrets.token_hex(16)[1 : 1 + NONCE_LENGTH]


def normalize_host(host: str) -> str:
    """Strip a trailing ``:443``; other ports are part of the signed host."""
    if host.endswith(DEFAULT_TLS_PORT_SUFFIX):
        return host[: -len(DEFAULT_TLS_PORT_SUFFIX)]
    return host


def normalize_method_path(path: str) -> str:
    return path[1:] if path.startswith("/") else path


def get_signature_key(secret: str, params: Sequence[str]) -> str:
    """Derive the IW1 signature for ``params``.

    Each parameter is folded into the key in order, the raw digest of one
    step keying the next, and the final key signs ``iw1_request``.

    Args:
        secret: Inworld API secret
        params: timestamp, bare host, method path and nonce, in that order

    Returns:
        Lowercase hex signature (64 characters)
    """
    if not secret:
        raise SignerInputError("API secret must not be empty")
    if len(params) != 4:
        raise SignerInputError(
            f"expected 4 signature parameters (timestamp, host, method, nonce), got {len(params)}"
        )

    key = f"{SIGNATURE_PREFIX}{secret}".encode("utf-8")
    for param in params:
        key = hmac.new(key, param.encode("utf-8"), hashlib.sha256).digest()

    return hmac.new(key, SIGNATURE_TERMINATOR.encode("utf-8"), hashlib.sha256).hexdigest()


def format_authorization(key: str, timestamp: str, nonce: str, signature: str) -> str:
    return f"{AUTH_SCHEME} ApiKey={key},DateTime={timestamp},Nonce={nonce},Signature={signature}"


def build_authorization(api_key: ApiKey, context: SignatureContext) -> str:
    """Build the ``Authorization`` header value for a signing context."""
    _require(api_key.key, "API key")
    _require(api_key.secret, "API secret")
    _require(context.timestamp, "timestamp")
    _require(context.host, "host")
    _require(context.method_path, "method path")
    _require(context.nonce, "nonce")

    host = normalize_host(context.host)
    method = normalize_method_path(context.method_path)
    _require(host, "host")
    _require(method, "method path")

    params: List[str] = [context.timestamp, host, method, context.nonce]
    signature = get_signature_key(api_key.secret, params)
    return format_authorization(api_key.key, context.timestamp, context.nonce, signature)


def _require(value: str, name: str) -> None:
    if not value:
        raise SignerInputError(f"{name} must not be empty")


class InworldSigner:
    """Signs Inworld token requests with the IW1-HMAC-SHA256 scheme."""

    def __init__(self, api_key: str, api_secret: str) -> None:
        """Initialize signer with API credentials.

        Args:
            api_key: Inworld API key
            api_secret: Inworld API secret
        """
        _require(api_key, "API key")
        _require(api_secret, "API secret")
        self.credential = ApiKey(key=api_key, secret=api_secret)

    @property
    def api_key(self) -> str:
        return self.credential.key

    def build_context(
        self,
        engine_host: str,
        *,
        timestamp: Optional[str] = None,
        nonce: Optional[str] = None,
        method_path: str = GENERATE_TOKEN_PATH,
    ) -> SignatureContext:
        return SignatureContext(
            timestamp=timestamp if timestamp is not None else get_date_time(),
            host=engine_host,
            method_path=method_path,
            nonce=nonce if nonce is not None else generate_nonce(),
        )

    def authorization_header(
        self,
        engine_host: str,
        *,
        timestamp: Optional[str] = None,
        nonce: Optional[str] = None,
    ) -> str:
        """Create the IW1 authorization header for a GenerateToken call.

        Args:
            engine_host: Engine host the signature is scoped to
            timestamp: Fixed timestamp, generated when omitted
            nonce: Fixed nonce, generated when omitted

        Returns:
            Header value ready for the ``Authorization`` header
        """
        context = self.build_context(engine_host, timestamp=timestamp, nonce=nonce)
        return build_authorization(self.credential, context)
