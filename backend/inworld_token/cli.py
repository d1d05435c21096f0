#!/usr/bin/env python3
"""
Inworld JWT token generator.

Signs a GenerateToken request with the API key pair from the environment
(or a ``.env`` file) and prints the issued token.

Usage:
    export INWORLD_KEY=your_api_key_here
    export INWORLD_SECRET=your_api_secret_here
    inworld-token

The token is then sent to Inworld endpoints as::

    Authorization: Bearer <token>
"""

import asyncio
import json
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from inworld_token.models.settings import Settings
from inworld_token.models.token import TokenResponse
from inworld_token.services.token_service import TokenRequestError, TokenService
from inworld_token.utils.inworld_signer import SignerInputError

logger = logging.getLogger("inworld_token.cli")

TOKEN_PREVIEW_LENGTH = 15


def render_token(token: TokenResponse) -> str:
    """Format the token payload and usage hints for the console."""
    lines = [
        json.dumps(token.model_dump(exclude_none=True), indent=2),
        "",
        "This JWT token can be used to authenticate API requests to Inworld.",
        "Include it in your API requests as:",
        f"Authorization: {token.type} {token.token[:TOKEN_PREVIEW_LENGTH]}...",
        "",
        f"The token expires at: {token.expirationTime}",
    ]
    return "\n".join(lines)


async def fetch_token(settings: Settings) -> TokenResponse:
    service = TokenService.from_settings(settings)
    return await service.generate_token()


def main(settings: Optional[Settings] = None) -> int:
    if settings is None:
        load_dotenv()
        settings = Settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        token = asyncio.run(fetch_token(settings))
    except SignerInputError as exc:
        logger.error("Invalid credentials: %s", exc)
        logger.error("Set INWORLD_KEY and INWORLD_SECRET in the environment or a .env file")
        return 1
    except TokenRequestError as exc:
        logger.error("API Error: %s", exc.body or exc)
        return 1

    print(render_token(token))
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
