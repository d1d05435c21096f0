"""Tests for the IW1-HMAC-SHA256 signer."""
import hashlib
import hmac
import re
from datetime import datetime, timedelta, timezone

import pytest

from inworld_token.models.token import ApiKey, SignatureContext
from inworld_token.utils.inworld_signer import (
    GENERATE_TOKEN_PATH,
    InworldSigner,
    SignerInputError,
    build_authorization,
    format_authorization,
    generate_nonce,
    get_date_time,
    get_signature_key,
    normalize_host,
    normalize_method_path,
)

METHOD = "ai.inworld.engine.WorldEngine/GenerateToken"
PARAMS = ["20200101000000", "api.inworld.ai", METHOD, "abc123"]
HEX64 = re.compile(r"^[0-9a-f]{64}$")


def _reference_signature(secret: str, params: list) -> str:
    """Independent derivation of the documented HMAC chain."""
    k0 = ("IW1" + secret).encode()
    k1 = hmac.new(k0, params[0].encode(), hashlib.sha256).digest()
    k2 = hmac.new(k1, params[1].encode(), hashlib.sha256).digest()
    k3 = hmac.new(k2, params[2].encode(), hashlib.sha256).digest()
    k4 = hmac.new(k3, params[3].encode(), hashlib.sha256).digest()
    return hmac.new(k4, b"iw1_request", hashlib.sha256).hexdigest()


KNOWN_VECTOR = "6966e81d2f9e01af74ced846a86ef9df501d5f5be273510511aa5e5d96eb1eaf"


def test_signature_matches_known_vector() -> None:
    """Test signature against the independently derived regression vector."""
    assert get_signature_key("testsecret", PARAMS) == KNOWN_VECTOR


def test_reference_chain_reproduces_known_vector() -> None:
    assert _reference_signature("testsecret", PARAMS) == KNOWN_VECTOR


def test_signature_is_deterministic_lowercase_hex() -> None:
    first = get_signature_key("testsecret", PARAMS)
    second = get_signature_key("testsecret", list(PARAMS))

    assert first == second
    assert HEX64.match(first)


def test_signature_keys_are_raw_digests_not_hex() -> None:
    """Re-encoding intermediate keys as hex must give a different result."""
    key = ("IW1testsecret").encode()
    for param in PARAMS:
        key = hmac.new(key, param.encode(), hashlib.sha256).hexdigest().encode()
    hex_chained = hmac.new(key, b"iw1_request", hashlib.sha256).hexdigest()

    assert get_signature_key("testsecret", PARAMS) != hex_chained


@pytest.mark.parametrize("index", range(4))
def test_signature_changes_with_each_parameter(index: int) -> None:
    """Test a one-character change in any parameter changes the signature."""
    altered = list(PARAMS)
    altered[index] = altered[index][:-1] + ("X" if altered[index][-1] != "X" else "Y")

    assert get_signature_key("testsecret", altered) != KNOWN_VECTOR


def test_signature_changes_with_secret() -> None:
    assert get_signature_key("testsecreT", PARAMS) != KNOWN_VECTOR


def test_signature_is_order_sensitive() -> None:
    swapped = [PARAMS[1], PARAMS[0], PARAMS[2], PARAMS[3]]

    assert get_signature_key("testsecret", swapped) != KNOWN_VECTOR


def test_signature_accepts_empty_parameter() -> None:
    """Empty parameters still hash to a well-formed, distinct signature."""
    params = ["20200101000000", "", METHOD, "abc123"]
    signature = get_signature_key("testsecret", params)

    assert HEX64.match(signature)
    assert signature == _reference_signature("testsecret", params)
    assert signature != KNOWN_VECTOR


def test_signature_rejects_empty_secret() -> None:
    with pytest.raises(SignerInputError):
        get_signature_key("", PARAMS)


@pytest.mark.parametrize("params", [[], PARAMS[:3], PARAMS + ["extra"]])
def test_signature_rejects_wrong_parameter_count(params: list) -> None:
    with pytest.raises(SignerInputError):
        get_signature_key("testsecret", params)


@pytest.mark.parametrize(
    "host,expected",
    [
        ("example.com:443", "example.com"),
        ("example.com:8443", "example.com:8443"),
        ("example.com", "example.com"),
        ("api-engine.inworld.ai:443", "api-engine.inworld.ai"),
    ],
)
def test_normalize_host(host: str, expected: str) -> None:
    assert normalize_host(host) == expected


def test_normalize_method_path_strips_one_leading_slash() -> None:
    assert normalize_method_path(GENERATE_TOKEN_PATH) == METHOD
    assert normalize_method_path(METHOD) == METHOD
    assert normalize_method_path("//double") == "/double"


def test_format_authorization_exact() -> None:
    signature = "a" * 64
    header = format_authorization("abc", "20250101000000", "deadbeef12", signature)

    assert header == (
        "IW1-HMAC-SHA256 ApiKey=abc,DateTime=20250101000000,Nonce=deadbeef12,Signature=" + signature
    )


def test_build_authorization_normalizes_host_and_path() -> None:
    context = SignatureContext(
        timestamp="20200101000000",
        host="api.inworld.ai:443",
        method_path=GENERATE_TOKEN_PATH,
        nonce="abc123",
    )

    header = build_authorization(ApiKey(key="my-key", secret="testsecret"), context)

    assert header == (
        "IW1-HMAC-SHA256 ApiKey=my-key,DateTime=20200101000000,Nonce=abc123,"
        f"Signature={KNOWN_VECTOR}"
    )
    assert " " not in header.split(" ", 1)[1]


def test_build_authorization_keeps_non_default_port() -> None:
    context = SignatureContext("20200101000000", "api.inworld.ai:8443", GENERATE_TOKEN_PATH, "abc123")

    header = build_authorization(ApiKey("my-key", "testsecret"), context)

    expected = _reference_signature(
        "testsecret", ["20200101000000", "api.inworld.ai:8443", METHOD, "abc123"]
    )
    assert header.endswith(f"Signature={expected}")


@pytest.mark.parametrize(
    "api_key,context",
    [
        (ApiKey("", "secret"), SignatureContext("20200101000000", "host", METHOD, "n")),
        (ApiKey("key", ""), SignatureContext("20200101000000", "host", METHOD, "n")),
        (ApiKey("key", "secret"), SignatureContext("", "host", METHOD, "n")),
        (ApiKey("key", "secret"), SignatureContext("20200101000000", "", METHOD, "n")),
        (ApiKey("key", "secret"), SignatureContext("20200101000000", ":443", METHOD, "n")),
        (ApiKey("key", "secret"), SignatureContext("20200101000000", "host", "", "n")),
        (ApiKey("key", "secret"), SignatureContext("20200101000000", "host", "/", "n")),
        (ApiKey("key", "secret"), SignatureContext("20200101000000", "host", METHOD, "")),
    ],
)
def test_build_authorization_rejects_empty_fields(api_key: ApiKey, context: SignatureContext) -> None:
    with pytest.raises(SignerInputError):
        build_authorization(api_key, context)


def test_get_date_time_format() -> None:
    value = get_date_time()

    assert len(value) == 14
    assert value.isdigit()
    parsed = datetime.strptime(value, "%Y%m%d%H%M%S").replace(tzinfo=timezone.utc)
    assert abs(datetime.now(timezone.utc) - parsed) < timedelta(minutes=1)


def test_get_date_time_converts_to_utc() -> None:
    local = datetime(2025, 1, 1, 2, 30, 15, tzinfo=timezone(timedelta(hours=2)))

    assert get_date_time(local) == "20250101003015"
    assert get_date_time(datetime(2025, 1, 1, 0, 0, 0)) == "20250101000000"


def test_generate_nonce_shape() -> None:
    nonce = generate_nonce()

    assert len(nonce) == 11
    assert re.match(r"^[0-9a-f]{11}$", nonce)


def test_generate_nonce_unique() -> None:
    nonces = {generate_nonce() for _ in range(1000)}

    assert len(nonces) == 1000


def test_inworld_signer_header_with_fixed_values() -> None:
    signer = InworldSigner("my-key", "testsecret")

    header = signer.authorization_header(
        "api.inworld.ai:443", timestamp="20200101000000", nonce="abc123"
    )

    assert header == (
        "IW1-HMAC-SHA256 ApiKey=my-key,DateTime=20200101000000,Nonce=abc123,"
        f"Signature={KNOWN_VECTOR}"
    )


def test_inworld_signer_generates_fresh_context() -> None:
    signer = InworldSigner("my-key", "testsecret")

    context = signer.build_context("api-engine.inworld.ai")
    header = signer.authorization_header("api-engine.inworld.ai")

    assert len(context.timestamp) == 14
    assert len(context.nonce) == 11
    assert context.method_path == GENERATE_TOKEN_PATH
    assert re.match(
        r"^IW1-HMAC-SHA256 ApiKey=my-key,DateTime=\d{14},Nonce=[0-9a-f]{11},Signature=[0-9a-f]{64}$",
        header,
    )


@pytest.mark.parametrize("key,secret", [("", "secret"), ("key", "")])
def test_inworld_signer_rejects_empty_credentials(key: str, secret: str) -> None:
    with pytest.raises(SignerInputError):
        InworldSigner(key, secret)


def test_api_key_repr_hides_secret() -> None:
    assert "testsecret" not in repr(ApiKey("my-key", "testsecret"))
