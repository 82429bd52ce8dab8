import time

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from jwtmanager import codec
from jwtmanager.errors import TokenSigningError, TokenVerificationError

SECRET = "test-secret-key-that-is-long-enough-for-hs256"


def sign(**overrides):
    options = dict(
        algorithm="HS256",
        audience=["api"],
        expires_in=3600,
        issuer="svc",
        jwtid="id-1",
        subject="user-42",
    )
    options.update(overrides)
    payload = options.pop("payload", {"role": "admin"})
    key = options.pop("key", SECRET)
    return codec.sign(payload, key, **options)


def verify(token, **overrides):
    options = dict(algorithm="HS256", audience=["api"], issuer="svc", clock_tolerance=10)
    options.update(overrides)
    key = options.pop("key", SECRET)
    return codec.verify(token, key, **options)


def test_sign_sets_registered_claims():
    token = sign(now=1000, not_before=60)
    claims = codec.decode(token)
    assert claims == {
        "role": "admin",
        "sub": "user-42",
        "iss": "svc",
        "aud": ["api"],
        "iat": 1000,
        "exp": 4600,
        "nbf": 1060,
        "jti": "id-1",
    }


def test_single_audience_string_becomes_list():
    claims = codec.decode(sign(audience="api"))
    assert claims["aud"] == ["api"]


def test_verify_roundtrip():
    claims = verify(sign())
    assert claims["sub"] == "user-42"
    assert claims["role"] == "admin"


@pytest.mark.parametrize(
    "sign_overrides,verify_overrides",
    [
        ({}, {"key": "another-secret-key-that-is-long-enough"}),
        ({}, {"issuer": "other"}),
        ({}, {"audience": ["other"]}),
        ({"expires_in": -60}, {}),
        ({"not_before": 60}, {}),
        ({}, {"algorithm": "HS512"}),
    ],
    ids=["bad-key", "wrong-issuer", "wrong-audience", "expired", "not-yet-valid", "wrong-algorithm"],
)
def test_verify_rejections(sign_overrides, verify_overrides):
    token = sign(**sign_overrides)
    with pytest.raises(TokenVerificationError) as exc:
        verify(token, **verify_overrides)
    assert isinstance(exc.value.__cause__, jwt.PyJWTError)


def test_clock_tolerance_accepts_recently_expired():
    token = sign(expires_in=-5)
    assert verify(token, clock_tolerance=10)["sub"] == "user-42"


def test_tampered_signature_rejected():
    header, payload, signature = sign().split(".")
    flipped = ("B" if signature[0] == "A" else "A") + signature[1:]
    with pytest.raises(TokenVerificationError):
        verify(".".join([header, payload, flipped]))


def test_missing_required_claim_rejected():
    token = jwt.encode(
        {"sub": "u", "iss": "svc", "aud": ["api"], "exp": int(time.time()) + 60, "iat": int(time.time())},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenVerificationError):
        verify(token)


def test_es256_keys():
    private_key = ec.generate_private_key(ec.SECP256R1())
    private_pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    token = sign(algorithm="ES256", key=private_pem)
    assert verify(token, algorithm="ES256", key=public_pem)["sub"] == "user-42"


def test_none_algorithm():
    token = sign(algorithm="none", key=b"")
    assert token.endswith(".")
    assert verify(token, algorithm="none", key=b"")["sub"] == "user-42"
    with pytest.raises(TokenVerificationError):
        verify(sign(algorithm="none", key=b"", expires_in=-60), algorithm="none", key=b"")


def test_none_algorithm_refuses_signed_tokens():
    with pytest.raises(TokenVerificationError):
        verify(sign(), algorithm="none", key=b"")


def test_sign_with_unusable_key():
    with pytest.raises(TokenSigningError):
        sign(algorithm="RS256", key=b"not a pem key")


def test_decode_malformed():
    with pytest.raises(TokenVerificationError):
        codec.decode("not-a-jwt")


def test_verify_checks_timing_against_given_time():
    token = sign(now=1000, expires_in=60, not_before=30)
    assert verify(token, now=1030)["sub"] == "user-42"
    with pytest.raises(TokenVerificationError, match="expired"):
        verify(token, now=1070)
    with pytest.raises(TokenVerificationError, match="nbf"):
        verify(token, now=1015)
    with pytest.raises(TokenVerificationError, match="iat"):
        verify(token, now=980)
