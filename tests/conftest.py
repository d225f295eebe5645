"""Shared fixtures."""

import base64
import json
from typing import Any, Callable

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from fastapi.testclient import TestClient

from clova_cek.config import Settings
from clova_cek.main import create_app
from clova_cek.services.signature import SignatureVerifier

APPLICATION_ID = "com.example.app"


@pytest.fixture(scope="session")
def private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def public_key_pem(private_key: rsa.RSAPrivateKey) -> bytes:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@pytest.fixture(scope="session")
def verifier(public_key_pem: bytes) -> SignatureVerifier:
    return SignatureVerifier(public_key_pem)


@pytest.fixture(scope="session")
def sign(private_key: rsa.RSAPrivateKey) -> Callable[[bytes], str]:
    """Sign a body the way the Clova platform does."""

    def _sign(body: bytes) -> str:
        signature = private_key.sign(body, padding.PKCS1v15(), hashes.SHA256())
        return base64.b64encode(signature).decode("ascii")

    return _sign


def build_payload(
    request: dict[str, Any],
    application_id: str | None = APPLICATION_ID,
    session_attributes: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Build a request envelope around a `request` object."""
    system: dict[str, Any] = {
        "user": {"userId": "U0123456789"},
        "device": {
            "deviceId": "device-1",
            "display": {"size": "none", "contentLayer": {"width": 0, "height": 0}},
        },
    }
    if application_id is not None:
        system["application"] = {"applicationId": application_id}

    return {
        "version": "1.0",
        "session": {
            "new": True,
            "sessionAttributes": session_attributes or {},
            "sessionId": "88ac0e66-c53e-485a-873f-542e36a34825",
            "user": {"userId": "U0123456789"},
        },
        "context": {"System": system},
        "request": request,
    }


@pytest.fixture
def make_body() -> Callable[..., bytes]:
    """Serialize a request envelope to raw body bytes."""

    def _make(request: dict[str, Any], **kwargs: Any) -> bytes:
        return json.dumps(build_payload(request, **kwargs), ensure_ascii=False).encode("utf-8")

    return _make


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        application_id=APPLICATION_ID,
        api_path="/api",
        debug_path="/debug",
        response_timeout=5.0,
    )


@pytest.fixture
def client(test_settings: Settings, verifier: SignatureVerifier) -> TestClient:
    """Test client for the app with the demo handler and a test signing key."""
    app = create_app(test_settings, verifier=verifier)
    return TestClient(app)


# Request captured from the Clova platform and its SignatureCEK header
PLATFORM_BODY = b'{"version":"1.0","session":{"new":true,"sessionAttributes":{},"sessionId":"88ac0e66-c53e-485a-873f-542e36a34825","user":{"userId":"Ud01b1625e62790a0e6502b91adbb4b26"}},"context":{"System":{"application":{"applicationId":"com.keno42.worldClock"},"device":{"deviceId":"5d0fb2c9ea716c153c7d2bc489c03de0cbf93af8d737ab700fd435be8a575af6","display":{"size":"none","contentLayer":{"width":0,"height":0}}},"user":{"userId":"Ud01b1625e62790a0e6502b91adbb4b26"}}},"request":{"type":"LaunchRequest","requestId":"2d1f5706-1183-4419-8489-68567f1c6cc6","timestamp":"2018-07-02T10:11:30Z","locale":"ja-JP","extensionId":"com.keno42.worldClock","intent":{"intent":"","name":"","slots":null},"event":{"namespace":"","name":"","payload":null}}}'  # noqa: E501

PLATFORM_SIGNATURE = (
    "iEW0Y9f/4HwCdHI7trS8qLY7XEiTc+lFurZHwCLKspJB0P7MMvcLpckUEIdSvRI9/GP2JfaI5J007dqKZqdmLQ"
    "o+rSV9rkPnXDN8b1m2G5olQySi0WnOcOk3Dhded5Ts2zzrKINYd7VEIFnE1srN4O1UTfDOHzKcK9yV7anHuxw3"
    "X7MUU/KWdR4k3dVJz+kfQxnL2zhafUkC9X2luYah3ja0au3oLw81weizAA1+Y0FEXsx1/mhMLtZA+WLuGEKzuz"
    "3UM5V2UtfRBHKVRGnTSsUisR9U9WxUxBFo4RQJ4pK1r0uAeyszzJC4aMsLR9Ca4ysrpxb8rtLgfcurpcb3RQ=="
)


@pytest.fixture
def platform_request() -> tuple[bytes, str]:
    """Body and SignatureCEK of a real LaunchRequest for com.keno42.worldClock."""
    return PLATFORM_BODY, PLATFORM_SIGNATURE
