import hashlib
import hmac

import pytest

from hubdispatch.core.errors import Forbidden, MissingSignature, SignatureMismatch
from hubdispatch.services.signature import sign_payload, verify_signature

BODY = b'{"zen":"x"}'


def _alter_last_digit(signature: str) -> str:
    return signature[:-1] + ("0" if signature[-1] != "0" else "1")


def test_sign_payload_matches_hmac_sha1():
    expected = hmac.new(b"s3cr3t", BODY, hashlib.sha1).hexdigest()
    assert sign_payload("s3cr3t", BODY) == f"sha1={expected}"


def test_verify_valid_signature():
    verify_signature("s3cr3t", BODY, sign_payload("s3cr3t", BODY))
    verify_signature(b"s3cr3t", BODY, sign_payload(b"s3cr3t", BODY))


def test_verify_signature_for_other_body_fails():
    signature = sign_payload("s3cr3t", b'{"zen":"y"}')
    with pytest.raises(SignatureMismatch):
        verify_signature("s3cr3t", BODY, signature)


def test_verify_signature_with_other_secret_fails():
    with pytest.raises(SignatureMismatch):
        verify_signature("s3cr3t", BODY, sign_payload("other", BODY))


def test_single_altered_digit_fails():
    signature = _alter_last_digit(sign_payload("s3cr3t", BODY))
    with pytest.raises(SignatureMismatch):
        verify_signature("s3cr3t", BODY, signature)


@pytest.mark.parametrize("signature", [None, ""])
def test_missing_signature(signature):
    with pytest.raises(MissingSignature):
        verify_signature("s3cr3t", BODY, signature)


@pytest.mark.parametrize(
    "signature",
    [
        "sha1=",
        "sha1=abc",
        "garbage",
        "sha1" + "0" * 40,
    ],
)
def test_malformed_signature_fails(signature):
    with pytest.raises(SignatureMismatch):
        verify_signature("s3cr3t", BODY, signature)


def test_prefix_must_name_expected_algorithm():
    digest = sign_payload("s3cr3t", BODY).split("=", 1)[1]
    with pytest.raises(SignatureMismatch):
        verify_signature("s3cr3t", BODY, f"md5={digest}")


@pytest.mark.parametrize("secret", [None, "", b""])
@pytest.mark.parametrize("signature", [None, "", "sha1=whatever"])
def test_unsecured_mode_accepts_anything(secret, signature):
    verify_signature(secret, BODY, signature)


def test_sha256_signature():
    signature = sign_payload("s3cr3t", BODY, "sha256")
    assert signature.startswith("sha256=")
    verify_signature("s3cr3t", BODY, signature, "sha256")

    with pytest.raises(SignatureMismatch):
        verify_signature("s3cr3t", BODY, signature, "sha1")


def test_signature_errors_are_forbidden():
    assert issubclass(MissingSignature, Forbidden)
    assert issubclass(SignatureMismatch, Forbidden)
    assert SignatureMismatch().status_code == 403
