"""Tests for string-to-sign construction and signing key derivation."""

import hashlib
import hmac

from s3signer.dates import Dates
from s3signer.signing import (
    ALGORITHM,
    KEY_PREFIX,
    SCOPE_TERMINATOR,
    build_string_to_sign,
    compute_signature,
    credential_scope,
    derive_signing_key,
    sign,
)

from conftest import SECRET_KEY

# Canonical request of the AWS "GET Object" example.
GET_OBJECT_CANONICAL_REQUEST = "\n".join(
    [
        "GET",
        "/test.txt",
        "",
        "host:examplebucket.s3.amazonaws.com",
        "range:bytes=0-9",
        "x-amz-content-sha256:e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
        "x-amz-date:20130524T000000Z",
        "",
        "host;range;x-amz-content-sha256;x-amz-date",
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
    ]
)


class TestCredentialScope:
    """Tests for credential_scope()."""

    def test_format(self, doc_dates):
        assert credential_scope(doc_dates, "us-east-1") == "20130524/us-east-1/s3/aws4_request"

    def test_other_service(self, doc_dates):
        assert credential_scope(doc_dates, "eu-west-1", "iam") == "20130524/eu-west-1/iam/aws4_request"


class TestBuildStringToSign:
    """Tests for build_string_to_sign()."""

    def test_get_object_example(self, doc_dates):
        expected = "\n".join(
            [
                "AWS4-HMAC-SHA256",
                "20130524T000000Z",
                "20130524/us-east-1/s3/aws4_request",
                "7344ae5b7ee6c3e7e6b0fe0640412a37625d1fbfff95c48bbb2dc43964946972",
            ]
        )
        assert build_string_to_sign(GET_OBJECT_CANONICAL_REQUEST, doc_dates, "us-east-1") == expected

    def test_hashes_utf8_bytes(self, doc_dates):
        string_to_sign = build_string_to_sign("é", doc_dates, "us-east-1")
        assert string_to_sign.split("\n")[3] == hashlib.sha256("é".encode("utf-8")).hexdigest()

    def test_four_lines(self, doc_dates):
        lines = build_string_to_sign("x", doc_dates, "us-east-1").split("\n")
        assert len(lines) == 4
        assert lines[0] == ALGORITHM
        assert lines[1] == doc_dates.long


class TestDeriveSigningKey:
    """Test signing key derivation (HMAC-SHA256 chain)."""

    def test_known_vector(self):
        """The signing key example from the AWS SigV4 documentation."""
        key = derive_signing_key(
            "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY", "20120215", "us-east-1", "iam"
        )
        assert key.hex() == "f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d"
        assert len(key) == 32

    def test_chain_uses_raw_digests(self):
        """Keying each step with the previous step's hex text gives a different key."""
        date, region, service = "20130524", "us-east-1", "s3"
        k_date = hmac.new((KEY_PREFIX + SECRET_KEY).encode(), date.encode(), hashlib.sha256)
        k_region = hmac.new(k_date.hexdigest().encode(), region.encode(), hashlib.sha256)
        k_service = hmac.new(k_region.hexdigest().encode(), service.encode(), hashlib.sha256)
        hex_chained = hmac.new(
            k_service.hexdigest().encode(), SCOPE_TERMINATOR.encode(), hashlib.sha256
        ).digest()

        k_date = hmac.new((KEY_PREFIX + SECRET_KEY).encode(), date.encode(), hashlib.sha256)
        k_region = hmac.new(k_date.digest(), region.encode(), hashlib.sha256)
        k_service = hmac.new(k_region.digest(), service.encode(), hashlib.sha256)
        raw_chained = hmac.new(k_service.digest(), SCOPE_TERMINATOR.encode(), hashlib.sha256).digest()

        key = derive_signing_key(SECRET_KEY, date, region, service)
        assert key == raw_chained
        assert key != hex_chained

    def test_different_dates_produce_different_keys(self):
        key1 = derive_signing_key("mysecret", "20260222", "us-east-1", "s3")
        key2 = derive_signing_key("mysecret", "20260223", "us-east-1", "s3")
        assert key1 != key2

    def test_different_regions_produce_different_keys(self):
        key1 = derive_signing_key("mysecret", "20260222", "us-east-1", "s3")
        key2 = derive_signing_key("mysecret", "20260222", "eu-west-1", "s3")
        assert key1 != key2

    def test_different_services_produce_different_keys(self):
        key1 = derive_signing_key("mysecret", "20260222", "us-east-1", "s3")
        key2 = derive_signing_key("mysecret", "20260222", "us-east-1", "iam")
        assert key1 != key2


class TestSign:
    """Tests for sign() and compute_signature()."""

    def test_get_object_signature(self, doc_dates):
        string_to_sign = build_string_to_sign(GET_OBJECT_CANONICAL_REQUEST, doc_dates, "us-east-1")
        signature = sign(string_to_sign, SECRET_KEY, doc_dates.short, "us-east-1", "s3")
        assert signature == "f0e8bdb87c964420e857bd35b5d6ed310bd44f0170aba48dd91039c6036bdb41"

    def test_returns_64_char_lowercase_hex(self):
        signature = compute_signature(b"k" * 32, "anything")
        assert len(signature) == 64
        assert signature == signature.lower()
        int(signature, 16)

    def test_deterministic(self):
        dates = Dates.from_long_date("20260222T120000Z")
        assert sign("sts", "secret", dates.short, "us-east-1") == sign(
            "sts", "secret", dates.short, "us-east-1"
        )

    def test_different_inputs_different_sigs(self):
        assert sign("a", "secret", "20260222", "us-east-1") != sign(
            "b", "secret", "20260222", "us-east-1"
        )
