"""
Tests for the hashing service.
"""

import hashlib
import json

import pytest

from config.settings import Settings
from core.hashing import (
    HashingService,
    coerce_options,
    hash_password,
    hash_password_detailed,
    hash_password_hardened,
    hash_password_simple,
)
from utils.errors import (
    IterationsValidationError,
    KeyLengthValidationError,
    PasswordValidationError,
    SaltValidationError,
    UnsupportedAlgorithmError,
    ValidationError,
)
from utils.salt import SaltProvider
from utils.schemas import DigestAlgorithm, HashOptions

NOW_MS = 1_700_000_000_000


class FixedSaltProvider(SaltProvider):
    def __init__(self, salt: str, settings=None):
        super().__init__(settings)
        self.salt = salt
        self.calls = []

    def _generate(self, length: int) -> str:
        self.calls.append(length)
        return (self.salt * length)[:length]


def _chain(text: str, iterations: int) -> str:
    value = hashlib.sha256(text.encode("utf-8")).hexdigest()
    for _ in range(iterations - 1):
        value = hashlib.sha256(value.encode("ascii")).hexdigest()
    return value


def _service(salt: str = "s", **settings) -> HashingService:
    cfg = Settings(**settings)
    return HashingService(
        salt_provider=FixedSaltProvider(salt, cfg), clock=lambda: NOW_MS, settings=cfg
    )


class TestHashRecord:
    def test_defaults(self):
        record = _service().hash_record("hunter2")
        assert record.salt == "s" * 32
        assert record.digest == _chain("hunter2" + "s" * 32, 1)
        assert record.metadata.iterations == 1
        assert record.metadata.key_length == 64
        assert record.metadata.algorithm is DigestAlgorithm.SHA256
        assert record.metadata.created_at == NOW_MS

    def test_iterations_chain_over_hex_output(self):
        record = _service().hash_record("pw", {"iterations": 5, "saltLength": 10})
        assert record.salt == "s" * 10
        assert record.digest == _chain("pw" + "s" * 10, 5)

    def test_pepper_appended_after_salt(self):
        opts = HashOptions(salt_length=8, pepper="PEPPER")
        record = _service().hash_record("pw", opts)
        assert record.digest == _chain("pw" + "s" * 8 + "PEPPER", 1)

    def test_salt_provider_receives_requested_length(self):
        service = _service()
        service.hash_record("pw", {"salt_length": 24})
        assert service.salt_provider.calls == [24]


class TestHashText:
    def test_encoded_shape(self):
        text = _service().hash("pw", {"iterations": 3})
        salt, digest, meta = text.split(":", 2)
        assert len(digest) == 64
        assert json.loads(meta) == {
            "algorithm": "sha256",
            "iterations": 3,
            "keyLength": 64,
            "createdAt": NOW_MS,
        }

    def test_hardened_uses_hardened_iterations(self):
        text = _service(hardened_iterations=4).hash_hardened("pw")
        assert json.loads(text.split(":", 2)[2])["iterations"] == 4

    def test_hardened_respects_explicit_iterations(self):
        text = _service(hardened_iterations=4).hash_hardened("pw", {"iterations": 2})
        assert json.loads(text.split(":", 2)[2])["iterations"] == 2

    def test_simple_hash_is_legacy_form(self):
        text = _service().simple_hash("pw")
        salt, digest = text.split(":")
        assert salt == "s" * 16
        assert digest == _chain("pw" + salt, 1)

    def test_default_module_wrappers(self):
        assert len(hash_password("pw").split(":")) == 3
        assert len(hash_password_simple("pw").split(":")) == 2
        hardened = hash_password_hardened("pw", {"iterations": 2})
        assert json.loads(hardened.split(":", 2)[2])["iterations"] == 2

    def test_fresh_salt_per_call(self):
        assert hash_password("pw") != hash_password("pw")


class TestHashValidation:
    @pytest.mark.parametrize(
        "password, constraint",
        [("", "empty"), ("a" * 1025, "too_long"), ("ab\0cd", "nul_byte"), (None, "type")],
    )
    def test_bad_password(self, password, constraint):
        with pytest.raises(PasswordValidationError) as exc_info:
            _service().hash(password)
        assert exc_info.value.constraint == constraint

    def test_max_length_password_accepted(self):
        assert _service().hash("a" * 1024)

    def test_password_plus_pepper_over_limit(self):
        with pytest.raises(PasswordValidationError) as exc_info:
            _service().hash("a" * 1024, {"pepper": "server-secret"})
        assert exc_info.value.constraint == "too_long"

    def test_zero_iterations(self):
        with pytest.raises(IterationsValidationError):
            _service().hash("pw", {"iterations": 0})

    def test_salt_length_bounds(self):
        with pytest.raises(SaltValidationError):
            _service().hash("pw", {"salt_length": 4})
        with pytest.raises(SaltValidationError):
            _service().hash("pw", {"salt_length": 200})

    def test_key_length_bounds(self):
        with pytest.raises(KeyLengthValidationError):
            _service().hash("pw", {"key_length": 1024})

    def test_salt_provider_breaking_contract(self):
        service = _service(salt="a:")
        with pytest.raises(SaltValidationError):
            service.hash("pw")


class TestCoerceOptions:
    def test_accepts_camel_and_snake(self):
        assert coerce_options({"saltLength": 20}).salt_length == 20
        assert coerce_options({"salt_length": 20}).salt_length == 20

    def test_none(self):
        assert coerce_options(None) == HashOptions()

    def test_bad_option_type_is_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            coerce_options({"iterations": "many"})
        assert exc_info.value.field == "iterations"

    def test_unknown_algorithm(self):
        with pytest.raises(UnsupportedAlgorithmError):
            coerce_options({"algorithm": "sha512"})


class TestDetailedWrapper:
    def test_detailed_defaults_to_hardened(self):
        record = hash_password_detailed("pw", {"iterations": 2})
        assert record.metadata.iterations == 2
        assert record.digest == _chain("pw" + record.salt, 2)
