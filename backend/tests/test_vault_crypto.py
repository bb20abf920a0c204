"""
DiaryPlus Backend — Private Vault Crypto Tests
================================================

What:  Password strength scoring, PBKDF2 key derivation and the AES-256-GCM
       payload format used for sealed entries.
"""

import json
import os

import pytest

from diaryplus.services.vault_service import (
    ALGORITHM,
    decrypt_content,
    derive_key,
    encrypt_content,
    validate_key_strength,
)

SALT = os.urandom(32).hex()


class TestKeyStrength:

    def test_strong_password_scores_full_marks(self):
        strength = validate_key_strength("Tr0ub4dor&Horse!")
        assert strength.is_valid is True
        assert strength.score == 8
        assert strength.feedback == []

    def test_short_password_is_rejected(self):
        strength = validate_key_strength("ab1")
        assert strength.is_valid is False
        assert "Password must be at least 8 characters long" in strength.feedback

    def test_single_class_password_lists_missing_classes(self):
        strength = validate_key_strength("lowercaseonly")
        assert strength.is_valid is False
        assert "Add uppercase letters" in strength.feedback
        assert "Add numbers" in strength.feedback
        assert "Add special characters" in strength.feedback

    def test_sequences_and_repeats_cost_points(self):
        clean = validate_key_strength("Xyz7#Mnop9$W")
        sequenced = validate_key_strength("Abc123#Mnop9$")
        repeated = validate_key_strength("Xyz7###Mnop9W")
        assert sequenced.score == clean.score - 1
        assert repeated.score == clean.score - 1


class TestKeyDerivation:

    def test_same_password_and_salt_give_same_key(self):
        assert derive_key("correct horse", SALT, 1000) == derive_key("correct horse", SALT, 1000)

    def test_key_is_32_bytes(self):
        assert len(derive_key("pw", SALT, 1000)) == 32

    def test_different_salt_gives_different_key(self):
        other = os.urandom(32).hex()
        assert derive_key("pw", SALT, 1000) != derive_key("pw", other, 1000)


class TestSealedPayload:

    def setup_method(self):
        self.key = derive_key("vault password", SALT, 1000)

    def test_payload_shape(self):
        payload = json.loads(encrypt_content("dear diary", self.key))
        assert payload["algorithm"] == ALGORITHM
        assert len(bytes.fromhex(payload["iv"])) == 12
        assert len(bytes.fromhex(payload["tag"])) == 16
        assert "dear diary" not in payload["encrypted"]

    def test_decrypt_restores_plaintext(self):
        text = "Raised the seed round 🎉\nSecond line"
        assert decrypt_content(encrypt_content(text, self.key), self.key) == text

    def test_fresh_iv_each_time(self):
        first = json.loads(encrypt_content("same", self.key))
        second = json.loads(encrypt_content("same", self.key))
        assert first["iv"] != second["iv"]

    def test_wrong_key_fails(self):
        payload = encrypt_content("secret", self.key)
        wrong = derive_key("not the password", SALT, 1000)
        with pytest.raises(ValueError, match="invalid key"):
            decrypt_content(payload, wrong)

    def test_tampered_ciphertext_fails(self):
        payload = json.loads(encrypt_content("secret", self.key))
        payload["encrypted"] = "00" * len(bytes.fromhex(payload["encrypted"]))
        with pytest.raises(ValueError):
            decrypt_content(json.dumps(payload), self.key)

    def test_unknown_algorithm_fails(self):
        payload = json.loads(encrypt_content("secret", self.key))
        payload["algorithm"] = "des"
        with pytest.raises(ValueError, match="Unsupported"):
            decrypt_content(json.dumps(payload), self.key)

    def test_garbage_payload_fails(self):
        with pytest.raises(ValueError):
            decrypt_content("not json", self.key)
