import base64

import pytest

from gmethod.models import Wish
from gmethod.services.encryption_service import DecryptionError, decrypt, encrypt, safe_decrypt


class TestEncryptDecrypt:
    @pytest.mark.parametrize("text", ["", "hello", "こんにちは 世界", "a+b=c&d / 100%", "行1\n行2"])
    def test_round_trip(self, text):
        encrypted, salt = encrypt(text)
        assert decrypt(encrypted, salt) == text

    def test_ciphertext_is_not_plaintext(self):
        encrypted, _ = encrypt("秘密の願い")
        assert "秘密" not in encrypted
        base64.b64decode(encrypted, validate=True)

    def test_salt_is_random_per_record(self):
        first = encrypt("same text")
        second = encrypt("same text")
        assert first[1] != second[1]
        assert first[0] != second[0]

    def test_salt_is_eight_bytes(self):
        _, salt = encrypt("text")
        assert len(base64.b64decode(salt)) == 8

    def test_invalid_base64_raises(self):
        _, salt = encrypt("text")
        with pytest.raises(DecryptionError):
            decrypt("not base64 !!!", salt)

    def test_truncated_ciphertext_raises(self):
        _, salt = encrypt("text")
        truncated = base64.b64encode(b"short").decode("ascii")
        with pytest.raises(DecryptionError):
            decrypt(truncated, salt)


class TestSafeDecrypt:
    def test_empty_content_returns_empty_string(self):
        assert safe_decrypt(None, None) == ""
        assert safe_decrypt("", "c2FsdA==") == ""

    def test_missing_salt_returns_stored_text(self):
        assert safe_decrypt("legacy plain text", None) == "legacy plain text"

    def test_malformed_ciphertext_returns_stored_text(self):
        _, salt = encrypt("text")
        assert safe_decrypt("garbage***", salt) == "garbage***"

    def test_valid_ciphertext_is_decrypted(self):
        encrypted, salt = encrypt("良かった")
        assert safe_decrypt(encrypted, salt) == "良かった"


class TestEncryptedModel:
    def test_plain_content_round_trip(self):
        wish = Wish(user_id=1, wish_type="dream")
        wish.set_plain_content("海外旅行")
        assert wish.content != "海外旅行"
        assert wish.salt
        assert wish.plain_content == "海外旅行"

    def test_unset_content_reads_as_empty(self):
        assert Wish(user_id=1, wish_type="dream").plain_content == ""
