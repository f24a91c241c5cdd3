from sqlalchemy import Column, Text

from gmethod.services.encryption_service import encrypt, safe_decrypt


class EncryptedContentMixin:
    """Adds an encrypted `content` column with its per-record `salt`."""

    content = Column(Text)
    salt = Column(Text)

    @property
    def plain_content(self) -> str:
        return safe_decrypt(self.content, self.salt)

    def set_plain_content(self, text: str) -> None:
        self.content, self.salt = encrypt(text)
