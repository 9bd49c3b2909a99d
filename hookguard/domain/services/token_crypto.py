# hookguard/domain/services/token_crypto.py

import base64
import hashlib
import secrets

# 256-bit secrets
SECRET_BYTES = 32


class TokenCrypto:
    """
    Domain service for webhook secret generation and hashing.
    """

    @staticmethod
    def generate_secret() -> str:
        """
        Generate a new plaintext secret.

        Returns:
            URL-safe text encoding of 32 bytes from the OS CSPRNG
        """
        return secrets.token_urlsafe(SECRET_BYTES)

    @staticmethod
    def hash_secret(secret: str, salt: str) -> str:
        """
        Derive the stored lookup digest for a secret.

        SHA-512 over ``secret + salt``, base64 encoded. The salt is
        process-wide, so equal secrets always give equal digests and the
        digest can be used as a lookup key.

        Args:
            secret: Plaintext secret as handed to the client
            salt: Process-wide hashing salt

        Returns:
            Base64 encoded 512-bit digest
        """
        digest = hashlib.sha512((secret + salt).encode("utf-8")).digest()
        return base64.b64encode(digest).decode("ascii")
