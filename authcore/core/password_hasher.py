"""
AuthCore - Password Hasher Implementation
Hachage scrypt des mots de passe, format "salt_hex:key_hex".
"""

import secrets

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from .interfaces import IPasswordHasher


class PasswordHasher(IPasswordHasher):
    """Hachage scrypt avec sel aléatoire et comparaison à temps constant."""

    SALT_LENGTH: int = 32
    KEY_LENGTH: int = 64
    SCRYPT_N: int = 16384
    SCRYPT_R: int = 8
    SCRYPT_P: int = 1

    def _kdf(self, salt: bytes) -> Scrypt:
        # Une instance Scrypt ne sert qu'une fois
        return Scrypt(salt=salt, length=self.KEY_LENGTH, n=self.SCRYPT_N, r=self.SCRYPT_R, p=self.SCRYPT_P)

    def hash(self, password: str) -> str:
        """
        Hache un mot de passe.

        Returns:
            "salt_hex:key_hex" (64 + 1 + 128 caractères)
        """
        salt = secrets.token_bytes(self.SALT_LENGTH)
        key = self._kdf(salt).derive(password.encode("utf-8"))
        return f"{salt.hex()}:{key.hex()}"

    def verify(self, password: str, hashed: str) -> bool:
        """
        Vérifie un mot de passe contre un hash existant.

        Returns:
            False si le hash est mal formé ou ne correspond pas
        """
        salt_hex, sep, key_hex = (hashed or "").partition(":")
        if not sep or not salt_hex or not key_hex:
            return False

        try:
            salt = bytes.fromhex(salt_hex)
            stored_key = bytes.fromhex(key_hex)
        except ValueError:
            return False

        if len(stored_key) != self.KEY_LENGTH:
            return False

        try:
            self._kdf(salt).verify(password.encode("utf-8"), stored_key)
        except InvalidKey:
            return False
        return True
