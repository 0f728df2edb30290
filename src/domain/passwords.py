"""
Password hashing - bcrypt implementation of the PasswordHasher port.
"""

import bcrypt

# bcrypt only consumes the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode()[:_BCRYPT_MAX_BYTES]


class BcryptPasswordHasher:
    """
    Salted, slow, one-way password hashing.

    Every call to hash() draws a fresh salt, so hashing the same password
    twice yields different strings. verify() relies on bcrypt.checkpw,
    which compares in constant time.
    """

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        return bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, plaintext: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(plaintext), hashed.encode())
        except ValueError:
            # Malformed stored hash
            return False
