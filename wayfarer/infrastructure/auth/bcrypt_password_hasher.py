"""
Bcrypt Password Hasher
======================

PasswordHasher implementation backed by the ``bcrypt`` package.
"""
import bcrypt

from wayfarer.domain.services.password_hasher import PasswordHasher


class BcryptPasswordHasher(PasswordHasher):
    """
    Hash and verify passwords with bcrypt.

    ``rounds`` is the bcrypt cost factor; tests lower it to keep hashing fast.
    """

    def __init__(self, rounds: int = 12):
        self._rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False
