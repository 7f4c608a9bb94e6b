from abc import ABC, abstractmethod


class PasswordHasher(ABC):
    """Hashes and verifies user passwords."""

    @abstractmethod
    def hash(self, password: str) -> str:
        pass

    @abstractmethod
    def verify(self, password: str, hashed_password: str) -> bool:
        pass
