from abc import ABC, abstractmethod


class ISecretHasher(ABC):
    """One-way salted hashing for passwords and refresh tokens"""

    @abstractmethod
    def hash(self, secret: str) -> str:
        pass

    @abstractmethod
    def verify(self, secret: str, hashed: str) -> bool:
        """Constant-time check of a secret against a stored hash"""
        pass

    @abstractmethod
    def dummy_verify(self) -> None:
        """Spend the same time as verify() when there is nothing to compare"""
        pass
