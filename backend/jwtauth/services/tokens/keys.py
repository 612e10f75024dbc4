"""Key material selection per algorithm class."""

from __future__ import annotations

from enum import Enum

from jwtauth.services.tokens.settings import Algorithm, AlgorithmClass, JWTSettings


class KeyPurpose(str, Enum):
    """Which half of a key pair is requested."""

    SIGN = "sign"
    VERIFY = "verify"


class KeyResolver:
    """
    Resolve the key used to sign or verify tokens.

    Symmetric algorithms use the shared secret for both purposes. Asymmetric
    algorithms sign with ``keys["private"]`` and verify with ``keys["public"]``.
    """

    def __init__(self, settings: JWTSettings) -> None:
        self.settings = settings

    @property
    def algorithm(self) -> Algorithm:
        return self.settings.algorithm

    @property
    def algorithm_class(self) -> AlgorithmClass:
        return self.settings.algorithm.algorithm_class

    def resolve_key(self, purpose: KeyPurpose = KeyPurpose.SIGN) -> str:
        """
        Return the key material for ``purpose``.

        :param purpose: :attr:`KeyPurpose.SIGN` or :attr:`KeyPurpose.VERIFY`.
        :returns: Secret string or PEM-encoded key.
        """
        if self.algorithm_class is AlgorithmClass.SYMMETRIC:
            # Presence is enforced by JWTSettings
            return str(self.settings.secret)
        part = "private" if KeyPurpose(purpose) is KeyPurpose.SIGN else "public"
        return self.settings.keys[part]


__all__ = ["KeyPurpose", "KeyResolver"]
