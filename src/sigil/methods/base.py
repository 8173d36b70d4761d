"""Signing method interface and the algorithm registry."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import structlog

from ..constants import LOGGER_NAME

__all__ = [
    "SigningMethod",
    "SigningMethodFactory",
    "get_signing_method",
    "register_signing_method",
    "registered_algorithms",
]

type SigningMethodFactory = Callable[[], SigningMethod]
"""Callable returning the signing method for an algorithm name."""

_registry: dict[str, SigningMethodFactory] = {}
"""Registered signing methods by ``alg`` header value."""

_registry_lock = threading.Lock()
"""Serializes registrations. Lookups do not take the lock."""


class SigningMethod(ABC):
    """An algorithm that can sign and verify tokens.

    Implementations are stateless apart from their fixed parameters, so a
    single instance may be shared between threads.
    """

    @property
    @abstractmethod
    def alg(self) -> str:
        """Value of the ``alg`` header for this algorithm."""

    @abstractmethod
    def sign(self, signing_string: str, key: Any) -> bytes:
        """Sign the signing input of a token.

        Parameters
        ----------
        signing_string
            The base64url-encoded header and claims joined by a period.
        key
            Signing key of the type required by the algorithm.

        Returns
        -------
        bytes
            Raw signature.

        Raises
        ------
        sigil.exceptions.SigningMethodError
            Raised if the key cannot be used with this algorithm.
        """

    @abstractmethod
    def verify(self, signing_string: str, signature: bytes, key: Any) -> None:
        """Verify a signature over the signing input of a token.

        Parameters
        ----------
        signing_string
            The base64url-encoded header and claims joined by a period.
        signature
            Decoded signature segment.
        key
            Verification key of the type required by the algorithm.

        Raises
        ------
        sigil.exceptions.SigningMethodError
            Raised if the key is unusable, the signature is structurally
            wrong for the algorithm, or the signature does not match.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.alg}>"


def register_signing_method(alg: str, factory: SigningMethodFactory) -> None:
    """Register the signing method for an algorithm name.

    Registration is intended to happen at import time, before any tokens
    are parsed. A later registration for the same name replaces the
    earlier one.

    Parameters
    ----------
    alg
        Value of the ``alg`` header.
    factory
        Callable returning the signing method.
    """
    with _registry_lock:
        if alg in _registry:
            logger = structlog.get_logger(LOGGER_NAME)
            logger.debug("Replacing signing method", alg=alg)
        _registry[alg] = factory


def get_signing_method(alg: str) -> SigningMethod | None:
    """Return the signing method for an algorithm name.

    Parameters
    ----------
    alg
        Value of the ``alg`` header.

    Returns
    -------
    SigningMethod or None
        The registered method, or `None` if the algorithm is unknown.
    """
    factory = _registry.get(alg)
    return factory() if factory else None


def registered_algorithms() -> list[str]:
    """Return the sorted names of all registered algorithms."""
    return sorted(_registry)
