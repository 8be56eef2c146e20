# ssh_notifier/identity.py
from typing import Iterable

from .models import Identity, KnownIdentity, UnknownIdentity


def resolve_identity(fingerprint: str, identities: Iterable[KnownIdentity]) -> Identity:
    """
    Return the first identity, in declaration order, that lists `fingerprint`.

    Matching is exact string equality. An empty fingerprint never matches.
    """
    if not fingerprint:
        return UnknownIdentity()

    for identity in identities:
        if identity.verify(fingerprint):
            return identity
    return UnknownIdentity()
