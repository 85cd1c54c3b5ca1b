"""
Unauthenticated finite-field Diffie-Hellman
============================================

Both ends share fixed domain parameters (the RFC 3526 2048-bit MODP group,
generator 2). Each connection draws a fresh key pair, the public values are
swapped over the stream transport, and each side hashes the shared secret
into a 32-byte session key.

Nothing binds the exchanged public values to an identity, so an active
attacker can substitute them. Only confidentiality against a passive
observer is provided.

    >>> params = GroupParameters.rfc3526_2048()
    >>> alice, bob = generate_key_pair(params), generate_key_pair(params)
    >>> s1 = derive_shared_secret(alice.private, bob.public, params.p)
    >>> s2 = derive_shared_secret(bob.private, alice.public, params.p)
    >>> derive_session_key(s1) == derive_session_key(s2)
    True
"""

import hashlib
import secrets
from dataclasses import dataclass

from zkgate.errors import EncodingError


RFC3526_2048_P = int(
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE45B3D"
    "C2007CB8A163BF0598DA48361C55D39A69163FA8FD24CF5F"
    "83655D23DCA3AD961C62F356208552BB9ED529077096966D"
    "670C354E4ABC9804F1746C08CA237327FFFFFFFFFFFFFFFF",
    16,
)


@dataclass(frozen=True)
class GroupParameters:
    p: int
    g: int

    @classmethod
    def rfc3526_2048(cls):
        return cls(p=RFC3526_2048_P, g=2)

    @property
    def byte_length(self):
        return (self.p.bit_length() + 7) // 8


@dataclass(frozen=True)
class KeyPair:
    private: int
    public: int

    def __repr__(self):
        # keep the private scalar out of logs and tracebacks
        return "KeyPair(public=<{} bits>)".format(self.public.bit_length())


def generate_key_pair(params):
    """Draw a private scalar uniformly from [0, p) and compute g^priv mod p."""
    private = secrets.randbelow(params.p)
    return KeyPair(private=private, public=pow(params.g, private, params.p))


def derive_shared_secret(my_private, their_public, p):
    return pow(their_public, my_private, p)


def int_to_bytes(value):
    """Minimal big-endian encoding; zero encodes as a single zero byte."""
    if value < 0:
        raise ValueError("negative integers have no canonical encoding")
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def derive_session_key(secret):
    return hashlib.sha256(int_to_bytes(secret)).digest()


def validate_public_value(value, params):
    """Reject peer values that cannot come from an honest g^x mod p.

    0, 1 and p-1 would pin the shared secret to a trivially known value.
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise EncodingError("DH public value must be an integer")
    if not 2 <= value <= params.p - 2:
        raise EncodingError("DH public value out of range")
    return value
