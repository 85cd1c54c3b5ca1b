"""
Ticket codec
============

A ticket carries the session key and the service name, serialized as sorted
key JSON and encrypted with AES-CFB under the ticket key that the client and
the KDC share out of band::

    IV (16 bytes) || AES-CFB(key, IV, json(ticket))

There is no MAC. Successful decryption shows only that the bytes parse as a
ticket, not that the KDC produced them.
"""

import json
import os
from dataclasses import dataclass

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

try:
    from cryptography.hazmat.decrepit.ciphers.modes import CFB
except ImportError:
    # releases before CFB moved to the decrepit package
    from cryptography.hazmat.primitives.ciphers.modes import CFB

from zkgate.errors import CiphertextTooShort, ConfigError, DeserializationError

BLOCK_SIZE = algorithms.AES.block_size // 8
VALID_KEY_SIZES = (16, 24, 32)


@dataclass(frozen=True)
class Ticket:
    session_key: bytes
    service_name: str

    def to_bytes(self):
        doc = {"service_name": self.service_name, "session_key": self.session_key.hex()}
        return json.dumps(doc, sort_keys=True, separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_bytes(cls, data):
        try:
            doc = json.loads(data.decode("utf-8"))
            if set(doc) != {"service_name", "session_key"}:
                raise ValueError("unexpected ticket fields: {}".format(sorted(doc)))
            if not isinstance(doc["service_name"], str):
                raise ValueError("service_name must be a string")
            session_key = bytes.fromhex(doc["session_key"])
        except (UnicodeDecodeError, ValueError, TypeError, AttributeError) as e:
            raise DeserializationError("failed to decode ticket: {}".format(e)) from e
        return cls(session_key=session_key, service_name=doc["service_name"])


def _cipher(key, iv):
    if len(key) not in VALID_KEY_SIZES:
        raise ConfigError("ticket key must be 16, 24 or 32 bytes, got {}".format(len(key)))
    return Cipher(algorithms.AES(key), CFB(iv))


def encrypt_ticket(ticket, key):
    iv = os.urandom(BLOCK_SIZE)
    encryptor = _cipher(key, iv).encryptor()
    return iv + encryptor.update(ticket.to_bytes()) + encryptor.finalize()


def decrypt_ticket(data, key):
    if len(data) < BLOCK_SIZE:
        raise CiphertextTooShort("ciphertext too short: {} < {}".format(len(data), BLOCK_SIZE))
    iv, ciphertext = data[:BLOCK_SIZE], data[BLOCK_SIZE:]
    decryptor = _cipher(key, iv).decryptor()
    return Ticket.from_bytes(decryptor.update(ciphertext) + decryptor.finalize())
