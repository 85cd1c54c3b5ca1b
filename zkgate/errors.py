"""Exception hierarchy shared by the ticket channel and the proof channel."""


class GatewayError(Exception):
    """Base class for every error raised by zkgate."""


class TransportError(GatewayError):
    """Connect, read or write failure on the stream transport."""


class EncodingError(GatewayError):
    """Malformed DH value, ticket ciphertext, JSON, base64 or proof material."""


class CiphertextTooShort(EncodingError):
    pass


class DeserializationError(EncodingError):
    """Decrypted bytes do not parse as a ticket."""


class ProofEncodingError(EncodingError):
    """Proof, proving key or verifying key bytes are not well formed."""


class ConstraintUnsatisfied(GatewayError):
    """The witness does not satisfy the circuit, so no proof is produced."""


class KeyMismatchError(GatewayError):
    """A proving/verifying key was generated for a different circuit."""


class SetupError(GatewayError):
    """Trusted setup failed. Fatal: the gateway cannot serve proofs."""


class CircuitError(SetupError):
    pass


class SerializationError(GatewayError):
    """Internal failure while serializing key material."""


class ConfigError(GatewayError):
    pass


class ShutdownTimeout(GatewayError):
    """The HTTP listener did not stop within the configured bound."""
