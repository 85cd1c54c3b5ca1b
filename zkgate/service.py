import logging
import threading

from zkgate.errors import EncodingError, SetupError
from zkgate.groth16.circuit import compile_relation, public_witness
from zkgate.groth16.setup import trusted_setup
from zkgate.groth16.verifying import verify_proof
from zkgate.latch import OneShotLatch
from zkgate.serializers import (
    b64encode,
    dump_proving_key,
    dump_verifying_key,
    load_proof_bytes,
    load_proving_key,
    load_verifying_key,
    to_bytes,
)

logger = logging.getLogger(__name__)


class ProofService:
    """State behind the proof channel.

    ``setup()`` runs once and must finish before any request is served; after
    that the keys are read-only. ``authorized`` is the one-shot signal set by
    the first proof that verifies.
    """

    def __init__(self, relation, keystore, latch=None):
        self.relation = relation
        self.keystore = keystore
        self.authorized = latch if latch is not None else OneShotLatch()
        self.cs = None
        self.vk = None
        self._setup_lock = threading.Lock()

    @property
    def is_ready(self):
        return self.vk is not None

    def setup(self, toxic=None):
        with self._setup_lock:
            if self.is_ready:
                raise SetupError("trusted setup already ran in this process")
            cs = compile_relation(self.relation)
            pk, vk = trusted_setup(cs, toxic)
            self.keystore.put("setup.circuit", cs.digest)
            self.keystore.put("setup.pk", dump_proving_key(pk))
            self.keystore.put("setup.vk", dump_verifying_key(vk))
            self.cs = cs
            self.vk = vk
        logger.info("proof service ready for %r", self.relation)
        return pk, vk

    def load_stored(self):
        """Adopt keys a previous setup left in the key store.

        Returns ``(pk, vk)``, or None when the store holds no keys. Keys made
        for a different circuit are a SetupError.
        """
        with self._setup_lock:
            if self.is_ready:
                raise SetupError("trusted setup already ran in this process")
            digest = self.keystore.get("setup.circuit")
            if digest is None:
                return None
            cs = compile_relation(self.relation)
            if digest != cs.digest:
                raise SetupError("stored keys belong to circuit {}, not {}".format(digest[:12], cs.digest[:12]))
            try:
                pk = load_proving_key(self.keystore.get("setup.pk"))
                vk = load_verifying_key(self.keystore.get("setup.vk"))
            except EncodingError as e:
                raise SetupError("stored keys are unreadable: {}".format(e)) from e
            if pk.circuit_digest != cs.digest or vk.circuit_digest != cs.digest:
                raise SetupError("stored keys do not match the stored circuit digest")
            self.cs = cs
            self.vk = vk
        logger.info("proof service ready for %r with stored keys", self.relation)
        return pk, vk

    def proving_key_b64(self):
        return b64encode(to_bytes(self.keystore.get("setup.pk")))

    def verifying_key_doc(self):
        return self.keystore.get("setup.vk")

    def verify_submission(self, proof_bytes, y):
        """Return ``(valid, first)``; ``first`` is True for the call that latched.

        Raises ProofEncodingError when the bytes are not a proof at all.
        """
        proof = load_proof_bytes(proof_bytes)
        if not verify_proof(proof, self.vk, public_witness(self.cs, y)):
            return False, False
        first = self.authorized.set()
        if first:
            logger.info("first valid proof received, gateway authorized")
        return True, first
