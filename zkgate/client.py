import logging
import socket
from dataclasses import dataclass
from typing import Optional

import requests

from zkgate.errors import EncodingError, TransportError
from zkgate.groth16.circuit import build_witness
from zkgate.groth16.proving import prove
from zkgate.kex import (
    derive_session_key,
    derive_shared_secret,
    generate_key_pair,
    validate_public_value,
)
from zkgate.serializers import dump_proof_b64, load_proving_key_b64, load_verifying_key
from zkgate.ticket import Ticket, decrypt_ticket
from zkgate.wire import recv_frame, recv_int, send_int

logger = logging.getLogger(__name__)


@dataclass
class TicketGrant:
    session_key: bytes
    ticket: Optional[Ticket]


def request_ticket(config, host=None, port=None, expect_ticket=True):
    """Run the client side of the key exchange and decrypt the issued ticket."""
    host = host or config.kdc_host
    port = port or config.kdc_port
    params = config.group

    try:
        sock = socket.create_connection((host, port), timeout=config.connection_timeout)
    except OSError as e:
        raise TransportError("cannot connect to KDC at {}:{}: {}".format(host, port, e)) from e

    with sock:
        key_pair = generate_key_pair(params)
        send_int(sock, key_pair.public, config.max_frame_size)
        kdc_public = validate_public_value(recv_int(sock, config.max_frame_size), params)
        session_key = derive_session_key(derive_shared_secret(key_pair.private, kdc_public, params.p))

        ticket = None
        if expect_ticket:
            ticket = decrypt_ticket(recv_frame(sock, config.max_frame_size), config.ticket_key)
            if ticket.session_key != session_key:
                logger.warning("ticket session key differs from the negotiated one")
    return TicketGrant(session_key=session_key, ticket=ticket)


@dataclass
class ProveResult:
    status_code: int
    body: dict

    @property
    def accepted(self):
        return self.status_code == 200


class ProofClient:
    """HTTP side of the zero-knowledge gate."""

    def __init__(self, base_url, timeout=30.0, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path):
        try:
            resp = self.session.get(self.base_url + path, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise TransportError("GET {} failed: {}".format(path, e)) from e
        try:
            return resp.json()
        except ValueError as e:
            raise EncodingError("GET {} returned invalid JSON: {}".format(path, e)) from e

    def fetch_proving_key(self):
        doc = self._get("/pk")
        if not isinstance(doc, dict) or "pk" not in doc:
            raise EncodingError("/pk response has no 'pk' field")
        return load_proving_key_b64(doc["pk"])

    def fetch_verifying_key(self):
        return load_verifying_key(self._get("/vk"))

    def submit_proof(self, proof, y):
        payload = {"proof": dump_proof_b64(proof), "y": int(y)}
        try:
            resp = self.session.post(self.base_url + "/prove", json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError("POST /prove failed: {}".format(e)) from e
        try:
            body = resp.json()
        except ValueError:
            body = {"raw": resp.text}
        return ProveResult(resp.status_code, body)

    def authenticate(self, cs, x, y):
        """Fetch the proving key, prove knowledge of ``x`` and submit the proof."""
        pk = self.fetch_proving_key()
        proof = prove(cs, pk, build_witness(cs, x, y))
        result = self.submit_proof(proof, y)
        logger.info("proof submitted, server answered %d", result.status_code)
        return result
