"""
Ticket channel
==============

One thread per accepted connection. Each connection runs::

    client → KDC   frame(client public value)
    KDC → client   frame(KDC public value)
    KDC → client   frame(IV || AES-CFB(ticket key, ticket))   [if issuing]

then closes. Failures end that connection only.
"""

import logging
import socketserver

from zkgate.errors import EncodingError, TransportError
from zkgate.kex import (
    derive_session_key,
    derive_shared_secret,
    generate_key_pair,
    validate_public_value,
)
from zkgate.ticket import Ticket, encrypt_ticket
from zkgate.wire import recv_int, send_frame, send_int

logger = logging.getLogger(__name__)


def serve_ticket_exchange(sock, config):
    """KDC side of one exchange. Returns ``(session_key, ticket or None)``."""
    params = config.group
    client_public = validate_public_value(recv_int(sock, config.max_frame_size), params)

    key_pair = generate_key_pair(params)
    send_int(sock, key_pair.public, config.max_frame_size)

    session_key = derive_session_key(derive_shared_secret(key_pair.private, client_public, params.p))

    ticket = None
    if config.issue_tickets:
        ticket = Ticket(session_key=session_key, service_name=config.service_name)
        send_frame(sock, encrypt_ticket(ticket, config.ticket_key), config.max_frame_size)
    return session_key, ticket


class TicketRequestHandler(socketserver.BaseRequestHandler):

    def handle(self):
        server = self.server
        self.request.settimeout(server.config.connection_timeout)
        try:
            session_key, ticket = serve_ticket_exchange(self.request, server.config)
        except (TransportError, EncodingError) as e:
            logger.warning("ticket exchange with %s aborted: %s", self.client_address[0], e)
            return
        if ticket is not None and server.registry is not None:
            server.registry.record(session_key, ticket.service_name, self.client_address)
        logger.info("issued %s ticket to %s", "a" if ticket else "no", self.client_address[0])


class KDCServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, config, registry=None, bind_and_activate=True):
        self.config = config
        self.registry = registry
        super().__init__((config.kdc_host, config.kdc_port), TicketRequestHandler, bind_and_activate)

    @property
    def port(self):
        return self.server_address[1]
