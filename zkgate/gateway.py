"""
AuthGateway
===========

Runs the ticket channel and the proof channel side by side::

    SETUP ──setup()──▶ SERVING ──first valid proof──▶ AUTHORIZED ──stop()──▶ STOPPED

Trusted setup completes before the HTTP listener is created, so every
request sees the final keys. Once the authorization signal latches the HTTP
listener is shut down within ``config.shutdown_timeout``; the ticket channel
keeps serving until ``stop()``.
"""

import enum
import logging
import threading
import time

from werkzeug.serving import make_server

from zkgate.app import create_app
from zkgate.errors import SetupError, ShutdownTimeout
from zkgate.groth16.circuit import PolynomialRelation
from zkgate.kdc import KDCServer
from zkgate.service import ProofService
from zkgate.store import GatewayDB, KeyStore, SessionRegistry

logger = logging.getLogger(__name__)


class GatewayState(enum.Enum):
    SETUP = "setup"
    SERVING = "serving"
    AUTHORIZED = "authorized"
    STOPPED = "stopped"


class AuthGateway:

    def __init__(self, config, db=None):
        self.config = config
        self.db = db if db is not None else GatewayDB(config.keystore_path)
        self.keystore = KeyStore(self.db)
        self.sessions = SessionRegistry(self.db, config.max_sessions)
        self.service = ProofService(PolynomialRelation.named(config.relation), self.keystore)
        self.state = GatewayState.SETUP

        self.kdc_server = None
        self.http_server = None
        self._kdc_thread = None
        self._http_thread = None

    @property
    def authorized(self):
        return self.service.authorized

    def setup(self, toxic=None):
        """Run trusted setup, or reuse keys already in the key store.

        Stored keys are only picked up when no toxic waste is supplied.
        """
        if self.state is not GatewayState.SETUP:
            raise SetupError("setup is only valid in the SETUP state")
        if toxic is None:
            stored = self.service.load_stored()
            if stored is not None:
                logger.info("reusing stored keys from %s", self.config.keystore_path)
                return stored
        return self.service.setup(toxic)

    def _make_http_server(self):
        app = create_app(self.service, self.config.url_prefix)
        try:
            return make_server(self.config.http_host, self.config.http_port, app, threaded=True)
        except (OSError, SystemExit) as e:
            # werkzeug exits the process when the port is taken
            raise SetupError("cannot bind proof channel on {}:{}".format(
                self.config.http_host, self.config.http_port)) from e

    def start(self):
        if not self.service.is_ready:
            raise SetupError("trusted setup must complete before the listeners start")
        if self.state is not GatewayState.SETUP:
            raise SetupError("gateway already started")

        http_server = self._make_http_server()
        try:
            kdc_server = KDCServer(self.config, self.sessions)
        except OSError as e:
            http_server.server_close()
            raise SetupError("cannot bind ticket channel on {}:{}".format(
                self.config.kdc_host, self.config.kdc_port)) from e

        self.kdc_server = kdc_server
        self.http_server = http_server
        self._kdc_thread = threading.Thread(
            target=kdc_server.serve_forever, name="kdc-ticket-channel", daemon=True)
        self._http_thread = threading.Thread(
            target=http_server.serve_forever, name="proof-channel", daemon=True)
        self._kdc_thread.start()
        self._http_thread.start()

        self.state = GatewayState.SERVING
        logger.info("ticket channel on %s:%d, proof channel on %s:%d",
                    self.config.kdc_host, kdc_server.port,
                    self.config.http_host, http_server.server_port)

    def wait_authorized(self, timeout=None):
        if not self.authorized.wait(timeout):
            return False
        if self.state is GatewayState.SERVING:
            self.state = GatewayState.AUTHORIZED
        return True

    def shutdown_http(self, timeout=None):
        """Stop the proof channel; ShutdownTimeout if it outlives ``timeout``."""
        if self.http_server is None:
            return
        timeout = self.config.shutdown_timeout if timeout is None else timeout
        deadline = time.monotonic() + timeout

        stopper = threading.Thread(target=self.http_server.shutdown, name="proof-channel-stop", daemon=True)
        stopper.start()
        stopper.join(max(deadline - time.monotonic(), 0))
        self._http_thread.join(max(deadline - time.monotonic(), 0))
        if stopper.is_alive() or self._http_thread.is_alive():
            raise ShutdownTimeout("proof channel did not stop within {}s".format(timeout))
        self.http_server.server_close()
        self.http_server = None
        logger.info("proof channel stopped")

    def stop(self):
        try:
            self.shutdown_http()
        finally:
            if self.kdc_server is not None:
                self.kdc_server.shutdown()
                self.kdc_server.server_close()
                self.kdc_server = None
            self.db.close()
            self.state = GatewayState.STOPPED
        logger.info("gateway stopped")

    def run(self):
        """Setup, serve until the first valid proof, then keep issuing tickets."""
        self.setup()
        self.start()
        try:
            self.wait_authorized()
            self.shutdown_http()
            logger.info("proof gate passed; ticket channel remains open")
            self._kdc_thread.join()
        except KeyboardInterrupt:
            logger.info("interrupted")
        finally:
            self.stop()
