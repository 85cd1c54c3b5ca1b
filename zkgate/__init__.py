"""
zkgate
======

Kerberos-style ticket gateway with a Groth16 zero-knowledge gate.

    >>> from zkgate.config import GatewayConfig
    >>> from zkgate.gateway import AuthGateway
    >>> gateway = AuthGateway(GatewayConfig())
    >>> gateway.run()
"""

__version__ = "0.1.0"
