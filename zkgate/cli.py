import argparse
import logging
import sys
from pathlib import Path

from zkgate.client import ProofClient, request_ticket
from zkgate.config import RELATIONS, load_config
from zkgate.errors import GatewayError
from zkgate.gateway import AuthGateway
from zkgate.groth16.circuit import PolynomialRelation, compile_relation
from zkgate.service import ProofService
from zkgate.store import GatewayDB, KeyStore
from zkgate.utils import setup_logging

logger = logging.getLogger(__name__)


def run_kdc(config, args):
    AuthGateway(config).run()
    return 0


def run_client(config, args):
    relation = PolynomialRelation.named(args.relation or config.relation)
    cs = compile_relation(relation)
    y = args.y if args.y is not None else int(relation.evaluate(args.x))

    grant = request_ticket(config)
    logger.info("session established, ticket for service %r",
                grant.ticket.service_name if grant.ticket else None)

    result = ProofClient(config.proof_base_url).authenticate(cs, args.x, y)
    if result.accepted:
        print("authenticated: {}".format(result.body))
        return 0
    print("rejected [{}]: {}".format(result.status_code, result.body))
    return 1


def run_setup(config, args):
    db = GatewayDB(args.output)
    try:
        service = ProofService(PolynomialRelation.named(config.relation), KeyStore(db))
        service.setup()
    finally:
        db.close()
    print("keys for {} written to {}".format(config.relation, args.output))
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="zkgate", description="Ticket gateway with a Groth16 gate")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--log-level", type=str.upper, default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="override the configured log level")
    sub = parser.add_subparsers(dest="command", required=True)

    kdc = sub.add_parser("kdc", help="run the KDC ticket channel and the proof channel")
    kdc.set_defaults(func=run_kdc)

    client = sub.add_parser("client", help="obtain a ticket and pass the proof gate")
    client.add_argument("--x", type=int, required=True, help="secret input")
    client.add_argument("--y", type=int, default=None, help="public output (default: P(x))")
    client.add_argument("--relation", choices=RELATIONS, default=None)
    client.set_defaults(func=run_client)

    setup = sub.add_parser("setup", help="run trusted setup and store the keys for a later kdc run")
    setup.add_argument("--output", type=Path, required=True, help="TinyDB JSON file")
    setup.set_defaults(func=run_setup)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.config)
        setup_logging(args.log_level or config.log_level, config.log_file)
        return args.func(config, args)
    except GatewayError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
