import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from zkgate.errors import ConfigError
from zkgate.kex import GroupParameters
from zkgate.wire import DEFAULT_MAX_FRAME

DEFAULT_TICKET_KEY = bytes.fromhex(
    "fe86ed5edd0cfbefc32f904747c30bb20de64010b6c62a97a70e2e021abdbee0")

RELATIONS = ("cubic", "quartic")


@dataclass
class GatewayConfig:
    group: GroupParameters = field(default_factory=GroupParameters.rfc3526_2048)
    ticket_key: bytes = DEFAULT_TICKET_KEY
    service_name: str = "echo"

    kdc_host: str = "127.0.0.1"
    kdc_port: int = 8080
    http_host: str = "127.0.0.1"
    http_port: int = 8081
    url_prefix: str = ""

    relation: str = "cubic"
    keystore_path: Optional[Path] = None
    max_frame_size: int = DEFAULT_MAX_FRAME
    issue_tickets: bool = True
    max_sessions: int = 1024
    connection_timeout: float = 10.0
    shutdown_timeout: float = 5.0

    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self):
        if self.relation not in RELATIONS:
            raise ConfigError("unknown relation {!r}, expected one of {}".format(self.relation, RELATIONS))
        if len(self.ticket_key) not in (16, 24, 32):
            raise ConfigError("ticket key must be 16, 24 or 32 bytes")
        if self.group.g < 2 or self.group.p <= self.group.g:
            raise ConfigError("invalid group parameters")
        if self.max_sessions < 1:
            raise ConfigError("max_sessions must be at least 1")
        if self.shutdown_timeout <= 0:
            raise ConfigError("shutdown_timeout must be positive")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ConfigError("unknown log level {!r}".format(self.log_level))
        if self.keystore_path is not None:
            self.keystore_path = Path(self.keystore_path)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)

    @property
    def proof_base_url(self):
        return "http://{}:{}{}".format(self.http_host, self.http_port, self.url_prefix)


def load_config(config_path: Optional[Path] = None) -> GatewayConfig:
    """Load configuration from a YAML file, or return defaults if it is absent."""
    if config_path is None:
        config_path = Path("zkgate.yaml")
    config_path = Path(config_path)

    if not config_path.exists():
        return GatewayConfig()

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError("could not parse {}: {}".format(config_path, e)) from e
    if not isinstance(data, dict):
        raise ConfigError("{} must contain a mapping".format(config_path))

    kdc = data.get("kdc", {})
    http = data.get("http", {})
    group = data.get("group", {})
    logging_data = data.get("logging", {})

    try:
        params = GroupParameters.rfc3526_2048()
        if group:
            params = GroupParameters(
                p=int(str(group.get("p", hex(params.p))), 0),
                g=int(group.get("g", params.g)),
            )
        ticket_key = DEFAULT_TICKET_KEY
        if "ticket_key" in data:
            ticket_key = bytes.fromhex(data["ticket_key"])

        return GatewayConfig(
            group=params,
            ticket_key=ticket_key,
            service_name=data.get("service_name", "echo"),
            kdc_host=kdc.get("host", "127.0.0.1"),
            kdc_port=int(kdc.get("port", 8080)),
            http_host=http.get("host", "127.0.0.1"),
            http_port=int(http.get("port", 8081)),
            url_prefix=http.get("url_prefix", ""),
            relation=data.get("relation", "cubic"),
            keystore_path=data.get("keystore_path"),
            max_frame_size=int(kdc.get("max_frame_size", DEFAULT_MAX_FRAME)),
            issue_tickets=bool(kdc.get("issue_tickets", True)),
            max_sessions=int(kdc.get("max_sessions", 1024)),
            connection_timeout=float(kdc.get("connection_timeout", 10.0)),
            shutdown_timeout=float(http.get("shutdown_timeout", 5.0)),
            log_level=logging_data.get("level", "INFO"),
            log_file=logging_data.get("file"),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigError("invalid configuration in {}: {}".format(config_path, e)) from e
