import pytest

from zkgate.config import GatewayConfig
from zkgate.groth16.circuit import (
    PolynomialRelation,
    build_witness,
    compile_relation,
    public_witness,
)
from zkgate.groth16.proving import prove
from zkgate.groth16.setup import ToxicWaste, trusted_setup


# ── test constants ──
SECRET_X = 3
PUBLIC_Y = 35   # 3^3 + 3 + 5

TOXIC_ALPHA = 3926
TOXIC_BETA = 3604
TOXIC_GAMMA = 2971
TOXIC_DELTA = 1357
TOXIC_X_VAL = 3721

PROVER_R = 4106
PROVER_S = 4565


@pytest.fixture(scope="session")
def toxic():
    return ToxicWaste(TOXIC_ALPHA, TOXIC_BETA, TOXIC_GAMMA, TOXIC_DELTA, TOXIC_X_VAL)


@pytest.fixture(scope="session")
def cs():
    return compile_relation(PolynomialRelation.cubic())


@pytest.fixture(scope="session")
def keys(cs, toxic):
    return trusted_setup(cs, toxic)


@pytest.fixture(scope="session")
def pk(keys):
    return keys[0]


@pytest.fixture(scope="session")
def vk(keys):
    return keys[1]


@pytest.fixture(scope="session")
def witness(cs):
    return build_witness(cs, SECRET_X, PUBLIC_Y)


@pytest.fixture(scope="session")
def proof(cs, pk, witness):
    return prove(cs, pk, witness, r=PROVER_R, s=PROVER_S)


@pytest.fixture(scope="session")
def public(cs):
    return public_witness(cs, PUBLIC_Y)


@pytest.fixture
def config():
    # port 0: let the OS pick free ports per test
    return GatewayConfig(kdc_port=0, http_port=0, connection_timeout=5.0, shutdown_timeout=5.0)
