"""
Groth16 trusted setup
=====================

Evaluates the QAP at a secret point ``x_val`` and hides the results behind
``alpha, beta, gamma, delta`` on both bn128 groups. The five secrets are the
toxic waste: whoever keeps them can forge proofs, so ``trusted_setup`` draws
them from ``secrets`` and drops them once the keys are built.

Proving key:   sigma1_1, sigma1_2, sigma1_4, sigma1_5, sigma2_1, sigma2_2
Verifying key: sigma1_1, sigma1_3, sigma2_1
"""

import logging
import secrets

from py_ecc import bn128

from zkgate.errors import SetupError
from zkgate.groth16.poly_utils import (
    FR,
    getNumWires,
    getNumGates,
    ax_val,
    bx_val,
    cx_val,
    zx_val,
)

logger = logging.getLogger(__name__)

g1 = bn128.G1
g2 = bn128.G2

mult = bn128.multiply


def sigma11(alpha, beta, delta):
    return [mult(g1, int(alpha)), mult(g1, int(beta)), mult(g1, int(delta))]

def sigma12(numGates, x_val):
    sigma1_2 = []
    for i in range(numGates):
        val = x_val ** i
        sigma1_2.append(mult(g1, int(val)))
    return sigma1_2

# Public wires get (beta*A + alpha*B + C) / gamma, private wires a None placeholder
def sigma13(numWires, alpha, beta, gamma, Ax_val, Bx_val, Cx_val, pub_r_indexs):
    sigma1_3 = []
    VAL = [FR(0)] * numWires
    for i in range(numWires):
        if i in pub_r_indexs:
            val = (beta*Ax_val[i] + alpha*Bx_val[i] + Cx_val[i]) / gamma
            VAL[i] = val
            sigma1_3.append(mult(g1, int(val)))
        else:
            sigma1_3.append(None)
    return sigma1_3, VAL

# Private wires get (beta*A + alpha*B + C) / delta
def sigma14(numWires, alpha, beta, delta, Ax_val, Bx_val, Cx_val, pub_r_indexs):
    sigma1_4 = []
    for i in range(numWires):
        if i in pub_r_indexs:
            sigma1_4.append(None)
        else:
            val = (beta*Ax_val[i] + alpha*Bx_val[i] + Cx_val[i]) / delta
            sigma1_4.append(mult(g1, int(val)))
    return sigma1_4

def sigma15(numGates, delta, x_val, Zx_val):
    sigma1_5 = []
    for i in range(numGates-1):
        sigma1_5.append(mult(g1, int((x_val**i * Zx_val) / delta)))
    return sigma1_5

def sigma21(beta, delta, gamma):
    return [mult(g2, int(beta)), mult(g2, int(gamma)), mult(g2, int(delta))]

def sigma22(numGates, x_val):
    sigma2_2 = []
    for i in range(numGates):
        sigma2_2.append(mult(g2, int(x_val**i)))
    return sigma2_2


def _random_nonzero():
    return FR(secrets.randbelow(bn128.curve_order - 1) + 1)


class ToxicWaste:
    def __init__(self, alpha, beta, gamma, delta, x_val):
        self.alpha = FR(alpha)
        self.beta = FR(beta)
        self.gamma = FR(gamma)
        self.delta = FR(delta)
        self.x_val = FR(x_val)

    @classmethod
    def random(cls):
        return cls(*[_random_nonzero() for _ in range(5)])

    def __repr__(self):
        return "ToxicWaste(<hidden>)"


class ProvingKey:
    def __init__(self, circuit_digest, num_gates, num_wires, public_indexes,
                 sigma1_1, sigma1_2, sigma1_4, sigma1_5, sigma2_1, sigma2_2):
        self.circuit_digest = circuit_digest
        self.num_gates = num_gates
        self.num_wires = num_wires
        self.public_indexes = public_indexes
        self.sigma1_1 = sigma1_1
        self.sigma1_2 = sigma1_2
        self.sigma1_4 = sigma1_4
        self.sigma1_5 = sigma1_5
        self.sigma2_1 = sigma2_1
        self.sigma2_2 = sigma2_2


class VerifyingKey:
    def __init__(self, circuit_digest, num_wires, public_indexes, sigma1_1, sigma1_3, sigma2_1):
        self.circuit_digest = circuit_digest
        self.num_wires = num_wires
        self.public_indexes = public_indexes
        self.sigma1_1 = sigma1_1
        self.sigma1_3 = sigma1_3
        self.sigma2_1 = sigma2_1


def trusted_setup(cs, toxic=None):
    """Run the one-party ceremony for ``cs`` and return ``(pk, vk)``."""
    if toxic is None:
        toxic = ToxicWaste.random()

    if toxic.gamma == 0 or toxic.delta == 0:
        raise SetupError("gamma and delta must be non-zero")

    numGates = getNumGates(cs.Ax)
    numWires = getNumWires(cs.Ax)
    pub = cs.public_indexes

    Ax_val = ax_val(cs.Ax, toxic.x_val)
    Bx_val = bx_val(cs.Bx, toxic.x_val)
    Cx_val = cx_val(cs.Cx, toxic.x_val)
    Zx_val = zx_val(cs.Zx, toxic.x_val)
    if Zx_val == 0:
        raise SetupError("toxic point is a root of the vanishing polynomial")

    s11 = sigma11(toxic.alpha, toxic.beta, toxic.delta)
    s12 = sigma12(numGates, toxic.x_val)
    s13, _ = sigma13(numWires, toxic.alpha, toxic.beta, toxic.gamma, Ax_val, Bx_val, Cx_val, pub)
    s14 = sigma14(numWires, toxic.alpha, toxic.beta, toxic.delta, Ax_val, Bx_val, Cx_val, pub)
    s15 = sigma15(numGates, toxic.delta, toxic.x_val, Zx_val)
    s21 = sigma21(toxic.beta, toxic.delta, toxic.gamma)
    s22 = sigma22(numGates, toxic.x_val)

    digest = cs.digest
    pk = ProvingKey(digest, numGates, numWires, list(pub), s11, s12, s14, s15, s21, s22)
    vk = VerifyingKey(digest, numWires, list(pub), s11, s13, s21)
    logger.info("trusted setup done for circuit %s (%d gates, %d wires)", digest[:12], numGates, numWires)
    return pk, vk
