import logging
import secrets

from py_ecc import bn128

from zkgate.errors import ConstraintUnsatisfied, KeyMismatchError
from zkgate.groth16.poly_utils import (
    FR,
    getNumWires,
    getNumGates,
    hxr,
)

logger = logging.getLogger(__name__)

mult = bn128.multiply
add = bn128.add
neg = bn128.neg


class Proof:
    """Groth16 proof: A and C on G1, B on G2."""

    def __init__(self, a, b, c):
        self.a = a
        self.b = b
        self.c = c

    def __eq__(self, other):
        return isinstance(other, Proof) and (self.a, self.b, self.c) == (other.a, other.b, other.c)

    def __repr__(self):
        return "Proof(a={}, b=..., c={})".format(self.a, self.c)


def proof_a(sigma1_1, sigma1_2, Ax, Rx, r):
    numGates = getNumGates(Ax)
    numWires = getNumWires(Ax)
    proof_A = sigma1_1[0]
    for i in range(numWires):
        temp = None
        for j in range(numGates):
            temp = add(temp, mult(sigma1_2[j], int(Ax[i][j])))
        proof_A = add(proof_A, mult(temp, int(Rx[i])))
    proof_A = add(proof_A, mult(sigma1_1[2], int(r)))
    return proof_A

def proof_b(sigma2_1, sigma2_2, Bx, Rx, s):
    numGates = getNumGates(Bx)
    numWires = getNumWires(Bx)
    proof_B = sigma2_1[0]
    for i in range(numWires):
        temp = None
        for j in range(numGates):
            temp = add(temp, mult(sigma2_2[j], int(Bx[i][j])))
        proof_B = add(proof_B, mult(temp, int(Rx[i])))
    proof_B = add(proof_B, mult(sigma2_1[2], int(s)))
    return proof_B

def proof_c(sigma1_1, sigma1_2, sigma1_4, sigma1_5, Bx, Rx, Hx, s, r, prf_A, pub_r_indexs):
    numGates = getNumGates(Bx)
    numWires = getNumWires(Bx)

    # B evaluated on G1, needed for the r*B term
    temp_proof_B = sigma1_1[1]
    for i in range(numWires):
        temp = None
        for j in range(numGates):
            temp = add(temp, mult(sigma1_2[j], int(Bx[i][j])))
        temp_proof_B = add(temp_proof_B, mult(temp, int(Rx[i])))
    temp_proof_B = add(temp_proof_B, mult(sigma1_1[2], int(s)))

    proof_C = add(add(mult(prf_A, int(s)), mult(temp_proof_B, int(r))), neg(mult(mult(sigma1_1[2], int(s)), int(r))))

    for i in range(numWires):
        if i in pub_r_indexs:
            continue
        proof_C = add(proof_C, mult(sigma1_4[i], int(Rx[i])))

    for i in range(numGates-1):
        proof_C = add(proof_C, mult(sigma1_5[i], int(Hx[i])))

    return proof_C

def build_rpub_enum(pub_r_indexs, r_vec):
    o = []
    for i in pub_r_indexs:
        o.append((i, r_vec[i]))
    return o


def _random_scalar():
    return FR(secrets.randbelow(bn128.curve_order))


def prove(cs, pk, witness, r=None, s=None):
    """Produce a Proof that ``witness`` satisfies ``cs``.

    ``r`` and ``s`` are the prover's blinding factors; fresh random values are
    drawn unless given.
    """
    if pk.circuit_digest != cs.digest or pk.num_wires != cs.num_wires or pk.num_gates != cs.num_gates:
        raise KeyMismatchError("proving key was generated for circuit {}, not {}".format(
            pk.circuit_digest[:12], cs.digest[:12]))
    if not cs.is_satisfied(witness):
        raise ConstraintUnsatisfied("witness does not satisfy {!r}".format(cs.relation))

    Rx = witness.values
    Hx, remainder = hxr(cs.Ax, cs.Bx, cs.Cx, cs.Zx, Rx)
    if any(v != 0 for v in remainder):
        raise ConstraintUnsatisfied("QAP remainder is non-zero")

    r = _random_scalar() if r is None else FR(r)
    s = _random_scalar() if s is None else FR(s)

    prf_A = proof_a(pk.sigma1_1, pk.sigma1_2, cs.Ax, Rx, r)
    prf_B = proof_b(pk.sigma2_1, pk.sigma2_2, cs.Bx, Rx, s)
    prf_C = proof_c(pk.sigma1_1, pk.sigma1_2, pk.sigma1_4, pk.sigma1_5, cs.Bx, Rx, Hx, s, r, prf_A,
                    pk.public_indexes)

    logger.debug("proof generated for circuit %s", cs.digest[:12])
    return Proof(prf_A, prf_B, prf_C)
