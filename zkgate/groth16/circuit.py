"""
Fixed polynomial relations as R1CS / QAP
=========================================

The gateway proves knowledge of a secret ``x`` with ``P(x) = y`` for one
public polynomial ``P``. A relation of degree ``d`` flattens to ``d`` gates::

    x_2 = x * x
    x_3 = x_2 * x
    ...
    (c_0 + c_1*x + c_2*x_2 + ... + c_d*x_d) * 1 = ~out

over the wires ``["~one", "x", "~out", "x_2", ..., "x_d"]``. The wires
``~one`` and ``~out`` are public; ``x`` and the powers stay with the prover.

    >>> cs = compile_relation(PolynomialRelation.cubic())
    >>> cs.variables
    ['~one', 'x', '~out', 'x_2', 'x_3']
    >>> cs.is_satisfied(build_witness(cs, 3, 35))
    True
"""

import hashlib
import json

from zkgate.errors import CircuitError
from zkgate.groth16.poly_utils import FR, _multiply_vec_vec, getFRPoly1D, getFRPoly2D
from zkgate.groth16.proving import build_rpub_enum
from zkgate.groth16.qap_creator import r1cs_to_qap

ONE_INDEX = 0
SECRET_INDEX = 1
OUT_INDEX = 2
PUBLIC_INDEXES = [ONE_INDEX, OUT_INDEX]


class PolynomialRelation:
    """``sum(coefficients[k] * x**k) = y``, coefficients from degree 0 up."""

    def __init__(self, coefficients, name=None):
        coefficients = [int(c) for c in coefficients]
        while len(coefficients) > 1 and coefficients[-1] % FR.field_modulus == 0:
            coefficients.pop()
        self.coefficients = coefficients
        self.name = name or "custom"

    @classmethod
    def cubic(cls):
        # x^3 + x + 5
        return cls([5, 1, 0, 1], name="cubic")

    @classmethod
    def quartic(cls):
        # (x - 1021)(x - 2053)(x - 3079)(x - 4093), so y = 0 at each root
        return cls([26415943377211, -53772937114, 36745188, -10246, 1], name="quartic")

    @classmethod
    def named(cls, name):
        presets = {"cubic": cls.cubic, "quartic": cls.quartic}
        if name not in presets:
            raise CircuitError("unknown relation {!r}".format(name))
        return presets[name]()

    @property
    def degree(self):
        return len(self.coefficients) - 1

    def evaluate(self, x):
        x = FR(x)
        acc = FR(0)
        for c in reversed(self.coefficients):
            acc = acc * x + FR(c)
        return acc

    def __eq__(self, other):
        return isinstance(other, PolynomialRelation) and self.coefficients == other.coefficients

    def __repr__(self):
        return "PolynomialRelation({}, {})".format(self.name, self.coefficients)


class ConstraintSystem:
    """Compiled relation: R1CS matrices (one row per gate) and their QAP."""

    def __init__(self, relation, variables, A, B, C):
        self.relation = relation
        self.variables = variables
        self.A = A
        self.B = B
        self.C = C
        self.public_indexes = list(PUBLIC_INDEXES)

        Ap, Bp, Cp, Z = r1cs_to_qap(A, B, C)
        self.Ax = getFRPoly2D(Ap)
        self.Bx = getFRPoly2D(Bp)
        self.Cx = getFRPoly2D(Cp)
        self.Zx = getFRPoly1D(Z)

    @property
    def num_gates(self):
        return len(self.A)

    @property
    def num_wires(self):
        return len(self.variables)

    @property
    def digest(self):
        """Hex SHA-256 over the matrices; keys are only valid for an equal digest."""
        doc = {"variables": self.variables, "A": self.A, "B": self.B, "C": self.C,
               "public": self.public_indexes}
        return hashlib.sha256(json.dumps(doc, sort_keys=True).encode()).hexdigest()

    def is_satisfied(self, witness):
        r = witness.values
        if len(r) != self.num_wires:
            return False
        for a_row, b_row, c_row in zip(self.A, self.B, self.C):
            a_dot = _multiply_vec_vec(getFRPoly1D(a_row), r)
            b_dot = _multiply_vec_vec(getFRPoly1D(b_row), r)
            c_dot = _multiply_vec_vec(getFRPoly1D(c_row), r)
            if a_dot * b_dot != c_dot:
                return False
        return True


class Witness:
    """Full wire assignment. Never leaves the prover."""

    def __init__(self, values):
        self.values = values

    def __repr__(self):
        return "Witness(<{} wires>)".format(len(self.values))


class PublicWitness:
    """The ``(wire index, value)`` pairs the verifier sees."""

    def __init__(self, rx_pub):
        self.rx_pub = rx_pub

    @property
    def y(self):
        return dict(self.rx_pub)[OUT_INDEX]

    def __repr__(self):
        return "PublicWitness(y={})".format(int(self.y))


def _one_hot(size, index, value=1):
    row = [0] * size
    row[index] = value
    return row


def compile_relation(relation):
    if relation.degree < 1:
        raise CircuitError("relation must depend on x (degree >= 1)")

    d = relation.degree
    variables = ["~one", "x", "~out"] + ["x_{}".format(k) for k in range(2, d + 1)]
    n = len(variables)

    def power_index(k):
        if k == 0:
            return ONE_INDEX
        if k == 1:
            return SECRET_INDEX
        return variables.index("x_{}".format(k))

    A, B, C = [], [], []
    for k in range(2, d + 1):
        A.append(_one_hot(n, power_index(k - 1)))
        B.append(_one_hot(n, SECRET_INDEX))
        C.append(_one_hot(n, power_index(k)))

    out_row = [0] * n
    for k, c in enumerate(relation.coefficients):
        out_row[power_index(k)] = c % FR.field_modulus
    A.append(out_row)
    B.append(_one_hot(n, ONE_INDEX))
    C.append(_one_hot(n, OUT_INDEX))

    return ConstraintSystem(relation, variables, A, B, C)


def build_witness(cs, x, y):
    x = FR(x)
    values = [FR(1), x, FR(y)]
    power = x
    for _ in range(2, cs.relation.degree + 1):
        power = power * x
        values.append(power)
    return Witness(values)


def public_witness(cs, y):
    values = [FR(0)] * cs.num_wires
    values[ONE_INDEX] = FR(1)
    values[OUT_INDEX] = FR(y)
    return PublicWitness(build_rpub_enum(cs.public_indexes, values))
