from zkgate.groth16.poly_utils import (
    FR,
    _multiply_polys,
    _add_polys,
    _eval_poly,
)


def mk_singleton(point_loc, height, total_pts):
    fac = FR(1)
    for i in range(1, total_pts + 1):
        if i != point_loc:
            fac *= FR(point_loc - i)
    o = [FR(height) / fac]
    for i in range(1, total_pts + 1):
        if i != point_loc:
            o = _multiply_polys(o, [FR(-i), FR(1)])
    return o

def lagrange_interp(vec):
    o = []
    for i in range(len(vec)):
        o = _add_polys(o, mk_singleton(i + 1, FR(vec[i]), len(vec)))
    for i in range(len(vec)):
        assert _eval_poly(o, i + 1) == vec[i], \
            (o, _eval_poly(o, i + 1), i+1)
    return o

def transpose(matrix):
    return list(map(list, zip(*matrix)))

# A, B, C are gate-major (one row per gate). The QAP polynomials are wire-major:
# new_A[i] interpolates wire i's coefficient at the gate points 1..n.
def r1cs_to_qap(A, B, C):
    A, B, C = transpose(A), transpose(B), transpose(C)
    new_A = [lagrange_interp([FR(a) for a in row]) for row in A]
    new_B = [lagrange_interp([FR(b) for b in row]) for row in B]
    new_C = [lagrange_interp([FR(c) for c in row]) for row in C]
    Z = [FR(1)]
    for i in range(1, len(A[0]) + 1):
        Z = _multiply_polys(Z, [FR(-i), FR(1)])
    return (new_A, new_B, new_C, Z)
