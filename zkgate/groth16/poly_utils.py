from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128


class FR(FQ):
    field_modulus = bn128.curve_order


# Multiply two polynomials
def _multiply_polys(a, b):
    o = [FR(0)] * (len(a) + len(b) - 1)
    for i in range(len(a)):
        for j in range(len(b)):
            o[i + j] += a[i] * b[j]
    return o

# Add two polynomials
def _add_polys(a, b, subtract=False):
    o = [FR(0)] * max(len(a), len(b))
    for i in range(len(a)):
        o[i] += a[i]
    for i in range(len(b)):
        o[i] += b[i] * (FR(-1) if subtract else FR(1))
    return o

def _subtract_polys(a, b):
    return _add_polys(a, b, subtract=True)

# Divide a/b, return quotient and remainder
def _div_polys(a, b):
    if b[-1] == 0:
        raise ZeroDivisionError("leading coefficient of divisor is zero")
    o = [FR(0)] * max(len(a) - len(b) + 1, 0)
    remainder = a
    while len(remainder) >= len(b):
        leading_fac = remainder[-1] / b[-1]
        pos = len(remainder) - len(b)
        o[pos] = leading_fac
        remainder = _subtract_polys(remainder, _multiply_polys(b, [FR(0)] * pos + [leading_fac]))[:-1]
    return o, remainder

# Evaluate a polynomial at a point
def _eval_poly(poly, x):
    return sum([poly[i] * x**i for i in range(len(poly))], FR(0))

# Multiply Vector * Matrix, one row of the matrix per vector entry
def _multiply_vec_matrix(vec, matrix):
    assert len(vec) == len(matrix)
    target = [FR(0)] * len(matrix[0])
    for i in range(len(matrix)):
        for j in range(len(matrix[0])):
            target[j] = target[j] + vec[i] * matrix[i][j]
    return target

def _multiply_vec_vec(vec1, vec2):
    assert len(vec1) == len(vec2)
    target = FR(0)
    for i in range(len(vec1)):
        target += vec1[i] * vec2[i]
    return target

def getNumWires(Ax):
    return len(Ax)

def getNumGates(Ax):
    return len(Ax[0])

def getFRPoly1D(poly):
    return [FR(int(num)) for num in poly]

def getFRPoly2D(poly):
    return [[FR(int(num)) for num in vec] for vec in poly]

def ax_val(Ax, x_val):
    return [_eval_poly(poly, x_val) for poly in Ax]

def bx_val(Bx, x_val):
    return [_eval_poly(poly, x_val) for poly in Bx]

def cx_val(Cx, x_val):
    return [_eval_poly(poly, x_val) for poly in Cx]

def zx_val(Zx, x_val):
    return _eval_poly(Zx, x_val)

# (Ax.R * Bx.R - Cx.R) / Zx = Hx .... r
def hxr(Ax, Bx, Cx, Zx, R):
    Rax = _multiply_vec_matrix(R, Ax)
    Rbx = _multiply_vec_matrix(R, Bx)
    Rcx = _multiply_vec_matrix(R, Cx)
    Px = _subtract_polys(_multiply_polys(Rax, Rbx), Rcx)

    q, r = _div_polys(Px, Zx)
    Hx = q

    return Hx, r
