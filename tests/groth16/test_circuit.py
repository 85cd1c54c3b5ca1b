import pytest

from zkgate.errors import CircuitError, SetupError
from zkgate.groth16.circuit import (
    OUT_INDEX,
    PolynomialRelation,
    build_witness,
    compile_relation,
    public_witness,
)
from zkgate.groth16.poly_utils import FR

QUARTIC_ROOTS = [1021, 2053, 3079, 4093]


class TestPolynomialRelation:
    def test_cubic(self):
        rel = PolynomialRelation.cubic()
        assert rel.degree == 3
        assert rel.evaluate(3) == FR(35)
        assert rel.evaluate(2) == FR(15)

    @pytest.mark.parametrize("root", QUARTIC_ROOTS)
    def test_quartic_roots(self, root):
        assert PolynomialRelation.quartic().evaluate(root) == FR(0)

    def test_quartic_non_root(self):
        assert PolynomialRelation.quartic().evaluate(1000) != FR(0)

    def test_trailing_zero_coefficients_dropped(self):
        assert PolynomialRelation([1, 2, 0, 0]).degree == 1

    def test_named(self):
        assert PolynomialRelation.named("cubic") == PolynomialRelation.cubic()
        with pytest.raises(CircuitError):
            PolynomialRelation.named("sextic")


class TestCompileRelation:
    def test_cubic_layout(self, cs):
        assert cs.variables == ["~one", "x", "~out", "x_2", "x_3"]
        assert cs.num_gates == 3
        assert cs.num_wires == 5
        assert cs.public_indexes == [0, 2]

    def test_cubic_matrices(self, cs):
        assert cs.A == [[0, 1, 0, 0, 0], [0, 0, 0, 1, 0], [5, 1, 0, 0, 1]]
        assert cs.B == [[0, 1, 0, 0, 0], [0, 1, 0, 0, 0], [1, 0, 0, 0, 0]]
        assert cs.C == [[0, 0, 0, 1, 0], [0, 0, 0, 0, 1], [0, 0, 1, 0, 0]]

    def test_deterministic(self, cs):
        again = compile_relation(PolynomialRelation.cubic())
        assert again.digest == cs.digest
        assert again.Ax == cs.Ax

    def test_digest_differs_between_relations(self, cs):
        assert compile_relation(PolynomialRelation.quartic()).digest != cs.digest

    def test_negative_coefficients_reduced(self):
        quartic = compile_relation(PolynomialRelation.quartic())
        out_row = quartic.A[-1]
        assert out_row[1] == FR.field_modulus - 53772937114

    def test_linear_relation(self):
        linear = compile_relation(PolynomialRelation([7, 2]))
        assert linear.num_gates == 1
        assert linear.is_satisfied(build_witness(linear, 4, 15))

    def test_constant_relation_rejected(self):
        with pytest.raises(CircuitError):
            compile_relation(PolynomialRelation([42]))

    def test_circuit_error_is_setup_error(self):
        assert issubclass(CircuitError, SetupError)


class TestWitness:
    def test_values(self, cs, witness):
        assert witness.values == [FR(1), FR(3), FR(35), FR(9), FR(27)]

    def test_satisfied(self, cs, witness):
        assert cs.is_satisfied(witness)

    def test_wrong_y_unsatisfied(self, cs):
        assert not cs.is_satisfied(build_witness(cs, 3, 36))

    def test_wrong_length_unsatisfied(self, cs, witness):
        from zkgate.groth16.circuit import Witness
        assert not cs.is_satisfied(Witness(witness.values[:-1]))

    def test_repr_hides_secret(self, witness):
        assert repr(witness) == "Witness(<5 wires>)"

    def test_public_witness(self, cs):
        pub = public_witness(cs, 35)
        assert pub.rx_pub == [(0, FR(1)), (OUT_INDEX, FR(35))]
        assert pub.y == FR(35)

    def test_negative_y_wraps(self, cs):
        assert public_witness(cs, -1).y == FR(FR.field_modulus - 1)

    @pytest.mark.parametrize("root", QUARTIC_ROOTS)
    def test_quartic_witness(self, root):
        quartic = compile_relation(PolynomialRelation.quartic())
        assert quartic.is_satisfied(build_witness(quartic, root, 0))
