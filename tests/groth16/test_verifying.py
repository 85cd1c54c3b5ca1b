import pytest
from py_ecc import bn128

from zkgate.groth16.circuit import (
    PolynomialRelation,
    build_witness,
    compile_relation,
    public_witness,
)
from zkgate.groth16.proving import Proof, prove
from zkgate.groth16.setup import trusted_setup
from zkgate.groth16.verifying import lhs, rhs, verify, verify_proof
from zkgate.serializers import dump_proof_bytes

pairing = bn128.pairing


class TestPairingSides:
    def test_lhs_is_pairing(self, proof):
        assert lhs(proof.a, proof.b) == pairing(proof.b, proof.a)

    def test_sides_equal_for_valid_proof(self, proof, vk, public):
        assert lhs(proof.a, proof.b) == rhs(proof.c, vk.sigma1_1, vk.sigma1_3, vk.sigma2_1, public.rx_pub)


class TestVerify:
    def test_valid_proof(self, proof, vk, public):
        assert verify_proof(proof, vk, public) is True

    def test_wrong_public_input(self, cs, proof, vk):
        assert verify_proof(proof, vk, public_witness(cs, 36)) is False

    def test_forged_a(self, proof, vk, public):
        fake = Proof(bn128.multiply(bn128.G1, 42), proof.b, proof.c)
        assert verify(fake.a, fake.b, fake.c, vk.sigma1_1, vk.sigma1_3, vk.sigma2_1, public.rx_pub) is False


class TestVerifyBytes:
    def test_truncated(self, proof, vk, public):
        data = dump_proof_bytes(proof)
        assert verify_proof(data[: len(data) // 2], vk, public) is False

    def test_corrupted_coordinate(self, proof, vk, public):
        data = dump_proof_bytes(proof)
        digit = str(int(proof.a[0]))[-1]
        swapped = "1" if digit != "1" else "2"
        target = str(int(proof.a[0]))
        corrupted = data.replace(target.encode(), (target[:-1] + swapped).encode(), 1)
        assert corrupted != data
        assert verify_proof(corrupted, vk, public) is False

    def test_empty(self, vk, public):
        assert verify_proof(b"", vk, public) is False

    def test_public_layout_mismatch(self, proof, vk):
        from zkgate.groth16.circuit import PublicWitness
        from zkgate.groth16.poly_utils import FR
        assert verify_proof(proof, vk, PublicWitness([(0, FR(1)), (1, FR(35))])) is False


class TestQuartic:
    def test_root_proves_and_verifies(self):
        cs = compile_relation(PolynomialRelation.quartic())
        pk, vk = trusted_setup(cs)
        proof = prove(cs, pk, build_witness(cs, 2053, 0))
        assert verify_proof(proof, vk, public_witness(cs, 0)) is True
