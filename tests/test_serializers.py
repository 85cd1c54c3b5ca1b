import base64
import json

import pytest
from py_ecc import bn128

from zkgate.errors import ProofEncodingError, SerializationError
from zkgate.groth16.setup import ProvingKey
from zkgate.serializers import (
    b64decode,
    deserialize_g1,
    deserialize_g2,
    dump_proof,
    dump_proof_b64,
    dump_proving_key,
    dump_proving_key_b64,
    dump_verifying_key,
    from_bytes,
    load_proof,
    load_proof_b64,
    load_proving_key,
    load_proving_key_b64,
    load_verifying_key,
    serialize_g1,
    serialize_g2,
    to_bytes,
)


class TestPoints:
    def test_g1(self):
        p = bn128.multiply(bn128.G1, 7)
        assert serialize_g1(p) == [str(int(p[0])), str(int(p[1]))]
        assert deserialize_g1(serialize_g1(p)) == p

    def test_g2(self):
        p = bn128.multiply(bn128.G2, 7)
        assert deserialize_g2(serialize_g2(p), check_subgroup=True) == p

    def test_infinity(self):
        assert serialize_g1(None) is None
        assert deserialize_g1(None) is None
        assert deserialize_g2(None) is None

    def test_g1_off_curve(self):
        with pytest.raises(ProofEncodingError):
            deserialize_g1(["1", "3"])

    def test_g2_off_curve(self):
        with pytest.raises(ProofEncodingError):
            deserialize_g2([["1", "2"], ["3", "4"]])

    @pytest.mark.parametrize("data", [
        "1,2",
        ["1"],
        [1, 2],
        ["-1", "2"],
        ["0x1", "2"],
        [str(bn128.field_modulus), "2"],
    ])
    def test_g1_malformed(self, data):
        with pytest.raises(ProofEncodingError):
            deserialize_g1(data)


class TestKeys:
    def test_proving_key_document(self, pk):
        doc = dump_proving_key(pk)
        assert doc["kind"] == "groth16-proving-key"
        assert doc["curve"] == "bn128"
        assert doc["public"] == [0, 2]
        # private wires keep a placeholder in sigma1_3, public ones in sigma1_4
        assert doc["sigma1_4"][0] is None and doc["sigma1_4"][2] is None

    def test_proving_key_b64(self, pk):
        loaded = load_proving_key_b64(dump_proving_key_b64(pk))
        assert isinstance(loaded, ProvingKey)
        assert loaded.circuit_digest == pk.circuit_digest
        assert loaded.sigma1_5 == pk.sigma1_5
        assert loaded.sigma2_2 == pk.sigma2_2

    def test_verifying_key_survives_json(self, vk):
        doc = json.loads(json.dumps(dump_verifying_key(vk)))
        loaded = load_verifying_key(doc)
        assert loaded.sigma1_3 == vk.sigma1_3
        assert loaded.public_indexes == vk.public_indexes

    def test_wrong_kind(self, vk):
        with pytest.raises(ProofEncodingError):
            load_proving_key(dump_verifying_key(vk))

    def test_inconsistent_dimensions(self, pk):
        doc = dump_proving_key(pk)
        doc["sigma1_2"] = doc["sigma1_2"][:-1]
        with pytest.raises(ProofEncodingError):
            load_proving_key(doc)

    def test_missing_field(self, vk):
        doc = dump_verifying_key(vk)
        del doc["sigma2_1"]
        with pytest.raises(ProofEncodingError):
            load_verifying_key(doc)

    def test_boolean_is_not_a_count(self, vk):
        doc = dump_verifying_key(vk)
        doc["num_wires"] = True
        with pytest.raises(ProofEncodingError):
            load_verifying_key(doc)


class TestProof:
    def test_b64(self, proof):
        assert load_proof_b64(dump_proof_b64(proof)) == proof

    def test_not_an_object(self):
        with pytest.raises(ProofEncodingError):
            load_proof([1, 2, 3])

    def test_b_not_on_twist(self, proof):
        doc = dump_proof(proof)
        doc["b"] = [["1", "2"], ["3", "4"]]
        with pytest.raises(ProofEncodingError):
            load_proof(doc)


class TestEncoding:
    def test_to_bytes_is_canonical(self):
        assert to_bytes({"b": 1, "a": [1, 2]}) == b'{"a":[1,2],"b":1}'

    def test_to_bytes_unencodable(self):
        with pytest.raises(SerializationError):
            to_bytes({"a": object()})

    def test_from_bytes_garbage(self):
        with pytest.raises(ProofEncodingError):
            from_bytes(b"\xff\xfe")

    def test_b64decode_strict(self):
        assert b64decode(base64.b64encode(b"abc").decode()) == b"abc"
        with pytest.raises(ProofEncodingError):
            b64decode("not base64!")
        with pytest.raises(ProofEncodingError):
            b64decode(123)
