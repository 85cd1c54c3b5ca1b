"""
Proof material serialization
============================

Proving keys, verifying keys and proofs become self-describing JSON documents
(tagged with ``kind`` and ``curve``). Over HTTP they travel as base64 of the
canonical UTF-8 bytes of that JSON, except ``GET /vk`` which returns the
document itself.

Field elements and coordinates are decimal strings; the point at infinity is
``null``. Decoding checks coordinate range and curve membership so that a
tampered document fails here with ProofEncodingError instead of deep inside
a pairing.
"""

import base64
import binascii
import json

from py_ecc import bn128
from py_ecc.fields import bn128_FQ as FQ

from zkgate.errors import ProofEncodingError, SerializationError
from zkgate.groth16.proving import Proof
from zkgate.groth16.setup import ProvingKey, VerifyingKey

CURVE = "bn128"
FIELD_MODULUS = FQ.field_modulus


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def _coordinate(value):
    if not isinstance(value, str) or not (value.isascii() and value.isdigit()):
        raise ProofEncodingError("coordinate must be a decimal string")
    n = int(value)
    if n >= FIELD_MODULUS:
        raise ProofEncodingError("coordinate outside the base field")
    return n


def deserialize_g1(data):
    """[str, str] or None → G1 point"""
    if data is None:
        return None
    if not isinstance(data, list) or len(data) != 2:
        raise ProofEncodingError("G1 point must be a pair")
    point = (FQ(_coordinate(data[0])), FQ(_coordinate(data[1])))
    if not bn128.is_on_curve(point, bn128.b):
        raise ProofEncodingError("G1 point is not on the curve")
    return point


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → [[str,str],[str,str]] or None"""
    if point is None:
        return None
    return [
        [str(int(point[0].coeffs[0])), str(int(point[0].coeffs[1]))],
        [str(int(point[1].coeffs[0])), str(int(point[1].coeffs[1]))]
    ]


def deserialize_g2(data, check_subgroup=False):
    """[[str,str],[str,str]] or None → G2 point"""
    if data is None:
        return None
    if (not isinstance(data, list) or len(data) != 2
            or not all(isinstance(c, list) and len(c) == 2 for c in data)):
        raise ProofEncodingError("G2 point must be a pair of pairs")
    point = (
        bn128.FQ2([_coordinate(data[0][0]), _coordinate(data[0][1])]),
        bn128.FQ2([_coordinate(data[1][0]), _coordinate(data[1][1])])
    )
    if not bn128.is_on_curve(point, bn128.b2):
        raise ProofEncodingError("G2 point is not on the twist curve")
    if check_subgroup and bn128.multiply(point, bn128.curve_order) is not None:
        raise ProofEncodingError("G2 point is outside the prime-order subgroup")
    return point


def _indexes(data):
    if not isinstance(data, list) or not all(isinstance(i, int) and not isinstance(i, bool) for i in data):
        raise ProofEncodingError("public indexes must be a list of integers")
    return data


def _g1_list(data):
    if not isinstance(data, list):
        raise ProofEncodingError("expected a list of G1 points")
    return [deserialize_g1(p) for p in data]


def _g2_list(data):
    if not isinstance(data, list):
        raise ProofEncodingError("expected a list of G2 points")
    return [deserialize_g2(p) for p in data]


def _expect(doc, kind):
    if not isinstance(doc, dict):
        raise ProofEncodingError("{} document must be an object".format(kind))
    if doc.get("kind") != kind or doc.get("curve") != CURVE:
        raise ProofEncodingError("not a {} document for {}".format(kind, CURVE))


def _field(doc, name, kind=None):
    try:
        value = doc[name]
    except KeyError:
        raise ProofEncodingError("missing field {!r}".format(name)) from None
    if kind is not None and (not isinstance(value, kind) or isinstance(value, bool)):
        raise ProofEncodingError("field {!r} has the wrong type".format(name))
    return value


# ─── Proving key ───

def dump_proving_key(pk):
    return {
        "kind": "groth16-proving-key",
        "curve": CURVE,
        "circuit": pk.circuit_digest,
        "num_gates": pk.num_gates,
        "num_wires": pk.num_wires,
        "public": list(pk.public_indexes),
        "sigma1_1": [serialize_g1(p) for p in pk.sigma1_1],
        "sigma1_2": [serialize_g1(p) for p in pk.sigma1_2],
        "sigma1_4": [serialize_g1(p) for p in pk.sigma1_4],
        "sigma1_5": [serialize_g1(p) for p in pk.sigma1_5],
        "sigma2_1": [serialize_g2(p) for p in pk.sigma2_1],
        "sigma2_2": [serialize_g2(p) for p in pk.sigma2_2],
    }


def load_proving_key(doc):
    _expect(doc, "groth16-proving-key")
    pk = ProvingKey(
        circuit_digest=_field(doc, "circuit", str),
        num_gates=_field(doc, "num_gates", int),
        num_wires=_field(doc, "num_wires", int),
        public_indexes=_indexes(_field(doc, "public")),
        sigma1_1=_g1_list(_field(doc, "sigma1_1")),
        sigma1_2=_g1_list(_field(doc, "sigma1_2")),
        sigma1_4=_g1_list(_field(doc, "sigma1_4")),
        sigma1_5=_g1_list(_field(doc, "sigma1_5")),
        sigma2_1=_g2_list(_field(doc, "sigma2_1")),
        sigma2_2=_g2_list(_field(doc, "sigma2_2")),
    )
    if (len(pk.sigma1_1) != 3 or len(pk.sigma2_1) != 3 or len(pk.sigma1_2) != pk.num_gates
            or len(pk.sigma2_2) != pk.num_gates or len(pk.sigma1_4) != pk.num_wires
            or len(pk.sigma1_5) != max(pk.num_gates - 1, 0)):
        raise ProofEncodingError("proving key dimensions are inconsistent")
    return pk


# ─── Verifying key ───

def dump_verifying_key(vk):
    return {
        "kind": "groth16-verifying-key",
        "curve": CURVE,
        "circuit": vk.circuit_digest,
        "num_wires": vk.num_wires,
        "public": list(vk.public_indexes),
        "sigma1_1": [serialize_g1(p) for p in vk.sigma1_1],
        "sigma1_3": [serialize_g1(p) for p in vk.sigma1_3],
        "sigma2_1": [serialize_g2(p) for p in vk.sigma2_1],
    }


def load_verifying_key(doc):
    _expect(doc, "groth16-verifying-key")
    vk = VerifyingKey(
        circuit_digest=_field(doc, "circuit", str),
        num_wires=_field(doc, "num_wires", int),
        public_indexes=_indexes(_field(doc, "public")),
        sigma1_1=_g1_list(_field(doc, "sigma1_1")),
        sigma1_3=_g1_list(_field(doc, "sigma1_3")),
        sigma2_1=_g2_list(_field(doc, "sigma2_1")),
    )
    if len(vk.sigma1_1) != 3 or len(vk.sigma2_1) != 3 or len(vk.sigma1_3) != vk.num_wires:
        raise ProofEncodingError("verifying key dimensions are inconsistent")
    return vk


# ─── Proof ───

def dump_proof(proof):
    return {
        "kind": "groth16-proof",
        "curve": CURVE,
        "a": serialize_g1(proof.a),
        "b": serialize_g2(proof.b),
        "c": serialize_g1(proof.c),
    }


def load_proof(doc):
    _expect(doc, "groth16-proof")
    return Proof(
        deserialize_g1(_field(doc, "a")),
        deserialize_g2(_field(doc, "b"), check_subgroup=True),
        deserialize_g1(_field(doc, "c")),
    )


# ─── bytes / base64 ───

def to_bytes(doc):
    try:
        return json.dumps(doc, sort_keys=True, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError("cannot encode document: {}".format(e)) from e


def from_bytes(data):
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise ProofEncodingError("not a JSON document: {}".format(e)) from e


def b64encode(data):
    return base64.b64encode(data).decode("ascii")


def b64decode(text):
    if not isinstance(text, str):
        raise ProofEncodingError("base64 payload must be a string")
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ProofEncodingError("invalid base64: {}".format(e)) from e


def dump_proof_bytes(proof):
    return to_bytes(dump_proof(proof))


def load_proof_bytes(data):
    return load_proof(from_bytes(data))


def dump_proving_key_b64(pk):
    return b64encode(to_bytes(dump_proving_key(pk)))


def load_proving_key_b64(text):
    return load_proving_key(from_bytes(b64decode(text)))


def dump_proof_b64(proof):
    return b64encode(dump_proof_bytes(proof))


def load_proof_b64(text):
    return load_proof_bytes(b64decode(text))
