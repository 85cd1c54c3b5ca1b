import logging

from py_ecc import bn128

from zkgate.errors import EncodingError
from zkgate.serializers import load_proof_bytes

logger = logging.getLogger(__name__)

mult = bn128.multiply
pairing = bn128.pairing
add = bn128.add


def lhs(prf_A, prf_B):
    return pairing(prf_B, prf_A)

def rhs(prf_C, sigma1_1, sigma1_3, sigma2_1, rx_pub):
    RHS = pairing(sigma2_1[0], sigma1_1[0])
    temp = None
    for i, ri in rx_pub:
        temp = add(temp, mult(sigma1_3[i], int(ri)))
    RHS = (RHS * pairing(sigma2_1[1], temp)) * pairing(sigma2_1[2], prf_C)
    return RHS

#(rx_pub) = [(index_i, ri), ... ]
def verify(prf_A, prf_B, prf_C, sigma1_1, sigma1_3, sigma2_1, rx_pub):
    return lhs(prf_A, prf_B) == rhs(prf_C, sigma1_1, sigma1_3, sigma2_1, rx_pub)


def verify_proof(proof, vk, public_witness):
    """Check ``proof`` for ``public_witness`` under ``vk``.

    ``proof`` may be a Proof or its serialized bytes. Anything that does not
    verify, including undecodable bytes, yields False.
    """
    if isinstance(proof, (bytes, bytearray)):
        try:
            proof = load_proof_bytes(bytes(proof))
        except EncodingError as e:
            logger.info("rejecting undecodable proof: %s", e)
            return False

    indexes = [i for i, _ in public_witness.rx_pub]
    if indexes != vk.public_indexes:
        logger.info("public input layout %s does not match verifying key %s", indexes, vk.public_indexes)
        return False

    try:
        return verify(proof.a, proof.b, proof.c, vk.sigma1_1, vk.sigma1_3, vk.sigma2_1, public_witness.rx_pub)
    except (AssertionError, TypeError, ValueError) as e:
        # py_ecc asserts curve membership inside pairing()
        logger.info("rejecting malformed proof: %s", e)
        return False
