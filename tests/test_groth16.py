import random

import pytest

from zkchacha.ecc import EllipticCurve
from zkchacha.groth16 import Groth16, Proof, ProvingKey, VerifyingKey, verify
from zkchacha.r1cs import ConstraintSystem
from zkchacha.symbolic import Var

E = EllipticCurve("BN254")


def cubic_circuit():
    x = Var("x")
    y = Var("y")
    v1 = Var("v1")
    v2 = Var("v2")

    cs = ConstraintSystem(["x"], "y", E.order)
    cs.add_constraint(v1 == x * x)
    cs.add_constraint(v2 == v1 * x)
    cs.add_constraint(y == v2 + x + 5)
    cs.set_public(y)

    return cs


@pytest.fixture(scope="module")
def r1cs_data():
    cs = cubic_circuit()
    r1cs = cs.compile()
    pub, priv = cs.solve({"x": 3})

    return r1cs, (pub, priv)


@pytest.fixture(scope="module")
def trusted_setup(r1cs_data):
    r1cs, _ = r1cs_data

    groth16 = Groth16(r1cs)
    groth16.setup()

    return groth16


@pytest.fixture(scope="module")
def proof(trusted_setup, r1cs_data):
    _, (pub, priv) = r1cs_data
    return trusted_setup.prove(pub, priv)


def test_witness(r1cs_data):
    r1cs, (pub, priv) = r1cs_data

    assert pub == [1, 35]
    assert priv == [3, 9, 27]
    assert r1cs.is_satisfied(pub + priv, E.order)


def test_groth16(trusted_setup, r1cs_data, proof):
    _, (pub, _) = r1cs_data

    assert trusted_setup.verify(proof, pub)


def test_groth16_wrong_public_input(trusted_setup, proof):
    assert not trusted_setup.verify(proof, [1, 36])


def test_groth16_verify_with_key_only(trusted_setup, r1cs_data, proof):
    _, (pub, _) = r1cs_data
    vk = VerifyingKey.from_bytes(trusted_setup.verifying_key.to_bytes())

    assert verify(vk, proof, pub)


def test_groth16_invalid_witness(trusted_setup, r1cs_data):
    _, (pub, _) = r1cs_data

    with pytest.raises(ValueError):
        trusted_setup.prove(pub, [3, 9, 28])


def test_groth16_public_length_mismatch(trusted_setup, proof):
    with pytest.raises(AssertionError):
        trusted_setup.verify(proof, [1, 35, 0])


def test_proof_serialization(proof):
    proof_bytes = proof.to_bytes()

    assert len(proof_bytes) == 256
    assert Proof.from_bytes(proof_bytes) == proof


def test_proof_rejects_invalid_points(proof):
    tampered = bytearray(proof.to_bytes())
    tampered[63] ^= 1

    with pytest.raises(ValueError):
        Proof.from_bytes(bytes(tampered))

    with pytest.raises(ValueError):
        Proof.from_bytes(proof.to_bytes()[:-1])


def test_key_serialization(trusted_setup):
    pk = trusted_setup.proving_key
    vk = trusted_setup.verifying_key

    pk2 = ProvingKey.from_bytes(pk.to_bytes())
    vk2 = VerifyingKey.from_bytes(vk.to_bytes())

    assert pk2.to_bytes() == pk.to_bytes()
    assert vk2.to_bytes() == vk.to_bytes()
    assert pk2.tau_1 == pk.tau_1
    assert vk2.ic == vk.ic

    with pytest.raises(ValueError):
        VerifyingKey.from_bytes(vk.to_bytes() + b"\x00")


def test_seeded_setup_is_reproducible(r1cs_data):
    r1cs, _ = r1cs_data

    _, vk1 = Groth16(r1cs).setup(random.Random(b"seed"))
    _, vk2 = Groth16(r1cs).setup(random.Random(b"seed"))
    _, vk3 = Groth16(r1cs).setup(random.Random(b"other seed"))

    assert vk1.to_bytes() == vk2.to_bytes()
    assert vk1.to_bytes() != vk3.to_bytes()


def test_prove_without_setup(r1cs_data):
    r1cs, (pub, priv) = r1cs_data

    with pytest.raises(AssertionError):
        Groth16(r1cs).prove(pub, priv)


def test_unused_public_input_is_bound():
    x = Var("x")
    y = Var("y")
    v1 = Var("v1")

    cs = ConstraintSystem(["x", "z"], "y", E.order)
    cs.add_constraint(v1 == x * x)
    cs.add_constraint(y == v1 + 1)
    cs.set_public(["y", "z"])

    r1cs = cs.compile()
    pub, priv = cs.solve({"x": 2, "z": 7})
    assert pub == [1, 5, 7]

    groth16 = Groth16(r1cs)
    groth16.setup()
    proof = groth16.prove(pub, priv)

    assert groth16.verify(proof, pub)
    assert not groth16.verify(proof, [1, 5, 8])
