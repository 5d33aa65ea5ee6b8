import json

import pytest

from zkchacha.errors import ProvingError, VerificationError
from zkchacha.hashing import HashAlgorithm
from zkchacha.orchestrator import build_stdin
from zkchacha.program import Program, compute_image_id, load_program
from zkchacha.sdk import (
    ProofMode,
    ProofWithPublicValues,
    ProverBackend,
    ProverClient,
    ProvingKey,
    VerifyingKey,
    wrap_circuit,
)
from zkchacha.zkvm import PublicValues, Stdin

from conftest import GOLDEN_CIPHERTEXT, GOLDEN_SHA256, ZERO_KEY, ZERO_NONCE


@pytest.fixture(scope="module")
def cpu_client():
    return ProverClient(ProverBackend.CPU)


@pytest.fixture(scope="module")
def cpu_keys(cpu_client):
    return cpu_client.setup(load_program())


@pytest.fixture(scope="module")
def cpu_proof(cpu_client, cpu_keys):
    pk, _ = cpu_keys
    stdin = build_stdin(ZERO_KEY, ZERO_NONCE, b"test")
    return cpu_client.prove(pk, stdin, ProofMode.GROTH16)


def other_program(name="other-program", hash_algorithm=HashAlgorithm.SHA256):
    program = load_program(hash_algorithm)
    return Program(
        name=name,
        hash_algorithm=hash_algorithm,
        image_id=compute_image_id(name, hash_algorithm),
        entrypoint=program.entrypoint,
    )


def test_wrap_circuit():
    cs = wrap_circuit()
    r1cs = cs.compile()
    pub, priv = cs.solve({"vkey_hash": 3, "committed_values_digest": 5})

    assert r1cs.n_public == 3
    assert pub == [1, 3, 5]
    assert priv == [225, 15]


def test_cpu_prove_and_verify(cpu_client, cpu_keys, cpu_proof):
    _, vk = cpu_keys

    assert cpu_proof.public_values.to_bytes() == GOLDEN_SHA256 + GOLDEN_CIPHERTEXT
    assert cpu_proof.vkey_hash == vk.bytes32() == load_program().bytes32()
    assert cpu_proof.mode is ProofMode.GROTH16
    assert len(cpu_proof.proof_bytes()) == 256

    cpu_client.verify(cpu_proof, vk)


def test_tampered_public_values_fail(cpu_client, cpu_keys, cpu_proof):
    _, vk = cpu_keys
    tampered = bytearray(cpu_proof.public_values.to_bytes())
    tampered[-1] ^= 1

    forged = ProofWithPublicValues(
        cpu_proof.proof,
        PublicValues(tampered),
        cpu_proof.vkey_hash,
        cpu_proof.hash_algorithm,
    )

    with pytest.raises(VerificationError, match="pairing"):
        cpu_client.verify(forged, vk)


def test_proof_bound_to_program_image(cpu_client, cpu_keys, cpu_proof):
    _, vk = cpu_keys
    other = other_program()
    other_vk = VerifyingKey(other.image_id, other.hash_algorithm, vk.groth16)

    with pytest.raises(VerificationError):
        cpu_client.verify(cpu_proof, other_vk)


def test_proof_rejected_by_other_program_keys(cpu_client, cpu_proof):
    _, other_vk = cpu_client.setup(other_program())

    assert other_vk.bytes32() != cpu_proof.vkey_hash
    with pytest.raises(VerificationError, match="pairing"):
        cpu_client.verify(cpu_proof, other_vk)


def test_hash_algorithm_mismatch(cpu_client, cpu_keys, cpu_proof):
    _, vk = cpu_keys
    keccak_vk = VerifyingKey(vk.image_id, HashAlgorithm.KECCAK256, vk.groth16)

    with pytest.raises(VerificationError, match="keccak256"):
        cpu_client.verify(cpu_proof, keccak_vk)


def test_verifying_key_serialization(cpu_client, cpu_keys, cpu_proof):
    _, vk = cpu_keys
    restored = VerifyingKey.from_bytes(vk.to_bytes())

    assert restored.image_id == vk.image_id
    assert restored.hash_algorithm is HashAlgorithm.SHA256
    assert restored.bytes32() == vk.bytes32()
    cpu_client.verify(cpu_proof, restored)

    with pytest.raises(ValueError):
        VerifyingKey.from_bytes(b"XXXX" + vk.to_bytes()[4:])

    for size in (4, 20, 37, 38, 100):
        with pytest.raises(ValueError):
            VerifyingKey.from_bytes(vk.to_bytes()[:size])


def test_proving_key_serialization(cpu_keys):
    pk, vk = cpu_keys
    program = load_program()

    restored = ProvingKey.from_bytes(pk.to_bytes(), program, vk)
    assert restored.program is program
    assert restored.groth16.to_bytes() == pk.groth16.to_bytes()

    other = other_program()
    with pytest.raises(ValueError, match="different program"):
        ProvingKey.from_bytes(pk.to_bytes(), other, vk)

    with pytest.raises(ValueError, match="Unexpected end"):
        ProvingKey.from_bytes(pk.to_bytes()[:36], program, vk)


def test_setup_is_deterministic(cpu_client, cpu_keys):
    _, vk = cpu_keys
    _, again = cpu_client.setup(load_program())

    assert again.to_bytes() == vk.to_bytes()


def test_proof_save_and_load(tmp_path, cpu_client, cpu_keys, cpu_proof):
    _, vk = cpu_keys
    path = tmp_path / "proof.json"
    cpu_proof.save(path)

    data = json.loads(path.read_text())
    assert data["mode"] == "groth16"
    assert data["hash_algorithm"] == "sha256"
    assert data["public_values"] == cpu_proof.public_values.hex()

    loaded = ProofWithPublicValues.load(path)
    assert loaded.proof == cpu_proof.proof
    assert loaded.public_values == cpu_proof.public_values
    cpu_client.verify(loaded, vk)


def test_prove_malformed_input(cpu_client, cpu_keys):
    pk, _ = cpu_keys
    stdin = Stdin()
    stdin.write_slice(bytes(31))
    stdin.write_slice(ZERO_NONCE)
    stdin.write_slice(b"test")

    with pytest.raises(ProvingError, match="aborted"):
        cpu_client.prove(pk, stdin, ProofMode.GROTH16)


def test_prove_unsupported_mode(cpu_client, cpu_keys, golden_stdin):
    pk, _ = cpu_keys

    with pytest.raises(ProvingError, match="Unsupported"):
        cpu_client.prove(pk, golden_stdin, "plonk")


def test_cpu_backend_rejects_mock_keys(cpu_client, golden_stdin):
    mock_pk, mock_vk = ProverClient(ProverBackend.MOCK).setup(load_program())

    with pytest.raises(ProvingError):
        cpu_client.prove(mock_pk, golden_stdin, ProofMode.GROTH16)

    mock_proof = ProverClient(ProverBackend.MOCK).prove(mock_pk, golden_stdin, ProofMode.GROTH16)
    with pytest.raises(VerificationError):
        cpu_client.verify(mock_proof, mock_vk)


def test_mock_backend(golden_stdin):
    client = ProverClient(ProverBackend.MOCK)
    program = load_program(HashAlgorithm.KECCAK256)
    pk, vk = client.setup(program)

    assert vk.groth16 is None
    assert pk.groth16 is None
    assert VerifyingKey.from_bytes(vk.to_bytes()).bytes32() == vk.bytes32()

    proof = client.prove(pk, golden_stdin, ProofMode.GROTH16)
    assert proof.proof_bytes() == b""
    assert len(proof.public_values) == 36
    client.verify(proof, vk)

    _, other_vk = client.setup(other_program(hash_algorithm=HashAlgorithm.KECCAK256))
    with pytest.raises(VerificationError):
        client.verify(proof, other_vk)


def test_mock_proof_json(tmp_path, golden_stdin):
    client = ProverClient(ProverBackend.MOCK)
    pk, vk = client.setup(load_program())
    proof = client.prove(pk, golden_stdin, ProofMode.GROTH16)

    path = tmp_path / "mock.json"
    proof.save(path)
    loaded = ProofWithPublicValues.load(path)

    assert loaded.proof is None
    client.verify(loaded, vk)


def test_client_execute(golden_stdin):
    public_values, report = ProverClient(ProverBackend.MOCK).execute(load_program(), golden_stdin)

    assert public_values.to_bytes() == GOLDEN_SHA256 + GOLDEN_CIPHERTEXT
    assert report.total_instruction_count() > 0
