"""
Proving backend driven by the orchestrator.

`ProverClient` executes programs, derives their key pairs, proves and verifies.
Two backends are available:

- `cpu`: a Groth16 proof over BN254 whose public inputs are the program vkey
  hash and the digest of the public values. This is the representation an EVM
  verifier checks with a single pairing-product precompile call.
- `mock`: no cryptography. Proofs are empty and verification only compares
  the program identity. Meant for fast local runs and tests.

Keys are derived deterministically from the program image id, so they change
exactly when the guest program changes. Since the setup seed is public, the
`cpu` backend gives reproducible keys rather than a trusted ceremony.
"""

import functools
import json
import logging
import random
from enum import Enum
from typing import Optional

from . import zkvm
from .ecc import EllipticCurve
from .errors import ExecutionError, ProvingError, VerificationError
from .groth16 import Groth16, Proof
from .groth16 import ProvingKey as Groth16ProvingKey
from .groth16 import VerifyingKey as Groth16VerifyingKey
from .groth16 import verify as groth16_verify
from .hashing import HashAlgorithm
from .program import Program
from .r1cs import ConstraintSystem
from .symbolic import Var
from .utils import Timer, bytes32_from_image, vkey_hash_from_image
from .zkvm import PublicValues, Stdin

logger = logging.getLogger(__name__)

PK_MAGIC = b"ZKCP"
VK_MAGIC = b"ZKCV"
IMAGE_ID_SIZE = 32


class ProverBackend(Enum):
    """
    `CPU` keys come from a setup seeded with the public image id, so anyone
    can forge proofs that verify against them. A passing local verify shows
    the run is consistent, not that the proof is sound.
    """

    CPU = "cpu"
    MOCK = "mock"


class ProofMode(Enum):
    # larger proving cost in exchange for the cheapest on-chain verification
    GROTH16 = "groth16"


def wrap_circuit() -> ConstraintSystem:
    """
    Statement bound by every proof: both public inputs enter a multiplication,
    so neither can be swapped without invalidating the proof.
    """
    vkey_hash = Var("vkey_hash")
    committed_values_digest = Var("committed_values_digest")
    t = Var("t")
    binding = Var("binding")

    cs = ConstraintSystem(
        [vkey_hash, committed_values_digest], binding, EllipticCurve("BN254").order
    )
    cs.add_constraint(t == vkey_hash * committed_values_digest)
    cs.add_constraint(binding == t * t)
    cs.set_public([vkey_hash, committed_values_digest])

    return cs


@functools.lru_cache(maxsize=None)
def _wrap_r1cs():
    return wrap_circuit().compile()


def _check_length(s: bytes, n: int):
    if len(s) < n:
        raise ValueError("Unexpected end of serialized data")


def _public_inputs(vkey_hash: int, public_values: PublicValues) -> list:
    return [1, vkey_hash, public_values.hash_bn254()]


class VerifyingKey:
    """
    Verifying key of one program image

    Args:
        image_id: 32-byte identity of the program image
        hash_algorithm: digest strategy of the program
        groth16: Groth16 verifying key, `None` for mock keys
    """

    def __init__(
        self,
        image_id: bytes,
        hash_algorithm: HashAlgorithm,
        groth16: Optional[Groth16VerifyingKey] = None,
    ):
        self.image_id = bytes(image_id)
        self.hash_algorithm = hash_algorithm
        self.groth16 = groth16

    @property
    def vkey_hash(self) -> int:
        return vkey_hash_from_image(self.image_id)

    def bytes32(self) -> str:
        """Fixed-size identifier pinned by on-chain verifiers"""
        return bytes32_from_image(self.image_id)

    def to_bytes(self) -> bytes:
        name = self.hash_algorithm.value.encode()
        s = VK_MAGIC + self.image_id + bytes([len(name)]) + name
        if self.groth16 is None:
            return s + b"\x00"
        return s + b"\x01" + self.groth16.to_bytes()

    @classmethod
    def from_bytes(cls, s: bytes):
        if s[:4] != VK_MAGIC:
            raise ValueError("Not a verifying key")
        offset = 4 + IMAGE_ID_SIZE
        _check_length(s, offset + 1)
        image_id = s[4:offset]
        name_len = s[offset]
        _check_length(s, offset + 2 + name_len)
        name = s[offset + 1 : offset + 1 + name_len].decode()
        offset += 1 + name_len
        groth16 = None
        if s[offset] == 1:
            groth16 = Groth16VerifyingKey.from_bytes(s[offset + 1 :])
        return cls(image_id, HashAlgorithm.from_name(name), groth16)


class ProvingKey:
    """
    Proving key of one program image, holding the program itself

    Args:
        program: loaded program image
        vk: matching verifying key
        groth16: Groth16 proving key, `None` for mock keys
    """

    def __init__(
        self,
        program: Program,
        vk: VerifyingKey,
        groth16: Optional[Groth16ProvingKey] = None,
    ):
        self.program = program
        self.vk = vk
        self.groth16 = groth16

    def to_bytes(self) -> bytes:
        s = PK_MAGIC + self.program.image_id
        if self.groth16 is None:
            return s + b"\x00"
        return s + b"\x01" + self.groth16.to_bytes()

    @classmethod
    def from_bytes(cls, s: bytes, program: Program, vk: VerifyingKey):
        """Rebuild a proving key for `program`; the serialized image id must match it"""
        if s[:4] != PK_MAGIC:
            raise ValueError("Not a proving key")
        _check_length(s, 4 + IMAGE_ID_SIZE + 1)
        image_id = s[4 : 4 + IMAGE_ID_SIZE]
        if image_id != program.image_id or vk.image_id != program.image_id:
            raise ValueError("Proving key was derived from a different program image")
        offset = 4 + IMAGE_ID_SIZE
        groth16 = None
        if s[offset] == 1:
            groth16 = Groth16ProvingKey.from_bytes(s[offset + 1 :])
        return cls(program, vk, groth16)


class ProofWithPublicValues:
    """
    A proof together with the public values it attests to.

    The key and nonce of the run are not part of it.
    """

    def __init__(
        self,
        proof: Optional[Proof],
        public_values: PublicValues,
        vkey_hash: str,
        hash_algorithm: HashAlgorithm,
        mode: ProofMode = ProofMode.GROTH16,
    ):
        self.proof = proof
        self.public_values = public_values
        self.vkey_hash = vkey_hash
        self.hash_algorithm = hash_algorithm
        self.mode = mode

    def proof_bytes(self) -> bytes:
        """Encoded proof as submitted on-chain, empty for mock proofs"""
        return self.proof.to_bytes() if self.proof is not None else b""

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "vkey_hash": self.vkey_hash,
            "hash_algorithm": self.hash_algorithm.value,
            "public_values": self.public_values.hex(),
            "proof": self.proof_bytes().hex(),
        }

    @classmethod
    def from_dict(cls, data: dict):
        proof_bytes = bytes.fromhex(data["proof"])
        return cls(
            Proof.from_bytes(proof_bytes) if proof_bytes else None,
            PublicValues(bytes.fromhex(data["public_values"])),
            data["vkey_hash"],
            HashAlgorithm.from_name(data["hash_algorithm"]),
            ProofMode(data["mode"]),
        )

    def save(self, path):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path):
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


class ProverClient:
    def __init__(self, backend: ProverBackend = ProverBackend.CPU):
        self.backend = backend

    @classmethod
    def from_config(cls, config):
        return cls(config.prover)

    def execute(self, program: Program, stdin: Stdin):
        """Run without proving, returns `(PublicValues, ExecutionReport)`"""
        return zkvm.execute(program, stdin)

    def setup(self, program: Program):
        """Derive `(ProvingKey, VerifyingKey)` of `program`"""
        logger.info("Deriving %s keys of %s (%s)", self.backend.value, program.name, program.bytes32())
        if self.backend is ProverBackend.MOCK:
            vk = VerifyingKey(program.image_id, program.hash_algorithm)
            return ProvingKey(program, vk), vk

        groth16 = Groth16(_wrap_r1cs())
        with Timer(f"setup {program.name}"):
            g16_pk, g16_vk = groth16.setup(random.Random(program.image_id))

        vk = VerifyingKey(program.image_id, program.hash_algorithm, g16_vk)
        return ProvingKey(program, vk, g16_pk), vk

    def prove(self, pk: ProvingKey, stdin: Stdin, mode: ProofMode) -> ProofWithPublicValues:
        """
        Execute the program of `pk` on `stdin` and prove the run in `mode`

        Raises:
            ProvingError: the program aborted or no proof could be produced
        """
        if not isinstance(mode, ProofMode):
            raise ProvingError(f"Unsupported proof mode: {mode!r}")

        program = pk.program
        try:
            public_values, _ = zkvm.execute(program, stdin, count_instructions=False)
        except ExecutionError as exc:
            raise ProvingError(f"Cannot prove an aborted execution: {exc}") from exc

        logger.debug("Committed %d bytes of public values", len(public_values))

        proof = None
        if self.backend is ProverBackend.CPU:
            if pk.groth16 is None:
                raise ProvingError("Proving key holds no Groth16 key, was it made by the mock backend?")

            cs = wrap_circuit()
            public_witness, private_witness = cs.solve(
                {
                    "vkey_hash": program.vkey_hash,
                    "committed_values_digest": public_values.hash_bn254(),
                }
            )

            groth16 = Groth16(_wrap_r1cs())
            groth16.proving_key = pk.groth16
            try:
                with Timer(f"prove {program.name}"):
                    proof = groth16.prove(public_witness, private_witness)
            except (AssertionError, ValueError) as exc:
                raise ProvingError(f"Groth16 prover failed: {exc}") from exc

        return ProofWithPublicValues(
            proof, public_values, program.bytes32(), program.hash_algorithm, mode
        )

    def verify(self, proof: ProofWithPublicValues, vk: VerifyingKey):
        """
        Raises:
            VerificationError: the proof does not verify against `vk`
        """
        if proof.hash_algorithm is not vk.hash_algorithm:
            raise VerificationError(
                f"Proof commits a {proof.hash_algorithm.value} digest, "
                f"the verifying key expects {vk.hash_algorithm.value}"
            )

        if self.backend is ProverBackend.MOCK:
            if proof.vkey_hash != vk.bytes32():
                raise VerificationError("Mock proof was made for a different program")
            return

        if proof.proof is None or vk.groth16 is None:
            raise VerificationError("Groth16 verification needs a Groth16 proof and key")

        try:
            with Timer("verify"):
                valid = groth16_verify(
                    vk.groth16, proof.proof, _public_inputs(vk.vkey_hash, proof.public_values)
                )
        except AssertionError as exc:
            raise VerificationError(f"Malformed verifying key: {exc}") from exc

        if not valid:
            raise VerificationError("Groth16 pairing check failed")
