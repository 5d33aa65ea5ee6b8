"""
Host-side workflow around the encrypt-and-commit program.

A run is either an *execute* run (no proof, every output recomputed and checked
on the host) or a *prove* run (Groth16 proof, verified locally before success).
Both assemble the same input stream: key, a fresh random nonce, plaintext.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .cipher import KEY_SIZE, NONCE_SIZE, chacha, random_nonce, to_fixed
from .errors import ConfigurationError, CorrectnessMismatchError
from .keystore import load_or_setup
from .program import Program, load_program
from .sdk import ProofMode, ProofWithPublicValues, ProverClient, VerifyingKey
from .utils import bytes_to_hex, key_fingerprint
from .zkvm import ExecutionReport, Stdin

logger = logging.getLogger(__name__)


class Mode(Enum):
    EXECUTE = "execute"
    PROVE = "prove"


def select_mode(execute: bool, prove: bool) -> Mode:
    """Exactly one of the two flags must be set"""
    if execute == prove:
        raise ConfigurationError("You must specify either --execute or --prove")
    return Mode.EXECUTE if execute else Mode.PROVE


@dataclass
class ExecutionOutcome:
    plaintext_digest: bytes
    ciphertext: bytes
    ciphertext_digest: bytes
    nonce: bytes
    report: ExecutionReport = field(repr=False)

    @property
    def instruction_count(self) -> int:
        return self.report.total_instruction_count()


@dataclass
class ProvingOutcome:
    proof: ProofWithPublicValues
    vk: VerifyingKey
    nonce: bytes


def build_stdin(key: bytes, nonce: bytes, plaintext: bytes) -> Stdin:
    """
    Input stream of the program:
    - key = 32 bytes
    - nonce = 12 bytes (MUST BE UNIQUE - NO REUSE!)
    - plaintext = bytes to encrypt
    """
    stdin = Stdin()
    stdin.write_slice(to_fixed(key, KEY_SIZE, "key"))
    stdin.write_slice(to_fixed(nonce, NONCE_SIZE, "nonce"))
    stdin.write_slice(plaintext)
    return stdin


def execute_and_check(
    client: ProverClient,
    program: Program,
    key: bytes,
    plaintext: bytes,
    nonce_source=random_nonce,
) -> ExecutionOutcome:
    """
    Execute the program without proving and check its commitment on the host.

    Raises:
        CorrectnessMismatchError: reported digest or round-trip decryption differs
    """
    nonce = nonce_source()
    logger.info("Executing %s with key %s", program.name, key_fingerprint(key))

    public_values, report = client.execute(program, build_stdin(key, nonce, plaintext))
    logger.info("Program executed successfully.")

    reported_digest, ciphertext = public_values.split_commitment()

    plaintext_digest = program.hash_algorithm.digest(plaintext)
    logger.info("Input -> plaintext hash: 0x%s", bytes_to_hex(plaintext_digest))
    logger.info("zkVM -> plaintext hash: 0x%s", bytes_to_hex(reported_digest))
    if reported_digest != plaintext_digest:
        raise CorrectnessMismatchError(
            f"zkVM plaintext hash 0x{bytes_to_hex(reported_digest)} does not match "
            f"input plaintext hash 0x{bytes_to_hex(plaintext_digest)}"
        )

    ciphertext_digest = program.hash_algorithm.digest(ciphertext)
    logger.info("zkVM -> ciphertext hash: 0x%s", bytes_to_hex(ciphertext_digest))

    # stream cipher is decrypted by running the encryption again:
    # plaintext XOR keystream XOR keystream = plaintext
    decrypted = bytearray(ciphertext)
    chacha(key, nonce, decrypted)
    if bytes(decrypted) != bytes(plaintext):
        raise CorrectnessMismatchError("Decryption of zkVM ciphertext does not match input")
    logger.info("Decryption of zkVM ciphertext matches input!")
    logger.info("Number of instructions: %d", report.total_instruction_count())

    return ExecutionOutcome(plaintext_digest, ciphertext, ciphertext_digest, nonce, report)


def prove_and_verify(
    client: ProverClient,
    program: Program,
    key: bytes,
    plaintext: bytes,
    key_dir=None,
    nonce_source=random_nonce,
) -> ProvingOutcome:
    """
    Prove a run of the program as a Groth16 proof and verify it locally.

    Raises:
        ProvingError: no proof could be produced
        VerificationError: the produced proof does not verify
    """
    pk, vk = load_or_setup(client, program, key_dir)

    nonce = nonce_source()
    logger.info("Proving %s with key %s", program.name, key_fingerprint(key))

    # Groth16 trades increased proving cost and time for minimal EVM gas costs
    proof = client.prove(pk, build_stdin(key, nonce, plaintext), ProofMode.GROTH16)
    logger.info("Successfully generated proof!")

    client.verify(proof, vk)
    logger.info("Successfully verified proof!")

    return ProvingOutcome(proof, vk, nonce)


def run(config, mode: Mode, client: ProverClient = None):
    """Run one mode to completion from a `Config`"""
    client = client or ProverClient.from_config(config)
    program = load_program(config.hash_algorithm)
    plaintext = config.read_plaintext()

    if mode is Mode.EXECUTE:
        return execute_and_check(client, program, config.encryption_key, plaintext)

    return prove_and_verify(
        client, program, config.encryption_key, plaintext, key_dir=config.key_dir
    )
