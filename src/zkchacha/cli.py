"""
Command line of the encrypt-and-commit prover.

    ENCRYPTION_KEY=<64 hex chars> zkchacha --execute
    ENCRYPTION_KEY=<64 hex chars> zkchacha --prove --proof-out proof.json
    zkchacha-vkey
"""

import argparse
import logging
import sys

from .config import Config, parse_hash, parse_prover
from .errors import ConfigurationError, ZkChachaError
from .log import setup_logger
from .orchestrator import Mode, run, select_mode
from .program import load_program
from .sdk import ProverBackend, ProverClient
from .utils import bytes_to_hex

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zkchacha",
        description="Prove ChaCha20 encryption of a plaintext with a committed digest",
        epilog=(
            "The cpu backend derives its keys from the public program image id, so anyone "
            "can forge proofs that verify against them. Use it for development only."
        ),
    )
    parser.add_argument("--execute", action="store_true", help="execute the program without proving")
    parser.add_argument("--prove", action="store_true", help="generate and verify a Groth16 proof")
    parser.add_argument("--input", dest="input_path", help="plaintext file (default: bundled example)")
    parser.add_argument("--hash", dest="hash_algorithm", choices=["sha256", "keccak256"], help="plaintext digest")
    parser.add_argument("--prover", choices=["cpu", "mock"], help="proving backend (cpu keys are reproducible and forgeable)")
    parser.add_argument("--key-dir", help="directory to load/store proving and verifying keys")
    parser.add_argument("--proof-out", help="write the proof with its public values to this JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def report(outcome, mode: Mode, proof_out=None):
    if mode is Mode.EXECUTE:
        print(f"Plaintext hash: 0x{bytes_to_hex(outcome.plaintext_digest)}")
        print(f"Ciphertext: 0x{bytes_to_hex(outcome.ciphertext)}")
        print(f"Ciphertext hash: 0x{bytes_to_hex(outcome.ciphertext_digest)}")
        print(f"Nonce: 0x{bytes_to_hex(outcome.nonce)}")
        print(f"Number of instructions: {outcome.instruction_count}")
        return

    print(f"Program vkey: {outcome.vk.bytes32()}")
    print(f"Public values: 0x{outcome.proof.public_values.hex()}")
    print(f"Proof: 0x{outcome.proof.proof_bytes().hex()}")
    print(f"Nonce: 0x{bytes_to_hex(outcome.nonce)}")
    if proof_out:
        try:
            outcome.proof.save(proof_out)
        except OSError as exc:
            raise ConfigurationError(f"Cannot write proof to {proof_out}: {exc}") from exc
        print(f"Proof written to {proof_out}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(args.verbose)

    try:
        mode = select_mode(args.execute, args.prove)
        config = Config.from_env(
            input_path=args.input_path,
            key_dir=args.key_dir,
            hash_algorithm=parse_hash(args.hash_algorithm) if args.hash_algorithm else None,
            prover=parse_prover(args.prover) if args.prover else None,
        )
        outcome = run(config, mode)
        report(outcome, mode, args.proof_out)
    except ZkChachaError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1

    return 0


def vkey_main(argv=None) -> int:
    """Print the verifying key identifier of the program"""
    parser = argparse.ArgumentParser(prog="zkchacha-vkey", description=vkey_main.__doc__)
    parser.add_argument("--hash", dest="hash_algorithm", choices=["sha256", "keccak256"], default="sha256")
    args = parser.parse_args(argv)

    program = load_program(parse_hash(args.hash_algorithm))
    _, vk = ProverClient(ProverBackend.MOCK).setup(program)
    print(vk.bytes32())

    return 0


if __name__ == "__main__":
    sys.exit(main())
