"""
Run configuration, read from the environment (and a `.env` file) with
command-line overrides on top.

    ENCRYPTION_KEY     32-byte key as 64 hex characters, `0x` prefix allowed
    ZKCHACHA_PROVER    `cpu` (default) or `mock`
    ZKCHACHA_HASH      `sha256` (default) or `keccak256`
    ZKCHACHA_INPUT     plaintext file, defaults to the bundled example
    ZKCHACHA_KEY_DIR   directory where proving/verifying keys are kept
"""

import os
from dataclasses import dataclass, field, replace
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .cipher import KEY_SIZE
from .errors import ConfigurationError
from .hashing import HashAlgorithm
from .sdk import ProverBackend

DEFAULT_INPUT = os.path.join(os.path.dirname(__file__), "data", "proof_input_example.bin")


def parse_key(value: Optional[str]) -> bytes:
    if not value:
        raise ConfigurationError("Missing ENCRYPTION_KEY env var")

    value = value.strip()
    if value[:2].lower() == "0x":
        value = value[2:]

    try:
        key = bytes.fromhex(value)
    except ValueError as exc:
        raise ConfigurationError("ENCRYPTION_KEY must be hex encoded") from exc

    if len(key) != KEY_SIZE:
        raise ConfigurationError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")

    return key


def parse_prover(value: Optional[str]) -> ProverBackend:
    try:
        return ProverBackend((value or "cpu").strip().lower())
    except ValueError as exc:
        raise ConfigurationError(f"ZKCHACHA_PROVER must be `cpu` or `mock`, got {value!r}") from exc


def parse_hash(value: Optional[str]) -> HashAlgorithm:
    try:
        return HashAlgorithm.from_name(value or "sha256")
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


@dataclass(frozen=True)
class Config:
    encryption_key: bytes = field(repr=False)
    prover: ProverBackend = ProverBackend.CPU
    hash_algorithm: HashAlgorithm = HashAlgorithm.SHA256
    input_path: str = DEFAULT_INPUT
    key_dir: Optional[str] = None

    @classmethod
    def from_env(cls, environ=None, **overrides):
        """
        Build the configuration from `environ`.
        Without `environ`, a `.env` file in the working directory is loaded into
        `os.environ` first (existing variables win) and `os.environ` is used.
        Keyword overrides whose value is `None` are ignored.
        """
        if environ is None:
            load_dotenv(find_dotenv(usecwd=True))
            environ = os.environ

        config = cls(
            encryption_key=parse_key(environ.get("ENCRYPTION_KEY")),
            prover=parse_prover(environ.get("ZKCHACHA_PROVER")),
            hash_algorithm=parse_hash(environ.get("ZKCHACHA_HASH")),
            input_path=environ.get("ZKCHACHA_INPUT") or DEFAULT_INPUT,
            key_dir=environ.get("ZKCHACHA_KEY_DIR") or None,
        )

        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(config, **overrides)

    def read_plaintext(self) -> bytes:
        try:
            with open(self.input_path, "rb") as f:
                return f.read()
        except OSError as exc:
            raise ConfigurationError(f"Cannot read plaintext from {self.input_path}: {exc}") from exc
