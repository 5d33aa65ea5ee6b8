"""
Prove that a plaintext was ChaCha20-encrypted under a secret key, committing
to its digest and to the ciphertext.
"""

from .cipher import chacha, random_nonce
from .errors import (
    ConfigurationError,
    CorrectnessMismatchError,
    ExecutionError,
    MalformedInputError,
    ProvingError,
    VerificationError,
    ZkChachaError,
)
from .hashing import HashAlgorithm
from .program import Program, load_program
from .sdk import ProofMode, ProofWithPublicValues, ProverBackend, ProverClient
from .zkvm import PublicValues, Stdin

__version__ = "0.1.0"
