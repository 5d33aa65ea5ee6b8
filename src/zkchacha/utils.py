import hashlib
import logging
import os
import random
import time

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# largest mask that keeps a 32-byte digest inside the BN254 scalar field
FIELD_MASK_253 = (1 << 253) - 1


def get_random_int(n_max, rng=None):
    """Get random integer in [1, n_max] range, from `rng` or the OS CSPRNG"""
    rand = rng or random.SystemRandom()
    return rand.randint(1, n_max)


def get_n_jobs():
    """Get number of supported cores for multiprocessing if enabled"""
    check_env = os.environ.get("ZKCHACHA_PARALLEL_CPU")
    if not check_env:
        return -1

    try:
        n_jobs = int(check_env)
    except ValueError as exc:
        raise ConfigurationError(
            f"ZKCHACHA_PARALLEL_CPU must be an integer, got {check_env!r}"
        ) from exc
    if n_jobs == 0:
        raise ConfigurationError("ZKCHACHA_PARALLEL_CPU must not be 0")
    return n_jobs


def split_list(data, n):
    """Split data into n chunks"""
    return [data[i : i + n] for i in range(0, len(data), n)]


def bytes_to_hex(data) -> str:
    """Format bytes as a lowercase hex string without prefix"""
    return bytes(data).hex()


def hash_to_field(data) -> int:
    """SHA-256 of `data` with the top 3 bits cleared, as a BN254 scalar"""
    return int.from_bytes(hashlib.sha256(bytes(data)).digest(), "big") & FIELD_MASK_253


def vkey_hash_from_image(image_id) -> int:
    """Image id as a BN254 scalar, the first public input of every proof"""
    return int.from_bytes(bytes(image_id), "big") & FIELD_MASK_253


def bytes32_from_image(image_id) -> str:
    """`0x`-prefixed 32-byte hex form of the vkey hash, pinned by on-chain verifiers"""
    return "0x" + vkey_hash_from_image(image_id).to_bytes(32, "big").hex()


def key_fingerprint(key) -> str:
    """Short identifier of secret key material, safe to log"""
    return hashlib.sha256(b"zkchacha-key" + bytes(key)).hexdigest()[:8]


class Timer:
    def __init__(self, name):
        self.start_time = 0
        self.end_time = 0
        self.elapsed = 0.0
        self.name = name

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.time()
        self.elapsed = self.end_time - self.start_time
        logger.info("%s: %.2f seconds", self.name, self.elapsed)
