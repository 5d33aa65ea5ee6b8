import os

import pytest

# keep joblib in-process so elliptic curve work does not spawn workers per test
os.environ["ZKCHACHA_PARALLEL_CPU"] = "1"

from zkchacha.cipher import KEY_SIZE, NONCE_SIZE
from zkchacha.orchestrator import build_stdin

ZERO_KEY = bytes(KEY_SIZE)
ZERO_NONCE = bytes(NONCE_SIZE)

# (0^32, 0^12, b"test") golden vectors
GOLDEN_CIPHERTEXT = bytes.fromhex("02dd93d9")
GOLDEN_SHA256 = bytes.fromhex(
    "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"
)
GOLDEN_KECCAK256 = bytes.fromhex(
    "9c22ff5f21f0b81b113e63f7db6da94fedef11b2119b4088b89664fb9a3cb658"
)


@pytest.fixture
def golden_stdin():
    return build_stdin(ZERO_KEY, ZERO_NONCE, b"test")
