import pytest

from zkchacha.hashing import DIGEST_SIZE, HashAlgorithm, keccak256, sha256

from conftest import GOLDEN_KECCAK256, GOLDEN_SHA256


def test_sha256():
    assert sha256(b"test") == GOLDEN_SHA256
    assert HashAlgorithm.SHA256.digest(bytearray(b"test")) == GOLDEN_SHA256


def test_keccak256_is_not_sha3():
    assert keccak256(b"") == bytes.fromhex(
        "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )
    assert HashAlgorithm.KECCAK256.digest(b"test") == GOLDEN_KECCAK256


@pytest.mark.parametrize("algorithm", list(HashAlgorithm))
def test_digest_size(algorithm):
    assert len(algorithm.digest(b"x" * 1000)) == DIGEST_SIZE


def test_from_name():
    assert HashAlgorithm.from_name("sha256") is HashAlgorithm.SHA256
    assert HashAlgorithm.from_name(" KECCAK256 ") is HashAlgorithm.KECCAK256

    with pytest.raises(ValueError, match="Unknown hash algorithm"):
        HashAlgorithm.from_name("md5")
