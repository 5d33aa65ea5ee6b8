import logging
import os

from .program import Program
from .sdk import ProverBackend, ProverClient, ProvingKey, VerifyingKey

logger = logging.getLogger(__name__)


def key_paths(key_dir, program: Program, backend: ProverBackend):
    """File paths of the proving and verifying key of `program` inside `key_dir`"""
    prefix = f"{program.name}-{program.hash_algorithm.value}-{backend.value}-{program.image_id.hex()[:16]}"
    return (
        os.path.join(key_dir, prefix + ".pk"),
        os.path.join(key_dir, prefix + ".vk"),
    )


def store_keys(key_dir, pk: ProvingKey, vk: VerifyingKey, backend: ProverBackend):
    os.makedirs(key_dir, exist_ok=True)
    pk_path, vk_path = key_paths(key_dir, pk.program, backend)

    with open(pk_path, "wb") as f:
        f.write(pk.to_bytes())
    with open(vk_path, "wb") as f:
        f.write(vk.to_bytes())

    logger.info("Stored keys of %s at %s", pk.program.name, key_dir)


def load_keys(key_dir, program: Program, backend: ProverBackend):
    """Return `(pk, vk)` stored for `program`, or `None` when absent or stale"""
    pk_path, vk_path = key_paths(key_dir, program, backend)
    if not (os.path.exists(pk_path) and os.path.exists(vk_path)):
        return None

    with open(vk_path, "rb") as f:
        vk_data = f.read()
    with open(pk_path, "rb") as f:
        pk_data = f.read()

    try:
        vk = VerifyingKey.from_bytes(vk_data)
        pk = ProvingKey.from_bytes(pk_data, program, vk)
    except ValueError as exc:
        logger.warning("Ignoring stored keys of %s in %s: %s", program.name, key_dir, exc)
        return None

    logger.info("Loaded keys of %s from %s", program.name, key_dir)
    return pk, vk


def load_or_setup(client: ProverClient, program: Program, key_dir=None):
    """
    Load the key pair of `program` from `key_dir`, or derive it and store it there.
    Without `key_dir` the keys are derived in memory only.
    """
    if key_dir:
        keys = load_keys(key_dir, program, client.backend)
        if keys is not None:
            return keys

    pk, vk = client.setup(program)

    if key_dir:
        store_keys(key_dir, pk, vk, client.backend)

    return pk, vk
