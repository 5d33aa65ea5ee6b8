"""Error kinds raised across the encrypt-and-commit pipeline"""


class ZkChachaError(Exception):
    """Base class of every error a run can terminate with"""


class ConfigurationError(ZkChachaError):
    """Missing or malformed key material, or an invalid mode selection"""


class MalformedInputError(ZkChachaError, ValueError):
    """Wrong-length key or nonce"""


class ExecutionError(MalformedInputError):
    """The guest program aborted; no public values were committed"""


class CorrectnessMismatchError(ZkChachaError):
    """Host-side recomputation disagrees with what the VM reported"""


class ProvingError(ZkChachaError):
    """The proving backend could not produce a proof"""


class VerificationError(ZkChachaError):
    """A proof did not verify against the given verifying key"""
