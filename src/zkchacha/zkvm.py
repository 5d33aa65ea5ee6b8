"""
Execution environment of the guest program.

The host writes length-delimited segments to `Stdin`, the guest pulls them with
`GuestIO.read_vec` and exposes its result with `GuestIO.commit_slice`. Everything
committed becomes the `PublicValues` of the run; nothing else leaves the VM.
"""

import logging
import sys
from collections import deque

from .errors import ExecutionError, MalformedInputError
from .hashing import DIGEST_SIZE
from .utils import hash_to_field

logger = logging.getLogger(__name__)


class Stdin:
    """Ordered input stream of the VM"""

    def __init__(self):
        self.buffer = []

    def write_slice(self, data):
        """Append one segment; the guest reads it back whole with `read_vec`"""
        self.buffer.append(bytes(data))

    def __len__(self):
        return len(self.buffer)


class GuestIO:
    """Input and commitment channels seen from inside the guest"""

    def __init__(self, stdin: Stdin):
        self._segments = deque(stdin.buffer)
        self.public_values = bytearray()
        self.read_count = 0
        self.commit_count = 0

    def read_vec(self) -> bytes:
        if not self._segments:
            raise MalformedInputError("read_vec: input stream exhausted")
        self.read_count += 1
        return self._segments.popleft()

    def commit_slice(self, data):
        self.commit_count += 1
        self.public_values.extend(bytes(data))


class PublicValues:
    """Bytes committed by a run, in commit order"""

    def __init__(self, data=b""):
        self.buffer = bytes(data)

    def to_bytes(self) -> bytes:
        return self.buffer

    def hex(self) -> str:
        return self.buffer.hex()

    def split_commitment(self):
        """Split into (digest, ciphertext) at the fixed digest boundary"""
        if len(self.buffer) < DIGEST_SIZE:
            raise MalformedInputError(
                f"Public values hold {len(self.buffer)} bytes, less than the {DIGEST_SIZE}-byte digest"
            )
        return self.buffer[:DIGEST_SIZE], self.buffer[DIGEST_SIZE:]

    def hash_bn254(self) -> int:
        """Digest of the public values as a BN254 scalar, the second proof public input"""
        return hash_to_field(self.buffer)

    def __len__(self):
        return len(self.buffer)

    def __eq__(self, other):
        return isinstance(other, PublicValues) and self.buffer == other.buffer

    def __repr__(self):
        return f"PublicValues(0x{self.hex()})"


class ExecutionReport:
    def __init__(self, instruction_count=0, read_count=0, commit_count=0):
        self.instruction_count = instruction_count
        self.read_count = read_count
        self.commit_count = commit_count

    def total_instruction_count(self) -> int:
        """Python bytecode instructions executed by the guest, 0 when not counted"""
        return self.instruction_count

    def __repr__(self):
        return (
            f"ExecutionReport(instructions={self.instruction_count}, "
            f"reads={self.read_count}, commits={self.commit_count})"
        )


class _InstructionCounter:
    """Trace function counting opcode events in every frame the guest opens"""

    def __init__(self):
        self.count = 0

    def __call__(self, frame, event, arg):
        if event == "call":
            frame.f_trace_lines = False
            frame.f_trace_opcodes = True
        elif event == "opcode":
            self.count += 1
        return self


def execute(program, stdin: Stdin, count_instructions: bool = True):
    """
    Run `program` on `stdin` to completion.

    Returns:
        (PublicValues, ExecutionReport)

    Raises:
        ExecutionError: the guest aborted on malformed input; nothing is committed
    """
    io = GuestIO(stdin)
    counter = _InstructionCounter()

    previous_trace = sys.gettrace()
    if count_instructions:
        sys.settrace(counter)
    try:
        program.entrypoint(io)
    except MalformedInputError as exc:
        raise ExecutionError(f"{program.name} aborted: {exc}") from exc
    finally:
        if count_instructions:
            sys.settrace(previous_trace)

    report = ExecutionReport(counter.count, io.read_count, io.commit_count)
    logger.debug("%s executed: %r", program.name, report)

    return PublicValues(io.public_values), report
