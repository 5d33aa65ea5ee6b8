"""
Groth16 proof system over BN254
"""

from .protocol import Groth16, verify
from .serialization import Proof, ProvingKey, VerifyingKey
