from ..ecc import EllipticCurve


class _Reader:
    """Sequential reader over a serialized key"""

    def __init__(self, data: bytes, E: EllipticCurve):
        self.data = data
        self.offset = 0
        self.E = E
        self.g1_size = E.point_size * 2
        self.g2_size = E.point_size * 4

    def take(self, n):
        if self.offset + n > len(self.data):
            raise ValueError("Unexpected end of serialized data")
        chunk = self.data[self.offset : self.offset + n]
        self.offset += n
        return chunk

    def g1(self):
        return self.E.from_bytes(self.take(self.g1_size))

    def g2(self):
        return self.E.from_bytes(self.take(self.g2_size))

    def length(self):
        return int.from_bytes(self.take(8), "little")

    def g1_list(self):
        return [self.g1() for _ in range(self.length())]

    def g2_list(self):
        return [self.g2() for _ in range(self.length())]

    def finish(self):
        if self.offset != len(self.data):
            raise ValueError(f"{len(self.data) - self.offset} trailing bytes")


def _write_list(points) -> bytes:
    return int.to_bytes(len(points), 8, "little") + b"".join(p.to_bytes() for p in points)


class Proof:
    def __init__(self, A, B, C):
        self.A = A
        self.B = B
        self.C = C

    def __str__(self):
        return f"A = {self.A}\nB = {self.B}\nC = {self.C}"

    def __repr__(self):
        return self.__str__()

    def __eq__(self, other):
        return (
            isinstance(other, Proof)
            and self.A == other.A
            and self.B == other.B
            and self.C == other.C
        )

    @classmethod
    def from_bytes(cls, s: bytes, crv="BN254"):
        """Parse Proof from serialized bytes"""
        reader = _Reader(bytes(s), EllipticCurve(crv))
        proof = Proof(reader.g1(), reader.g2(), reader.g1())
        reader.finish()
        return proof

    def to_bytes(self) -> bytes:
        """
        Return bytes representation of the Proof, `A || B || C`,
        laid out as the eight 32-byte words an EVM verifier takes
        """
        return self.A.to_bytes() + self.B.to_bytes() + self.C.to_bytes()


class ProvingKey:
    def __init__(
        self,
        alpha_G1,
        beta_G1,
        beta_G2,
        delta_G1,
        delta_G2,
        tau_G1,
        tau_G2,
        target_G1,
        k_delta_G1,
    ):
        self.alpha_1 = alpha_G1
        self.beta_1 = beta_G1
        self.beta_2 = beta_G2
        self.delta_1 = delta_G1
        self.delta_2 = delta_G2
        self.tau_1 = tau_G1
        self.tau_2 = tau_G2
        self.target_1 = target_G1
        self.kdelta_1 = k_delta_G1

    @classmethod
    def from_bytes(cls, s: bytes, crv="BN254"):
        """Construct ProvingKey from bytes"""
        reader = _Reader(bytes(s), EllipticCurve(crv))

        alpha_1 = reader.g1()
        beta_1 = reader.g1()
        beta_2 = reader.g2()
        delta_1 = reader.g1()
        delta_2 = reader.g2()
        tau_1 = reader.g1_list()
        tau_2 = reader.g2_list()
        target_1 = reader.g1_list()
        kdelta_1 = reader.g1_list()
        reader.finish()

        return ProvingKey(
            alpha_1, beta_1, beta_2, delta_1, delta_2, tau_1, tau_2, target_1, kdelta_1
        )

    def to_bytes(self) -> bytes:
        """Return bytes representation of the ProvingKey"""
        s = (
            self.alpha_1.to_bytes()
            + self.beta_1.to_bytes()
            + self.beta_2.to_bytes()
            + self.delta_1.to_bytes()
            + self.delta_2.to_bytes()
        )
        s += _write_list(self.tau_1)
        s += _write_list(self.tau_2)
        s += _write_list(self.target_1)
        s += _write_list(self.kdelta_1)

        return s


class VerifyingKey:
    def __init__(
        self,
        alpha_G1,  # vk_alpha_1
        beta_G2,  # vk_beta_2
        gamma_G2,  # vk_gamma_2
        delta_G2,  # vk_delta_2
        IC,  # ic
    ):
        self.alpha_1 = alpha_G1
        self.beta_2 = beta_G2
        self.gamma_2 = gamma_G2
        self.delta_2 = delta_G2
        self.ic = IC

    @classmethod
    def from_bytes(cls, s: bytes, crv="BN254"):
        """Construct VerifyingKey from bytes"""
        reader = _Reader(bytes(s), EllipticCurve(crv))

        alpha_1 = reader.g1()
        beta_2 = reader.g2()
        gamma_2 = reader.g2()
        delta_2 = reader.g2()
        ic = reader.g1_list()
        reader.finish()

        return VerifyingKey(alpha_1, beta_2, gamma_2, delta_2, ic)

    def to_bytes(self) -> bytes:
        """Return bytes representation of the VerifyingKey"""
        s = (
            self.alpha_1.to_bytes()
            + self.beta_2.to_bytes()
            + self.gamma_2.to_bytes()
            + self.delta_2.to_bytes()
        )
        s += _write_list(self.ic)

        return s
