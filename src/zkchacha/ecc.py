from enum import Enum

from joblib import Parallel, delayed
from py_ecc import optimized_bn128
from py_ecc.fields import optimized_bn128_FQ, optimized_bn128_FQ2

from .utils import get_n_jobs, split_list


class CurveType(Enum):
    BN128 = optimized_bn128
    BN254 = optimized_bn128
    ALT_BN128 = optimized_bn128


class CurveFQ(Enum):
    BN128 = optimized_bn128_FQ
    BN254 = optimized_bn128_FQ
    ALT_BN128 = optimized_bn128_FQ


class CurveFQ2(Enum):
    BN128 = optimized_bn128_FQ2
    BN254 = optimized_bn128_FQ2
    ALT_BN128 = optimized_bn128_FQ2


class CurvePointSize(Enum):
    BN128 = 32
    BN254 = 32
    ALT_BN128 = 32


class EllipticCurve:
    """
    Pairing-friendly curve used by the Groth16 backend.

    Only the BN254 family is offered since it is the one with EVM
    precompiles (EIP-196/197) for on-chain verification.
    """

    def __init__(self, curve: str = "BN254"):
        self.name = curve
        self.curve = CurveType[curve].value
        self.order = self.curve.curve_order
        self.field_modulus = self.curve.field_modulus
        self.point_size = CurvePointSize[curve].value

    def G1(self):
        """Return generator G1 of the curve"""
        return Point(self.curve.G1, self)

    def G2(self):
        """Return generator G2 of the curve"""
        return Point(self.curve.G2, self)

    def zero_G1(self):
        return Point(self.curve.Z1, self)

    def zero_G2(self):
        return Point(self.curve.Z2, self)

    def pairing(self, a, b):
        """Compute pairing, that is `e(a, b)`, where `a in G1` and `b in G2`"""
        return self.curve.pairing(b.point, a.point)

    def multi_pairing(self, a: list, b: list):
        """Compute the product of `e(a[i], b[i])`"""
        assert len(a) == len(b), "Length of G1 and G2 points must be equal"

        results = Parallel(n_jobs=get_n_jobs())(
            delayed(self.curve.pairing)(q.point, p.point) for p, q in zip(a, b)
        )
        total = results[0]
        for r in results[1:]:
            total = total * r

        return total

    def batch_mul(self, point, scalars: list) -> list:
        """Compute `[point * s for s in scalars]`"""
        multiplied = Parallel(n_jobs=get_n_jobs())(
            delayed(self.curve.multiply)(point.point, s % self.order) for s in scalars
        )
        return [Point(p, self) for p in multiplied]

    def multiexp(self, points: list, scalars: list):
        """
        Perform Multi-Scalar-Multiplication (MSM)
        to compute sum of points[i] * scalars[i]
        """
        assert len(points) == len(scalars), "Length of points and scalars must be equal"
        assert points, "Cannot compute MSM of zero points"

        multiplied = Parallel(n_jobs=get_n_jobs())(
            delayed(self.curve.multiply)(p.point, s % self.order)
            for p, s in zip(points, scalars)
        )
        total = multiplied[0]
        for p in multiplied[1:]:
            total = self.curve.add(total, p)

        return Point(total, self)

    def from_bytes(self, s: bytes):
        """
        Parse a G1 point (64 bytes) or G2 point (128 bytes).
        G2 coordinates follow the EIP-197 layout: x.c1, x.c0, y.c1, y.c0.
        All-zero bytes encode the point at infinity.
        """
        n = self.point_size
        fq = CurveFQ[self.name].value
        fq2 = CurveFQ2[self.name].value

        if len(s) == n * 2:
            if not any(s):
                return self.zero_G1()
            x, y = (int.from_bytes(c, "big") for c in split_list(s, n))
            point = (fq(x), fq(y), fq.one())
            if not self.curve.is_on_curve(point, self.curve.b):
                raise ValueError("Invalid G1 point")
        elif len(s) == n * 4:
            if not any(s):
                return self.zero_G2()
            x1, x0, y1, y0 = (int.from_bytes(c, "big") for c in split_list(s, n))
            point = (fq2([x0, x1]), fq2([y0, y1]), fq2.one())
            if not self.curve.is_on_curve(point, self.curve.b2):
                raise ValueError("Invalid G2 point")
            if not self.curve.is_inf(self.curve.multiply(point, self.order)):
                raise ValueError("G2 point is not in the prime order subgroup")
        else:
            raise ValueError(f"Invalid point length: {len(s)} bytes")

        return Point(point, self)


class Point:
    """Projective point of `E` in either G1 or G2"""

    def __init__(self, point, E: EllipticCurve):
        self.point = point
        self.E = E

    @property
    def curve(self):
        return self.E.curve

    def __add__(self, other):
        if not isinstance(other, Point):
            raise TypeError(
                f"Addition of {type(self)} with {type(other)} is not allowed"
            )

        return Point(self.curve.add(self.point, other.point), self.E)

    def __radd__(self, other):
        return self.__add__(other)

    def __mul__(self, other):
        if not isinstance(other, int):
            raise TypeError(
                f"Multiplication of {type(self)} with {type(other)} is not allowed"
            )

        return Point(self.curve.multiply(self.point, other % self.E.order), self.E)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __neg__(self):
        return Point(self.curve.neg(self.point), self.E)

    def __eq__(self, other):
        return isinstance(other, Point) and self.curve.eq(self.point, other.point)

    def __str__(self) -> str:
        return f"{self.curve.normalize(self.point)}"

    def __repr__(self) -> str:
        return self.__str__()

    def is_zero(self) -> bool:
        return self.curve.is_inf(self.point)

    def is_g2(self) -> bool:
        return isinstance(self.point[0], CurveFQ2[self.E.name].value)

    def to_bytes(self) -> bytes:
        n = self.E.point_size
        if self.is_zero():
            return bytes(n * (4 if self.is_g2() else 2))

        x, y = self.curve.normalize(self.point)
        if self.is_g2():
            x0, x1 = x.coeffs
            y0, y1 = y.coeffs
            coords = (x1, x0, y1, y0)
        else:
            coords = (x, y)

        return b"".join(int(c).to_bytes(n, "big") for c in coords)

    def hex(self) -> str:
        return self.to_bytes().hex()
