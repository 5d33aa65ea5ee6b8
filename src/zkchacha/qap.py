from .polynomial import (
    PolynomialRing,
    evaluate_lagrange_coefficients,
    evaluation_domain,
    lagrange_polynomial,
    vanishing_polynomial,
)
from .r1cs import R1CS


class QAP:
    def __init__(self, p):
        self.r1cs = None
        self.T = PolynomialRing([0], p)
        self.n_public = 0
        self.p = p

    def from_r1cs(self, r1cs: R1CS):
        """
        Parse QAP from R1CS matrices, interpolating each column over the domain `1..n`

        Args:
            r1cs: compiled R1CS
        """
        self.r1cs = r1cs
        self.n_public = r1cs.n_public
        self.T = vanishing_polynomial(r1cs.n_constraints, self.p)

    @property
    def n_constraints(self):
        return self.r1cs.n_constraints

    def evaluate_columns(self, x: int):
        """
        Evaluate every column polynomial `U_i, V_i, W_i` at the point `x`

        Return:
            U, V, W: lists indexed by witness position
        """
        lagrange_coeffs = evaluate_lagrange_coefficients(self.n_constraints, x, self.p)
        n_witness = self.r1cs.n_witness

        evaluated = []
        for m in (self.r1cs.A, self.r1cs.B, self.r1cs.C):
            column = [0] * n_witness
            for coeff, row in zip(lagrange_coeffs, m):
                for i, value in enumerate(row):
                    if value:
                        column[i] += coeff * value
            evaluated.append([c % self.p for c in column])

        return evaluated[0], evaluated[1], evaluated[2]

    def evaluate_witness(self, witness: list):
        """
        Evaluate QAP with witness vector. Incorrect witness value will raise an error.

        Args:
            witness: Witness vector (public+private) to be evaluated

        Return:
            U, V, W, H: Resulting polynomials to be proved
        """
        domain = evaluation_domain(self.n_constraints)

        poly_m = []
        for m in (self.r1cs.A, self.r1cs.B, self.r1cs.C):
            # dot product of <row> . <witness> for each constraint
            ys = [sum(a * w for a, w in zip(row, witness)) % self.p for row in m]
            poly_m.append(lagrange_polynomial(domain, ys, self.p))

        U, V, W = poly_m

        H, remainder = (U * V - W) / self.T
        if not remainder.is_zero():
            raise ValueError("(U * V - W) / T did not divide to zero")

        return U, V, W, H
