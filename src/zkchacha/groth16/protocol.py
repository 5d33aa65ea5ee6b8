from ..ecc import EllipticCurve
from ..qap import QAP
from ..r1cs import R1CS
from ..utils import get_random_int
from .serialization import Proof, ProvingKey, VerifyingKey


class Groth16:
    """
    Groth16 proof system (https://eprint.iacr.org/2016/260.pdf)

    Args:
        r1cs: R1CS to be set up from
        curve: `BN254` (alias `BN128`, `ALT_BN128`)
    """

    def __init__(self, r1cs: R1CS, curve: str = "BN254"):
        self.E = EllipticCurve(curve)
        self.order = self.E.order
        self.qap = QAP(self.order)
        self.qap.from_r1cs(r1cs)

        self.proving_key = None
        self.verifying_key = None

    def setup(self, rng=None):
        """
        Trusted setup to generate `ProvingKey` and `VerifyingKey`

        Args:
            rng: source of the toxic waste. A seeded `random.Random` makes the
                keys reproducible, anyone knowing the seed can forge proofs.
                Defaults to the OS CSPRNG.
        """
        G1 = self.E.G1()
        G2 = self.E.G2()

        # generate toxic waste
        tau = get_random_int(self.order - 1, rng)
        alpha = get_random_int(self.order - 1, rng)
        beta = get_random_int(self.order - 1, rng)
        gamma = get_random_int(self.order - 1, rng)
        delta = get_random_int(self.order - 1, rng)

        inv_gamma = pow(gamma, -1, self.order)
        inv_delta = pow(delta, -1, self.order)

        alpha_G1 = G1 * alpha
        beta_G1 = G1 * beta
        beta_G2 = G2 * beta
        gamma_G2 = G2 * gamma
        delta_G1 = G1 * delta
        delta_G2 = G2 * delta

        n_constraints = self.qap.n_constraints
        U, V, W = self.qap.evaluate_columns(tau)

        K = [(u * beta + v * alpha + w) % self.order for u, v, w in zip(U, V, W)]

        t = self.qap.T(tau)

        power_of_tau = [pow(tau, i, self.order) for i in range(n_constraints)]
        tau_G1 = self.E.batch_mul(G1, power_of_tau)
        tau_G2 = self.E.batch_mul(G2, power_of_tau)

        # H has degree at most n - 2
        tau_div_delta = [
            power_of_tau[i] * t * inv_delta % self.order
            for i in range(n_constraints - 1)
        ]
        target_G1 = self.E.batch_mul(G1, tau_div_delta)

        k_gamma = [k * inv_gamma % self.order for k in K[: self.qap.n_public]]
        k_delta = [k * inv_delta % self.order for k in K[self.qap.n_public :]]

        k_gamma_G1 = self.E.batch_mul(G1, k_gamma)
        k_delta_G1 = self.E.batch_mul(G1, k_delta)

        self.proving_key = ProvingKey(
            alpha_G1,
            beta_G1,
            beta_G2,
            delta_G1,
            delta_G2,
            tau_G1,
            tau_G2,
            target_G1,
            k_delta_G1,
        )
        self.verifying_key = VerifyingKey(alpha_G1, beta_G2, gamma_G2, delta_G2, k_gamma_G1)

        return self.proving_key, self.verifying_key

    def _msm(self, points: list, scalars: list, zero):
        if any(scalars[len(points) :]):
            raise ValueError("Polynomial degree exceeds the size of the setup")

        scalars = scalars[: len(points)]
        if not any(scalars):
            return zero

        scalars = scalars + [0] * (len(points) - len(scalars))
        return self.E.multiexp(points, scalars)

    def prove(self, public_witness: list, private_witness: list) -> Proof:
        """
        Prove statement from R1CS by providing public and private witness
        """
        assert self.proving_key, "ProvingKey has not been generated"

        assert len(self.proving_key.kdelta_1) == len(
            private_witness
        ), "Length of kdelta_1 and private_witness must be equal"

        r = get_random_int(self.order - 1)
        s = get_random_int(self.order - 1)

        try:
            U, V, _, H = self.qap.evaluate_witness(public_witness + private_witness)
        except ValueError as exc:
            raise ValueError("Failed to evaluate with the given witness") from exc

        pk = self.proving_key
        zero_G1 = self.E.zero_G1()
        zero_G2 = self.E.zero_G2()

        A = self._msm(pk.tau_1, U.coeffs(), zero_G1) + pk.alpha_1 + (pk.delta_1 * r)
        B1 = self._msm(pk.tau_1, V.coeffs(), zero_G1) + pk.beta_1 + (pk.delta_1 * s)
        B2 = self._msm(pk.tau_2, V.coeffs(), zero_G2) + pk.beta_2 + (pk.delta_2 * s)
        HZ = self._msm(pk.target_1, H.coeffs(), zero_G1)

        sum_delta_witness = self._msm(pk.kdelta_1, list(private_witness), zero_G1)

        C = (
            HZ
            + sum_delta_witness
            + (A * s)
            + (B1 * r)
            + (-pk.delta_1 * (r * s % self.order))
        )

        return Proof(A, B2, C)

    def verify(self, proof: Proof, public_witness: list) -> bool:
        """
        Verify proof by providing public witness
        """
        assert self.verifying_key, "VerifyingKey has not been generated"
        return verify(self.verifying_key, proof, public_witness, self.E)


def verify(key: VerifyingKey, proof: Proof, public_witness: list, E=None) -> bool:
    """
    Check a proof against a verifying key alone, without the circuit
    """
    E = E or EllipticCurve("BN254")
    assert len(key.ic) == len(
        public_witness
    ), "Length of IC and public_witness must be equal"

    sum_gamma_witness = E.multiexp(key.ic, public_witness)

    # e(A, B) == e(alpha, beta) * e(sum_gamma_witness, gamma) * e(C, delta)
    return E.pairing(proof.A, proof.B) == E.multi_pairing(
        [key.alpha_1, sum_gamma_witness, proof.C],
        [key.beta_2, key.gamma_2, key.delta_2],
    )
