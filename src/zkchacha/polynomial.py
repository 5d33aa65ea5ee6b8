class PolynomialRing:
    def __init__(self, coeffs, p):
        """
        Initialize the polynomial with coefficients.

        coeffs: List of coefficients, where coeffs[i] is the coefficient of x^i.
        p: Prime number representing the finite field.
        """
        self.__coeffs = [int(coeff) % p for coeff in coeffs] or [0]
        self.p = p

    def coeffs(self):
        """Return the list of coefficents of the polynomial."""
        return self.__coeffs

    def degree(self):
        """Return the degree of the polynomial."""
        return len(self.__coeffs) - 1

    def is_zero(self):
        """Return the boolean whether the polynomial is equal to zero"""
        return all(c == 0 for c in self.__coeffs)

    def __bool__(self):
        return not self.is_zero()

    def __eq__(self, other):
        if not isinstance(other, PolynomialRing):
            return False
        return (self - other).is_zero()

    def __repr__(self):
        return f"PolynomialRing({self.__coeffs}, {self.p})"

    def __add__(self, other):
        if isinstance(other, int):
            coeffs = self.coeffs()[:]
            coeffs[0] += other

            return PolynomialRing(coeffs, self.p)

        max_degree = max(self.degree(), other.degree())
        result_coeffs = [
            (self.coeffs()[i] if i <= self.degree() else 0)
            + (other.coeffs()[i] if i <= other.degree() else 0)
            for i in range(max_degree + 1)
        ]
        return PolynomialRing(result_coeffs, self.p)

    def __radd__(self, other):
        return self.__add__(other)

    def __neg__(self):
        return PolynomialRing([-c for c in self.coeffs()], self.p)

    def __sub__(self, other):
        return self + (-other)

    def __rsub__(self, other):
        return (-self) + other

    def __mul__(self, other):
        if isinstance(other, int):
            return PolynomialRing([c * other for c in self.coeffs()], self.p)

        result_coeffs = [0] * (self.degree() + other.degree() + 1)
        for i, a in enumerate(self.coeffs()):
            for j, b in enumerate(other.coeffs()):
                result_coeffs[i + j] = (result_coeffs[i + j] + a * b) % self.p

        return PolynomialRing(result_coeffs, self.p)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        """
        Divide two polynomials.
        Return quotient and remainder
        """
        if other.is_zero():
            raise ZeroDivisionError("Division by zero")

        divisor = other.coeffs()[:]
        while divisor[-1] == 0:
            divisor.pop()

        n = len(divisor) - 1
        if self.degree() < n:
            return PolynomialRing([0], self.p), PolynomialRing(self.coeffs(), self.p)

        dividend = self.coeffs()[:]
        quotient = [0] * (self.degree() - n + 1)
        inv_lead = pow(divisor[n], -1, self.p)

        for k in reversed(range(len(quotient))):
            quotient[k] = dividend[n + k] * inv_lead % self.p
            for j in range(k, n + k + 1):
                dividend[j] = (dividend[j] - quotient[k] * divisor[j - k]) % self.p

        remainder = dividend[:n]

        return PolynomialRing(quotient, self.p), PolynomialRing(remainder, self.p)

    def __call__(self, point: int) -> int:
        """Evaluate the polynomial at point"""
        result = 0
        for c in reversed(self.coeffs()):
            result = (result * point + c) % self.p
        return result


def evaluation_domain(n: int):
    """Points `1, 2, ..., n` where the constraints are interpolated"""
    return list(range(1, n + 1))


def lagrange_polynomial(x, w, p):
    """Return Lagrange interpolating polynomial through points `(x, w)` over Fp"""
    poly = PolynomialRing([0], p)
    for j, x_j in enumerate(x):
        if w[j] % p == 0:
            continue

        basis = PolynomialRing([1], p)
        denominator = 1
        for k, x_k in enumerate(x):
            if k == j:
                continue
            basis *= PolynomialRing([-x_k, 1], p)
            denominator = denominator * (x_j - x_k) % p

        poly += basis * (w[j] * pow(denominator, -1, p) % p)

    return poly


def vanishing_polynomial(degree: int, p: int):
    """Generate polynomial `T = (x - 1) * (x - 2) * (x - 3) ... (x - n)`"""
    poly = PolynomialRing([1], p)
    for i in evaluation_domain(degree):
        poly *= PolynomialRing([-i, 1], p)

    return poly


def evaluate_lagrange_coefficients(n: int, x: int, p: int):
    """
    Evaluate all the lagrange basis polynomials of the domain `1..n` at the point `x`.
    """
    domain = evaluation_domain(n)
    coeffs = []
    for j, x_j in enumerate(domain):
        num, den = 1, 1
        for k, x_k in enumerate(domain):
            if k == j:
                continue
            num = num * (x - x_k) % p
            den = den * (x_j - x_k) % p
        coeffs.append(num * pow(den, -1, p) % p)

    return coeffs
