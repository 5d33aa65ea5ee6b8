from __future__ import annotations

from .symbolic import Equation, Symbol, symeval


class R1CS:
    """
    Compiled rank-1 constraint system: `(A.w) * (B.w) == (C.w)` row by row,
    where `w = [1] + public + private` and the first `n_public` entries of `w`
    are public.
    """

    def __init__(self, A: list, B: list, C: list, n_public: int):
        self.A = A
        self.B = B
        self.C = C
        self.n_public = n_public

    @property
    def n_constraints(self):
        return len(self.A)

    @property
    def n_witness(self):
        return len(self.A[0])

    def is_satisfied(self, witness: list, p: int) -> bool:
        for a, b, c in zip(self.A, self.B, self.C):
            left = sum(x * y for x, y in zip(a, witness)) % p
            right = sum(x * y for x, y in zip(b, witness)) % p
            out = sum(x * y for x, y in zip(c, witness)) % p
            if left * right % p != out:
                return False
        return True


class ConstraintSystem:
    def __init__(self, inputs: list, output, p: int):
        """
        Args:
            inputs: input variables, as `str` or `Symbol`
            output: output variable, as `str` or `Symbol`
            p: prime modulus of the scalar field
        """
        self.vars = {}
        self.constraints = []
        self.public = []
        self.p = p

        self.inputs = [x.name if isinstance(x, Symbol) else x for x in inputs]
        self.output = output.name if isinstance(output, Symbol) else output

    def __add_var(self, eq):
        if isinstance(eq, int):
            return

        if eq.op == "VAR":
            if eq.name not in self.vars:
                self.vars[eq.name] = None
        else:
            self.__add_var(eq.left)
            self.__add_var(eq.right)

    def __transform(self, eq, witness, vec, is_neg=False):
        if isinstance(eq, int):
            vec[0] = (vec[0] + (-eq if is_neg else eq)) % self.p
            return

        if eq.op == "VAR":
            index = witness.index(eq.name)
            vec[index] = (vec[index] + (-1 if is_neg else 1)) % self.p
        elif eq.op == "ADD":
            self.__transform(eq.left, witness, vec, is_neg)
            self.__transform(eq.right, witness, vec, is_neg)
        elif eq.op == "SUB":
            self.__transform(eq.left, witness, vec, is_neg)
            self.__transform(eq.right, witness, vec, not is_neg)
        elif eq.op == "MUL":
            l, r = eq.left, eq.right
            if isinstance(l, Symbol) and isinstance(r, Symbol):
                raise ValueError(f"Multiple multiplication occur at {eq}")
            if isinstance(r, int):
                l, r = r, l

            index = witness.index(r.name)
            vec[index] = (vec[index] + (-l if is_neg else l)) % self.p
        else:
            raise ValueError(f"Invalid operation at {eq}")

    def __get_witness_vector(self):
        # public entries keep the order they were declared in
        public_input = list(dict.fromkeys(self.public))
        private_input = [
            v for v in self.vars if v in self.inputs and v not in self.public
        ]
        intermediate_vars = [
            v
            for v in self.vars
            if v not in self.inputs and v != self.output and v not in self.public
        ]
        output = [] if self.output in self.public else [self.output]

        return [1] + public_input + output + private_input + intermediate_vars

    def __add_dummy_constraints(self):
        """
        Add dummy constraints to prevent proof malleability from unused public input
        See: https://geometry.xyz/notebook/groth16-malleability
        """
        for public in self.public:
            if public not in self.vars:
                var = Symbol(public)
                eq = 0 == var * 0
                self.constraints.append(eq)
                self.__add_var(eq)

    def add_constraint(self, eq: Equation):
        """
        Add new constraint to the system.

        Args:
            eq: Equation to be added to the constraint system
        """
        if not isinstance(eq, Equation):
            raise TypeError(f"Constraint must be an Equation, got {type(eq)}")

        self.constraints.append(eq)
        self.__add_var(eq)

    def set_public(self, public_vars):
        """
        Set variable(s) in the constraint system to be public.

        Args:
            public_vars: One or more variables in `str` or `Symbol` which will be made public
        """
        if not isinstance(public_vars, list):
            public_vars = [public_vars]

        for var in public_vars:
            if isinstance(var, str):
                self.public.append(var)
            elif isinstance(var, Symbol):
                self.public.append(var.name)
            else:
                raise TypeError(f"Invalid type of {var}")

    def compile(self) -> R1CS:
        """Compile the constraints into R1CS matrices"""
        self.__add_dummy_constraints()
        witness = self.__get_witness_vector()

        row_length = len(witness)
        A, B, C = [], [], []

        for constraint in self.constraints:
            a = [0] * row_length
            b = [0] * row_length
            c = [0] * row_length

            left, right = constraint.left, constraint.right

            if isinstance(right, Symbol) and right.op == "MUL":
                self.__transform(right.left, witness, a)
                self.__transform(right.right, witness, b)
            else:
                # linear constraint: (right) * 1 == left
                self.__transform(right, witness, a)
                b[0] = 1

            self.__transform(left, witness, c)

            A.append(a)
            B.append(b)
            C.append(c)

        return R1CS(A, B, C, len(set(self.public)) + 1)

    def solve(self, input_values: dict) -> tuple[list, list]:
        """
        Assign inputs, derive every other variable and check all constraints

        Args:
            input_values: Mapping of input variables and values

        Returns:
            witness: Tuple of (public_witness, private_witness)
        """
        if set(input_values) != set(self.inputs):
            raise ValueError("Input values differ with input variables")

        self.__add_dummy_constraints()
        witness = self.__get_witness_vector()

        values = {k: None for k in self.vars}
        for inp in self.inputs:
            values[inp] = input_values[inp] % self.p

        for constraint in self.constraints:
            left, right = constraint.left, constraint.right
            evaluated = symeval(right, values, self.p)

            if isinstance(left, Symbol) and left.op == "VAR" and values[left.name] is None:
                values[left.name] = evaluated
            elif symeval(left, values, self.p) != evaluated:
                raise ValueError(f"Constraint is not satisfied: {constraint}")

        w = [v if isinstance(v, int) else values[v] for v in witness]
        n_public = len(set(self.public)) + 1

        return w[:n_public], w[n_public:]
