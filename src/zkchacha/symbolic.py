class Symbol:
    def __init__(self, name):
        self.name = name
        self.left = None
        self.right = None
        self.op = "VAR"

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()

    def __eq__(self, other):
        if isinstance(self, Symbol) and self.op == "VAR":
            return Equation(self, other)
        if isinstance(other, Symbol) and other.op == "VAR":
            return Equation(other, self)
        if isinstance(other, int):
            return Equation(other, self)

        raise ValueError("Invalid constraint")

    __hash__ = None

    def __add__(self, other):
        return Add(self, other)

    def __radd__(self, other):
        return Add(other, self)

    def __sub__(self, other):
        return Subtract(self, other)

    def __rsub__(self, other):
        return Subtract(other, self)

    def __mul__(self, other):
        return Multiply(self, other)

    def __rmul__(self, other):
        return Multiply(other, self)

    def __pow__(self, other):
        raise NotImplementedError(
            "Integer power is not supported. Consider converting power to multiplication."
        )


Var = Symbol


class Add(Symbol):
    def __init__(self, left, right):
        super().__init__(f"({left} + {right})")
        self.left = left
        self.right = right
        self.op = "ADD"


class Subtract(Symbol):
    def __init__(self, left, right):
        super().__init__(f"({left} - {right})")
        self.left = left
        self.right = right
        self.op = "SUB"


class Multiply(Symbol):
    def __init__(self, left, right):
        if isinstance(left, Symbol) and isinstance(right, int):
            left, right = right, left

        super().__init__(f"{left}*{right}")
        self.left = left
        self.right = right
        self.op = "MUL"


class Equation(Symbol):
    def __init__(self, left, right):
        super().__init__(f"{left} = {right}")
        self.left = left
        self.right = right
        self.op = "EQ"

    def __add__(self, other):
        raise ValueError("Equation cannot be added")

    def __sub__(self, other):
        raise ValueError("Equation cannot be subtracted")

    def __mul__(self, other):
        raise ValueError("Equation cannot be multiplied")

    __radd__ = __add__
    __rsub__ = __sub__
    __rmul__ = __mul__


def symeval(stmt, var_map: dict, p: int) -> int:
    """
    Literal eval of Symbol object. `var_map` must be provided
    with all variables defined in the equation.

    Args:
        stmt: Symbol expression to be evaluated
        var_map: Key-value mapping of all variables defined in the Symbol
        p: Prime modulus to be used in the arithmetic operation
    """
    if isinstance(stmt, int):
        return stmt % p

    if stmt.op == "VAR":
        value = var_map.get(stmt.name)
        if value is None:
            raise ValueError(f"Value of {stmt} is not found in variable mapping")
        return value % p

    left = symeval(stmt.left, var_map, p)
    right = symeval(stmt.right, var_map, p)

    if stmt.op == "ADD":
        return (left + right) % p
    if stmt.op == "SUB":
        return (left - right) % p
    if stmt.op == "MUL":
        return (left * right) % p

    raise ValueError(f"Invalid operation at {stmt}")
