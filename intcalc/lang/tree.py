"""Expression trees for the intcalc language. Every node evaluates to a fixed-width integer (see numerical.py), and
evaluation is a single post-order walk: there is no reduction or rewriting step.

```
<expr> ::= <literal>                ; "Literal"
         | <identifier>             ; "Identifier", looked up in the namespace
         | ("+" | "-") <expr>       ; "Unary", right-recursive: ---x = -(-(-x))
         | <expr> "+" <expr>        ; "Add"
         | <expr> "-" <expr>        ; "Sub"
         | <expr> "*" <expr>        ; "Mul"
```

Binary nodes always have two children; chains such as `a - b - c` are folded by the parser into left-leaning trees:
`Sub(Sub(a, b), c)`. A flat chain of n terms is n levels deep, so every whole-tree operation (evaluate, expr, repr,
display, comparison) goes through walk() instead of recursing.
"""

from abc import abstractmethod, ABC

from intcalc.lang.error import SemanticError
from intcalc.lang.numerical import INT_BITS, wrap


class Expr(ABC):
    """Superclass that represents any node of an expression tree."""
    symbol = None

    def __init__(self, *nodes, token=None):
        self.nodes = list(nodes)
        self.token = token  # used for error messages, never compared
        self._cls = type(self).__name__

    @abstractmethod
    def compute(self, values, namespace):
        """This method should combine the already-evaluated values of self.nodes (or look itself up in namespace) into
        an unwrapped Python int.
        """

    @abstractmethod
    def format(self, parts):
        """This method should return the source form of self given the source forms of self.nodes."""

    def key(self):
        """What distinguishes self from other nodes with the same children."""
        return self._cls, self.symbol

    def walk(self):
        """Yields every node of the tree in post-order (children before parents), without recursion."""
        stack = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded or not node.nodes:
                yield node
            else:
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(node.nodes))

    def fold(self, func):
        """Calls func(node, results of node.nodes) for every node in post-order, returning the result for self."""
        results = []
        for node in self.walk():
            split = len(results) - len(node.nodes)
            args = results[split:]
            del results[split:]
            results.append(func(node, args))
        return results[0]

    def evaluate(self, namespace, bits=INT_BITS, overflow=None):
        """Evaluates tree against namespace (name: value). If a result had to be wrapped to fit bits, overflow is
        called with the offending node.
        """

        def _evaluate(node, values):
            exact = node.compute(values, namespace)
            value = wrap(exact, bits)
            if value != exact and node.nodes and overflow is not None:
                overflow(node)
            return value

        return self.fold(_evaluate)

    @property
    def expr(self):
        """Fully parenthesized source form of self."""
        return self.fold(lambda node, parts: node.format(parts))

    def display(self, indents=0):
        """Displays Expr tree with readable format.

        Format:
        <Expr>(expr='<expr>', nodes=[
            <Expr>(expr='<expr>', nodes=[
                ...
                <Expr>(expr='<expr>')  # <-- if nodes is empty
            ])
        ])
        """

        def _display(node, children):
            expr = node.format([child_expr for child_expr, __ in children])
            lines = [f"{node._cls}(expr='{expr}'"]
            if children:
                lines[0] += ", nodes=["
                for __, child_lines in children:
                    lines.extend("    " + line for line in child_lines)
                    lines[-1] += ","
                lines[-1] = lines[-1][:-1]
                lines.append("]")
            lines[-1] += ")"
            return expr, lines

        return "\n".join("    " * indents + line for line in self.fold(_display)[1])

    def __repr__(self):
        return self.fold(lambda node, parts: f"{node._cls}({', '.join(node.key()[2:] + tuple(parts))})")

    def __str__(self):
        return self.expr

    def __eq__(self, other):
        if not isinstance(other, Expr):
            return False
        shape = [(node.key(), len(node.nodes)) for node in self.walk()]
        return shape == [(node.key(), len(node.nodes)) for node in other.walk()]

    def __hash__(self):
        return hash(tuple(node.key() for node in self.walk()))


class Literal(Expr):

    def __init__(self, value, token=None):
        super().__init__(token=token)
        self.value = value

    def compute(self, values, namespace):
        return self.value

    def format(self, parts):
        return str(self.value)

    def key(self):
        return self._cls, None, str(self.value)


class Identifier(Expr):

    def __init__(self, name, token=None):
        super().__init__(token=token)
        self.name = name

    def compute(self, values, namespace):
        if self.name not in namespace:
            if self.token is not None:
                raise SemanticError.at(self.token, "uninitialized variable {}", self.name)
            raise SemanticError("uninitialized variable {}", self.name)
        return namespace[self.name]

    def format(self, parts):
        return self.name

    def key(self):
        return self._cls, None, f"'{self.name}'"


class Unary(Expr):
    """Sign applied to a single operand."""

    def __init__(self, sign, operand, token=None):
        assert sign in ("+", "-"), f"{sign} is not a unary sign"
        super().__init__(operand, token=token)
        self.symbol = sign

    def compute(self, values, namespace):
        return -values[0] if self.symbol == "-" else values[0]

    def format(self, parts):
        return f"{self.symbol}{parts[0]}"

    def key(self):
        return self._cls, self.symbol, f"'{self.symbol}'"


class Binary(Expr):
    """Operator applied to two operands."""

    def format(self, parts):
        return f"({parts[0]} {self.symbol} {parts[1]})"


class Add(Binary):
    symbol = "+"

    def compute(self, values, namespace):
        return values[0] + values[1]


class Sub(Binary):
    symbol = "-"

    def compute(self, values, namespace):
        return values[0] - values[1]


class Mul(Binary):
    symbol = "*"

    def compute(self, values, namespace):
        return values[0] * values[1]


BINARY = {cls.symbol: cls for cls in (Add, Sub, Mul)}


class Assignment:
    """Binding statement in intcalc: <NAME> = <expr>."""

    def __init__(self, name, value, token=None):
        self.name = name
        self.value = value
        self.token = token

    def execute(self, namespace, bits=INT_BITS, overflow=None):
        """Evaluates self.value and binds it to self.name in namespace (overwriting any previous value). Returns the
        bound value.
        """
        namespace[self.name] = self.value.evaluate(namespace, bits, overflow)
        return namespace[self.name]

    @property
    def expr(self):
        return f"{self.name} = {self.value.expr}"

    def __repr__(self):
        return f"{type(self).__name__}('{self.name}', {self.value!r})"

    def __str__(self):
        return self.expr

    def __eq__(self, other):
        return isinstance(other, Assignment) and (self.name, self.value) == (other.name, other.value)

    def __hash__(self):
        return hash((self.name, self.value))
