"""Recursive-descent parser for the intcalc language. Parsing needs one token of lookahead and never backtracks.

Formally, the intcalc grammar can be defined as

```
<program>    ::= (<assignment> ";")* <end-of-input>
<assignment> ::= <identifier> "=" <expr>            ; binds <identifier> as soon as <expr> is parsed
<expr>       ::= <term> (("+" | "-") <term>)*       ; left-associative
<term>       ::= <factor> ("*" <factor>)*           ; left-associative, binds tighter than "+"/"-"
<factor>     ::= "(" <expr> ")"
               | ("+" | "-") <factor>               ; right-recursive: ---x = -(-(-x))
               | <integer-literal>
               | <identifier>                       ; must already be bound
```

`/` and `=>` are valid tokens but appear in no rule, so they always end up as syntax errors.

run() interleaves parsing and evaluation one statement at a time: each assignment is executed before its terminator
is checked, and identifiers are resolved while they are parsed. Errors are therefore raised in source order, exactly
as if values were computed during the parse.
"""

from intcalc.lang.error import ParseError, SemanticError
from intcalc.lang.lexical import EOF, IDENTIFIER, LITERAL, OPERATOR, SEPARATOR, Token
from intcalc.lang.numerical import INT_BITS, parse_literal
from intcalc.lang.tree import BINARY, Assignment, Identifier, Literal, Unary


class Parser:
    """Builds Assignment trees from a token list. If namespace is given, identifiers are checked against it as they
    are parsed.
    """

    def __init__(self, tokens, namespace=None, bits=INT_BITS):
        assert tokens and tokens[-1].kind == EOF, "token list must end with end-of-input"
        self.tokens = tokens
        self.namespace = namespace
        self.bits = bits
        self.pos = 0

    def peek(self):
        return self.tokens[self.pos]

    def advance(self):
        token = self.tokens[self.pos]
        if token.kind != EOF:  # end-of-input is sticky
            self.pos += 1
        return token

    def check(self, kind, *values):
        """Whether the current token has kind (and one of values, if any are given)."""
        token = self.peek()
        return token.kind == kind and (not values or token.value in values)

    def expect(self, kind, value=None):
        """Consumes and returns the current token if it matches kind/value, otherwise raises a ParseError."""
        token = self.peek()
        if token.kind != kind or (value is not None and token.value != value):
            expected = Token(kind, value).describe() if value is not None else kind
            raise ParseError.at(token, "expected {}, found {}", (expected, token.describe()))
        return self.advance()

    def statements(self):
        """Yields each Assignment in the program. Terminators are checked after the consumer resumes the generator."""
        while not self.check(EOF):
            yield self.assignment()
            self.expect(SEPARATOR, ";")

    def assignment(self):
        token = self.peek()
        if token.kind != IDENTIFIER:
            raise ParseError.at(token, "expected identifier, found {}", token.describe())
        self.advance()

        self.expect(OPERATOR, "=")
        return Assignment(token.value, self.expr(), token)

    def expr(self):
        node = self.term()
        while self.check(OPERATOR, "+", "-"):
            token = self.advance()
            node = BINARY[token.value](node, self.term(), token=token)
        return node

    def term(self):
        node = self.factor()
        while self.check(OPERATOR, "*"):
            token = self.advance()
            node = BINARY[token.value](node, self.factor(), token=token)
        return node

    def factor(self):
        token = self.advance()

        if token.kind == SEPARATOR and token.value == "(":
            node = self.expr()
            self.expect(SEPARATOR, ")")
            return node

        elif token.kind == OPERATOR and token.value in ("+", "-"):
            return Unary(token.value, self.factor(), token=token)

        elif token.kind == LITERAL:
            return Literal(parse_literal(token.value, self.bits), token=token)

        elif token.kind == IDENTIFIER:
            if self.namespace is not None and token.value not in self.namespace:
                raise SemanticError.at(token, "uninitialized variable {}", token.value)
            return Identifier(token.value, token=token)

        elif token.kind == EOF:
            raise ParseError.at(token, "unexpected end of input")
        raise ParseError.at(token, "unexpected token '{}'", token.value)


def parse(tokens, bits=INT_BITS):
    """Returns list of Assignments in tokens without evaluating them. Unbound identifiers are not reported."""
    return list(Parser(tokens, bits=bits).statements())


def run(tokens, namespace=None, bits=INT_BITS, overflow=None):
    """Parses and evaluates tokens statement by statement. Bindings are written into namespace (a new dict if None),
    which is returned. namespace is left partially updated if an error is raised.
    """
    if namespace is None:
        namespace = {}

    for stmt in Parser(tokens, namespace, bits).statements():
        stmt.execute(namespace, bits, overflow)

    return namespace
