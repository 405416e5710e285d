"""Lexical analysis for the intcalc language. Converts a whole program into a list of Tokens in one pass: there is no
lazy generation, and the list always ends with exactly one end-of-input token.

Lexemes can be loosely defined as follows (tried in this order, after skipping whitespace):

```
<arrow>      ::= "=>"                       ; recognized, but no grammar rule uses it
<single>     ::= "-" | "+" | "*" | "/" | "=" | "(" | ")" | ";"
<literal>    ::= <digit>+                   ; no leading zeros unless the literal is exactly "0"
<identifier> ::= (<letter> | <digit> | "_")+
<other>      ::= <char>                     ; always an error
```
"""

from dataclasses import dataclass
import re

from intcalc.lang.error import LexError
from intcalc.lang.numerical import INT_BITS, parse_literal


EOF = "end-of-input"
IDENTIFIER = "identifier"
LITERAL = "integer-literal"
OPERATOR = "operator"
SEPARATOR = "bracket-or-separator"

OPERATORS = ("=>", "-", "+", "*", "/", "=")
SEPARATORS = ("(", ")", ";")

WHITESPACE = re.compile(r"\s*", re.ASCII)
LEXEME = re.compile(r"=>|[-+*/=();]|\d+|\w+|.", re.ASCII | re.DOTALL)


@dataclass(frozen=True)
class Token:
    """Classified lexical unit. line and col are 1-based and point at the first character of value."""
    kind: str
    value: str
    line: int = 0
    col: int = 0

    def describe(self):
        """Human-readable form used in error messages."""
        if self.kind == EOF:
            return "end of input"
        return f"{self.kind} '{self.value}'"

    def __str__(self):
        return self.value


def classify(lexeme):
    """Returns the token kind of lexeme, or None if lexeme is not a valid token."""
    if re.fullmatch(r"\d+", lexeme, re.ASCII):
        return LITERAL
    elif lexeme in OPERATORS:
        return OPERATOR
    elif lexeme in SEPARATORS:
        return SEPARATOR
    elif re.fullmatch(r"\w+", lexeme, re.ASCII):
        return IDENTIFIER
    return None


def tokenize(source, bits=INT_BITS):
    """Tokenizes source. Raises LexError on the first lexeme that is not a valid token, or on an invalid literal."""
    tokens = []
    pos = 0
    line, line_start = 1, 0

    while True:
        skipped = WHITESPACE.match(source, pos).end()
        line += source.count("\n", pos, skipped)
        if "\n" in source[pos:skipped]:
            line_start = source.rindex("\n", pos, skipped) + 1
        pos = skipped

        if pos == len(source):
            break

        lexeme = LEXEME.match(source, pos).group()
        token = Token(classify(lexeme), lexeme, line, pos - line_start + 1)

        if token.kind is None:
            raise LexError.at(token, "unexpected token '{}'", lexeme)
        elif token.kind == LITERAL:
            try:
                parse_literal(lexeme, bits)
            except ValueError as error:
                raise LexError.at(token, str(error) + " '{}'", lexeme)

        tokens.append(token)
        pos += len(lexeme)

    tokens.append(Token(EOF, "", line, pos - line_start + 1))
    return tokens
