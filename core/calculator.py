# =============================================================================
# core/calculator.py  -  Expression Sanitizer & Arithmetic Evaluator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Evaluates plain arithmetic typed by a user or an LLM ("2 + 2",
#   "(3+4)*2", "10 / 4").
#
# TWO STAGES:
#   1. Sanitizer - a character filter.  Anything outside digits, the four
#      operators, ".", "(", ")" and space is rejected before any parsing
#      happens ("Invalid characters in expression").
#   2. Evaluator - a small recursive-descent parser over a fixed grammar:
#
#        expr   := term (('+' | '-') term)*
#        term   := unary (('*' | '/') unary)*
#        unary  := ('+' | '-') unary | atom
#        atom   := NUMBER | '(' expr ')'
#
#      User input never reaches eval() or any general code evaluator.
#
# DIVISION BY ZERO:
#   Not an error.  x/0 gives inf or -inf and 0/0 gives nan, which
#   format_number renders as "Infinity", "-Infinity" and "NaN".
# =============================================================================

import math
import re
from dataclasses import dataclass
from decimal import Decimal

from core.errors import ExpressionSyntaxError, InvalidCharactersError

_DISALLOWED = re.compile(r"[^0-9+\-*/.() ]")
_NUMBER = re.compile(r"\d+\.?\d*|\.\d+")


def sanitize(expression: str) -> str:
    """Strip every character outside ``[0-9+-*/.() ]``."""
    return _DISALLOWED.sub("", expression)


def check_expression(expression: str) -> str:
    """Return the expression unchanged, or raise if sanitizing would alter it."""
    if sanitize(expression) != expression:
        raise InvalidCharactersError()
    return expression


# -----------------------------------------------------------------------------
# Tokenizer
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class _Token:
    kind: str          # "num", "op", "lparen", "rparen", "end"
    text: str
    position: int      # 0-based column in the original expression


def _tokenize(expression: str) -> list[_Token]:
    tokens = []
    i = 0
    while i < len(expression):
        char = expression[i]
        if char == " ":
            i += 1
            continue
        if char in "+-*/":
            tokens.append(_Token("op", char, i))
            i += 1
        elif char == "(":
            tokens.append(_Token("lparen", char, i))
            i += 1
        elif char == ")":
            tokens.append(_Token("rparen", char, i))
            i += 1
        else:
            match = _NUMBER.match(expression, i)
            if match is None:
                raise ExpressionSyntaxError(f"Unexpected token {char!r}", i)
            tokens.append(_Token("num", match.group(), i))
            i = match.end()
    tokens.append(_Token("end", "", len(expression)))
    return tokens


# -----------------------------------------------------------------------------
# Parser / evaluator
# -----------------------------------------------------------------------------
class _Parser:
    def __init__(self, expression: str):
        self.tokens = _tokenize(expression)
        self.index = 0

    @property
    def current(self) -> _Token:
        return self.tokens[self.index]

    def _advance(self) -> _Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _unexpected(self) -> ExpressionSyntaxError:
        token = self.current
        if token.kind == "end":
            return ExpressionSyntaxError("Unexpected end of input", token.position)
        return ExpressionSyntaxError(f"Unexpected token {token.text!r}", token.position)

    def parse(self) -> float:
        value = self._expr()
        if self.current.kind != "end":
            raise self._unexpected()
        return value

    def _expr(self) -> float:
        value = self._term()
        while self.current.kind == "op" and self.current.text in "+-":
            op = self._advance().text
            right = self._term()
            value = value + right if op == "+" else value - right
        return value

    def _term(self) -> float:
        value = self._unary()
        while self.current.kind == "op" and self.current.text in "*/":
            op = self._advance().text
            right = self._unary()
            value = value * right if op == "*" else _divide(value, right)
        return value

    def _unary(self) -> float:
        if self.current.kind == "op" and self.current.text in "+-":
            op = self._advance().text
            operand = self._unary()
            return -operand if op == "-" else operand
        return self._atom()

    def _atom(self) -> float:
        token = self.current
        if token.kind == "num":
            self._advance()
            return float(token.text)
        if token.kind == "lparen":
            self._advance()
            value = self._expr()
            if self.current.kind != "rparen":
                raise self._unexpected()
            self._advance()
            return value
        raise self._unexpected()


def _divide(left: float, right: float) -> float:
    if right != 0:
        return left / right
    if left == 0 or math.isnan(left):
        return math.nan
    # Sign of zero matters: 1/-0 is -inf.
    return math.copysign(math.inf, left) * math.copysign(1.0, right)


def evaluate(expression: str) -> float:
    """Evaluate an arithmetic expression.

    Args:
        expression: Digits, ``+ - * /``, ``.``, parentheses and spaces.

    Returns:
        The numeric result as a float.

    Raises:
        InvalidCharactersError: the expression contains anything else.
        ExpressionSyntaxError: the characters are fine but the grammar is not.
    """
    check_expression(expression)
    return _Parser(expression).parse()


def format_number(value: float) -> str:
    """Render a result the way users expect to read it: ``4`` not ``4.0``.

    Plain decimal notation for 1e-6 <= |value| < 1e21, exponent notation
    with an explicit sign (``1e-7``, ``1.5e+21``) outside that range.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    shortest = repr(value)
    if 1e-6 <= abs(value) < 1e21:
        text = format(Decimal(shortest), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    mantissa, _, exponent = shortest.partition("e")
    power = int(exponent)
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def calculate(expression: str) -> str:
    """Evaluate and format as ``Result: {expression} = {value}``."""
    return f"Result: {expression} = {format_number(evaluate(expression))}"
