"""Recursive-descent evaluator for the calculator grammar.

    Statement:
        Declaration
        Expression
    Declaration:
        "let" Identifier "=" Expression
    Expression:
        Term
        Expression "+" Term
        Expression "-" Term
    Term:
        Primary
        Term "*" Primary
        Term "/" Primary
        Term "%" Primary
    Primary:
        Number
        Identifier
        "(" Expression ")"
        "-" Primary
        "+" Primary

Each production is a method that reads tokens and returns the value it
denotes; there is no intermediate syntax tree.
"""

import math
from dataclasses import dataclass

from deskcalc.errors import CalcError
from deskcalc.tokenizer import EndOfInput, Identifier, Keyword, LET, Number, Symbol, Token, TokenStream
from deskcalc.variables import VariableTable


@dataclass
class ParserError(CalcError):
    found: Token

    expected = "token"

    def __str__(self) -> str:
        if isinstance(self.found, EndOfInput):
            found = "end of input"
        else:
            found = repr(self.found.lexeme)
        return f"{self.expected} expected, found {found}"


class PrimaryExpected(ParserError):
    expected = "Primary"


class CloseParenExpected(ParserError):
    expected = "')'"


class NameExpected(ParserError):
    expected = "Name in declaration"


class AssignExpected(ParserError):
    expected = "'=' in declaration"


@dataclass
class DivisionByZero(CalcError):
    dividend: float

    def __str__(self) -> str:
        return f"Division by zero: {self.dividend:g} / 0"


@dataclass
class RemainderByZero(CalcError):
    dividend: float

    def __str__(self) -> str:
        return f"Remainder by zero: {self.dividend:g} % 0"


class Evaluator:
    def __init__(self, tokens: TokenStream, variables: VariableTable) -> None:
        self.tokens = tokens
        self.variables = variables

    def statement(self) -> float:
        token = self.tokens.get()
        if token == Keyword(LET):
            return self.declaration()
        self.tokens.putback(token)
        return self.expression()

    def declaration(self) -> float:
        """Assumes "let" has already been read"""
        token = self.tokens.get()
        if not isinstance(token, Identifier):
            raise NameExpected(token)
        name = token.name

        token = self.tokens.get()
        if token != Symbol("="):
            raise AssignExpected(token)

        value = self.expression()
        return self.variables.declare(name, value)

    def expression(self) -> float:
        left = self.term()
        token = self.tokens.get()
        while True:
            if token == Symbol("+"):
                left += self.term()
            elif token == Symbol("-"):
                left -= self.term()
            else:
                self.tokens.putback(token)
                return left
            token = self.tokens.get()

    def term(self) -> float:
        left = self.primary()
        token = self.tokens.get()
        while True:
            if token == Symbol("*"):
                left *= self.primary()
            elif token == Symbol("/"):
                divisor = self.primary()
                if divisor == 0:
                    raise DivisionByZero(left)
                left /= divisor
            elif token == Symbol("%"):
                divisor = self.primary()
                if divisor == 0:
                    raise RemainderByZero(left)
                left = math.fmod(left, divisor)
            else:
                self.tokens.putback(token)
                return left
            token = self.tokens.get()

    def primary(self) -> float:
        token = self.tokens.get()
        if isinstance(token, Number):
            return token.value
        elif isinstance(token, Identifier):
            return self.variables.lookup(token.name)
        elif token == Symbol("("):
            value = self.expression()
            token = self.tokens.get()
            if token != Symbol(")"):
                raise CloseParenExpected(token)
            return value
        elif token == Symbol("-"):
            return -self.primary()
        elif token == Symbol("+"):
            return self.primary()
        else:
            raise PrimaryExpected(token)
