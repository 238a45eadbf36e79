import logging
import sys
from typing import Optional, TextIO

from deskcalc.errors import CalcError
from deskcalc.parser import Evaluator, ParserError
from deskcalc.tokenizer import PRINT, QUIT, EndOfInput, Symbol, TokenStream
from deskcalc.variables import VariableTable

logger = logging.getLogger("deskcalc.session")


class Session:
    """One read-evaluate-print run over a single input source.

    Every session has its own token stream; the variable table is created
    per session unless one is passed in to be shared.
    """

    def __init__(self, source: TextIO | str, variables: Optional[VariableTable] = None) -> None:
        self.tokens = TokenStream(source)
        self.variables = variables if variables is not None else VariableTable()
        self.evaluator = Evaluator(self.tokens, self.variables)
        self.finished = False
        self.quit_requested = False

    def step(self) -> Optional[float]:
        """Evaluate the next statement.

        Returns None once the input is exhausted or quit was requested. Errors
        from the statement propagate; call recover() before the next step.
        """
        if self.finished:
            return None

        token = self.tokens.get()
        while token == Symbol(PRINT):
            token = self.tokens.get()

        if token == Symbol(QUIT):
            logger.debug("Quit requested")
            self.finished = True
            self.quit_requested = True
            return None
        if isinstance(token, EndOfInput):
            logger.debug("End of input")
            self.finished = True
            return None

        self.tokens.putback(token)
        result = self.evaluator.statement()
        logger.debug("Statement evaluated to %s", result)
        return result

    def recover(self, error: Optional[CalcError] = None) -> None:
        """Skip to the end of the statement that raised error.

        A terminator the parser already read while reporting error is given
        back first, so only the broken statement is skipped.
        """
        if isinstance(error, ParserError) and error.found == Symbol(PRINT):
            self.tokens.putback(error.found)
        self.tokens.ignore(PRINT)

    def run(self, out: TextIO = sys.stdout, err: TextIO = sys.stderr, prompt: str = "") -> None:
        while not self.finished:
            if prompt:
                print(prompt, end="", file=out, flush=True)
            try:
                result = self.step()
            except CalcError as e:
                logger.debug("Recovering from %s", type(e).__name__)
                print(f"error: {e}", file=err)
                self.recover(e)
                continue
            if result is not None:
                print(f"= {result:g}", file=out)


def evaluate(code: str, variables: Optional[VariableTable] = None) -> list[float]:
    """Values of all statements in code; the first error is raised"""
    session = Session(code, variables=variables)
    results: list[float] = []
    while True:
        result = session.step()
        if result is None:
            return results
        results.append(result)
