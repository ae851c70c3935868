"""
Command-line calculator.

    lilg-calc "2 + 3 * 4"
    lilg-calc --precision 128 "pi"
    lilg-calc -- "-3 ^ 2"

Without an expression it reads expressions interactively until 'q'.
"""

import logging
from typing import Optional

import typer
from pydantic import ValidationError

from .calculator import Calculator
from .config import CalculatorConfig, get_log_level
from .errors import ExpressionError
from .grammar import GrammarStyle

logger = logging.getLogger(__name__)

QUIT_COMMAND = "q"

app = typer.Typer(help="Evaluate arithmetic expressions with arbitrary precision")


@app.command()
def calculate(
    expression: Optional[str] = typer.Argument(
        None, help="Expression to evaluate (prompts interactively when omitted)"
    ),
    precision: Optional[int] = typer.Option(
        None, "--precision", "-p", help="Significant digits used for evaluation"
    ),
    style: Optional[GrammarStyle] = typer.Option(
        None, "--style", "-s", help="Operator table (unary minus precedence)"
    ),
    digits: Optional[int] = typer.Option(
        None, "--digits", "-d", help="Significant digits shown in the result"
    ),
) -> None:
    """Evaluate EXPRESSION and print the result."""
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = CalculatorConfig.from_env(
            precision=precision, style=style, display_digits=digits
        )
    except ValidationError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=2)

    calculator = Calculator(config)

    if expression is not None:
        if not _run_once(calculator, expression):
            raise typer.Exit(code=1)
        return

    while True:
        line = typer.prompt(
            f"Enter the expression to calculate ({QUIT_COMMAND} to exit)"
        )
        if line.strip() == QUIT_COMMAND:
            return
        _run_once(calculator, line)


def _run_once(calculator: Calculator, expression: str) -> bool:
    try:
        result = calculator.calculate(expression)
    except ExpressionError as e:
        logger.info(
            "calculation_failed",
            extra={"expression": expression, "error_type": type(e).__name__},
        )
        typer.echo(e.format_with_context(), err=True)
        return False

    typer.echo(result)
    return True


def main() -> None:
    app()


if __name__ == "__main__":
    main()
