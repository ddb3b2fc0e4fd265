"""automodel - Model selection engine for coding agents.

Classifies a task description by task type and complexity, adjusts for plan
structure and session size, and resolves a primary model plus fallback chain
from a Strategy x TaskType x Complexity matrix.

Example:
    # Using CLI
    automodel check "refactor the payment module" --strategy cost-optimized
    automodel config init

    # Using Python
    from automodel import select_model
    result = select_model("fix typo in readme")
    print(result.primary_model, result.fallback_models)
"""

from typing import TYPE_CHECKING, Any

__version__ = "0.4.0"

if TYPE_CHECKING:
    from automodel.routing.engine import select_model

__all__ = ["__version__", "main", "select_model"]


def __getattr__(name: str) -> Any:
    if name == "select_model":
        from automodel.routing.engine import select_model

        return select_model
    raise AttributeError(f"module 'automodel' has no attribute {name!r}")


def main() -> None:
    """Main entry point for the automodel CLI.

    This function invokes the Typer app from automodel.cli.main.
    """
    from automodel.cli.main import app

    app()
