from __future__ import annotations

import json
from importlib import resources

from .models import Example

DEFAULT_EXAMPLE = "euler"


class ExampleNotFoundError(LookupError):
    """Raised when no packaged example has the requested name."""


def load_example(name: str = DEFAULT_EXAMPLE) -> Example:
    resource = resources.files("math_pipeline").joinpath("resources", "examples", f"{name}.json")
    if not name.isidentifier() or not resource.is_file():
        raise ExampleNotFoundError(f"No example named {name!r}")
    data = json.loads(resource.read_text(encoding="utf-8"))
    return Example(
        name=name,
        title=str(data.get("title", name)),
        latex=str(data["latex"]),
        mathml1=str(data["mathml1"]),
        mathml2=str(data["mathml2"]),
    )


__all__ = ["DEFAULT_EXAMPLE", "ExampleNotFoundError", "load_example"]
