"""
Document rendering (JSON / YAML).

Only the CLI writes files; the compiler hands back node trees.
"""

import json
from pathlib import Path
from typing import Any, Literal

import yaml

from skpmml.document.nodes import PMMLDocument
from skpmml.utils.logging import get_logger

log = get_logger(__name__)

DocumentFormat = Literal["json", "yaml"]


def document_to_dict(document: PMMLDocument) -> dict[str, Any]:
    """
    Convert a document to plain Python data.

    Null members are kept: a null ``default_value`` or ``default_score``
    is meaningful (unmatched inputs are missing, not defaulted).
    """
    return document.model_dump(mode="json")


def dump_document(
    document: PMMLDocument,
    fmt: DocumentFormat = "json",
    indent: int = 2,
) -> str:
    """
    Render a document as text.

    Args:
        document: Compiled document.
        fmt: Output format, "json" or "yaml".
        indent: Indentation width.

    Returns:
        Rendered document text.
    """
    data = document_to_dict(document)
    if fmt == "json":
        return json.dumps(data, indent=indent, ensure_ascii=False)
    if fmt == "yaml":
        return yaml.safe_dump(data, indent=indent, sort_keys=False, allow_unicode=True)
    msg = f"Unknown document format '{fmt}'. Use 'json' or 'yaml'."
    raise ValueError(msg)


def load_document(path: Path) -> PMMLDocument:
    """Read a JSON or YAML document back into a node tree."""
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    return PMMLDocument.model_validate(data)


def write_document(
    document: PMMLDocument,
    output_path: Path,
    fmt: DocumentFormat = "json",
    indent: int = 2,
) -> Path:
    """
    Write a document to disk.

    Args:
        document: Compiled document.
        output_path: Destination file.
        fmt: Output format, "json" or "yaml".
        indent: Indentation width.

    Returns:
        The path written.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    text = dump_document(document, fmt=fmt, indent=indent)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(text)
    log.info("Saved document", path=str(output_path), format=fmt)

    return output_path
