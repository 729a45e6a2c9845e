"""Reading inputs for commands: template sources and data files."""

import json
import sys
from pathlib import Path
from typing import Any, Union

import yaml

from .exceptions import FileOperationError

STDIN = "-"


def read_text(path: Union[str, Path]) -> str:
    """Read a text file, or standard input for ``-``.

    Raises:
        FileOperationError: If the file cannot be read
    """
    if str(path) == STDIN:
        return sys.stdin.read()

    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileOperationError("File not found", file_path=str(path), operation="read")
    except (OSError, UnicodeDecodeError) as e:
        raise FileOperationError(str(e), file_path=str(path), operation="read")


def load_data_file(path: Union[str, Path]) -> Any:
    """Load a JSON or YAML document.

    ``.yaml`` and ``.yml`` files are parsed as YAML, everything else as JSON.

    Raises:
        FileOperationError: If the file cannot be read or parsed
    """
    text = read_text(path)
    is_yaml = Path(str(path)).suffix.lower() in (".yaml", ".yml")

    try:
        if is_yaml:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise FileOperationError(
            f"Invalid {'YAML' if is_yaml else 'JSON'}: {e}",
            file_path=str(path),
            operation="parse",
        )


def write_text(path: Union[str, Path], content: str, overwrite: bool = False) -> Path:
    """Write a text file, refusing to clobber an existing one unless asked.

    Raises:
        FileOperationError: If the file exists or cannot be written
    """
    path = Path(path)
    if path.exists() and not overwrite:
        raise FileOperationError("File already exists (use --force to overwrite)", file_path=str(path), operation="write")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FileOperationError(str(e), file_path=str(path), operation="write")
    return path
