"""
Loading records from JSON and YAML documents.

Used by the command line tool to build collections from files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import jmespath
import yaml

from .records import UNSET

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


def load_document(path: Union[str, Path]) -> Any:
    """
    Parse a JSON or YAML file, chosen by suffix.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be parsed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No such file: {path}")

    text = path.read_text()
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Could not parse {path}: {e}") from e


def load_records(path: Union[str, Path], select: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Load a list of record mappings from a file.

    Args:
        path: JSON or YAML document
        select: Optional JMESPath expression locating the record list inside
            the document (e.g. ``"data.items"``)

    Returns:
        List of attribute dicts

    Raises:
        ValueError: If the (selected) document is not a list of mappings
    """
    document = load_document(path)
    if select:
        document = jmespath.search(select, document)
        logger.debug(f"Selected {select!r} from {path}")

    if document is None:
        return []
    if not isinstance(document, list):
        raise ValueError(
            f"Expected a list of records in {path}, got {type(document).__name__}"
        )
    for i, item in enumerate(document):
        if not isinstance(item, dict):
            raise ValueError(f"Record {i} in {path} is a {type(item).__name__}, not a mapping")
    return document


def parse_where(terms: Optional[Iterable[str]]) -> Optional[Dict[str, Any]]:
    """
    Turn ``key=value`` terms into an attribute mapping.

    Values are read as YAML scalars, so ``true``, ``3`` and ``null`` become
    ``True``, ``3`` and ``None``. A bare ``!key`` requires the attribute to be
    unset.

    Returns:
        The mapping, or ``None`` when no terms were given

    Raises:
        ValueError: On a term that is neither form
    """
    terms = list(terms or [])
    if not terms:
        return None

    attributes: Dict[str, Any] = {}
    for term in terms:
        if term.startswith("!") and "=" not in term:
            name = term[1:].strip()
            if not name:
                raise ValueError(f"Invalid where term '{term}'")
            attributes[name] = UNSET
            continue
        name, sep, raw = term.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"Invalid where term '{term}' (expected key=value or !key)")
        attributes[name] = _scalar(raw)
    return attributes


def _scalar(raw: str) -> Any:
    if not raw.strip():
        return ""
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    # dates, lists and mappings keep their literal text
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return raw
