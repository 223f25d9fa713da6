"""
schema_loader.py - Transformation Schema Loader

Loads and validates transformation schemas kept as YAML or JSON documents.

What this does:
1. Read + parse the document (YAML via PyYAML safe_load, or JSON)
2. Validate shape (hard validation, all problems reported at once)
3. Optionally check every link name against a TransformationGraph
4. Fingerprint the schema with a deterministic sha256

Usage:
    from credgraph.schema_loader import load_schema_file, schema_fingerprint

    schema = load_schema_file("schemas/credential.yaml", graph=preparator.graph)
    vector = preparator.prepare(credential, schema)
    print(f"Schema: {schema_fingerprint(schema)[:16]}...")
"""

import hashlib
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .canonical import canonical_json_bytes, canonicalize
from .exceptions import SchemaLoadError, SchemaMismatchError
from .graph import TransformationGraph

__all__ = [
    'load_schema_file',
    'load_schema_dict',
    'validate_schema',
    'schema_fingerprint',
]

_YAML_SUFFIXES = {'.yaml', '.yml'}
_JSON_SUFFIXES = {'.json'}


def _walk_leaves(node: Any, path: str, errors: List[str], chains: Dict[str, List[str]]) -> None:
    if isinstance(node, Mapping):
        if not node:
            errors.append(f"{path or '<root>'}: empty object")
        for key, child in node.items():
            if not isinstance(key, str):
                errors.append(f"{path or '<root>'}: key {key!r} is not a string")
                continue
            _walk_leaves(child, f"{path}.{key}" if path else key, errors, chains)
        return

    if isinstance(node, list) and node and all(isinstance(item, str) for item in node):
        chains[path] = list(node)
        return

    if isinstance(node, list) and node and all(isinstance(item, (list, Mapping)) for item in node):
        # Per-index chains for list-valued record fields
        for index, child in enumerate(node):
            _walk_leaves(child, f"{path}.{index}", errors, chains)
        return

    errors.append(f"{path}: expected a non-empty list of link names, got {node!r}")


def validate_schema(
    schema: Any,
    graph: Optional[TransformationGraph] = None,
) -> Dict[str, Any]:
    """
    Validate a transformation schema.

    Checks:
    - Required credential fields are present (via canonicalize)
    - Every leaf is a non-empty list of link-name strings
    - If ``graph`` is given, every link name is registered on it

    Args:
        schema: Parsed schema dictionary
        graph: Optional graph to resolve link names against

    Returns:
        The schema, unchanged

    Raises:
        InvalidRecordError: If a required credential field is missing
        SchemaMismatchError: If any leaf or link name is invalid
    """
    canonicalize(schema)

    errors: List[str] = []
    chains: Dict[str, List[str]] = {}
    _walk_leaves(schema, "", errors, chains)

    if graph is not None:
        for path, chain in chains.items():
            for name in chain:
                if not graph.has_link(name):
                    errors.append(f"{path}: unknown link '{name}'")

    if errors:
        raise SchemaMismatchError(
            f"Schema validation failed with {len(errors)} error(s)",
            details={"errors": errors},
        )
    return schema


def load_schema_dict(
    schema: Any,
    graph: Optional[TransformationGraph] = None,
) -> Dict[str, Any]:
    """Validate an already-parsed schema dictionary."""
    if not isinstance(schema, dict):
        raise SchemaLoadError(
            f"Schema must be a dictionary, got {type(schema).__name__}",
        )
    return validate_schema(schema, graph)


def load_schema_file(
    path: Union[str, Path],
    graph: Optional[TransformationGraph] = None,
) -> Dict[str, Any]:
    """
    Load and validate a YAML or JSON schema file.

    Raises:
        SchemaLoadError: If the file is missing, unreadable or unparsable
        SchemaMismatchError: If validation fails
    """
    path = Path(path)

    if not path.exists():
        raise SchemaLoadError(f"Schema file not found: {path}", details={"path": str(path)})

    suffix = path.suffix.lower()
    if suffix not in _YAML_SUFFIXES | _JSON_SUFFIXES:
        raise SchemaLoadError(
            f"Unsupported schema file type '{suffix}' (use .yaml, .yml or .json)",
            details={"path": str(path)},
        )

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if suffix in _YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Invalid YAML in schema file: {e}", details={"path": str(path)}) from e
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Invalid JSON in schema file: {e}", details={"path": str(path)}) from e
    except OSError as e:
        raise SchemaLoadError(f"Cannot read schema file: {e}", details={"path": str(path)}) from e

    return load_schema_dict(data, graph)


def schema_fingerprint(schema: Mapping[str, Any]) -> str:
    """
    Deterministic sha256 hex digest of a schema.

    Independent of key insertion order: the schema is canonicalized and
    rendered as canonical JSON before hashing.
    """
    return hashlib.sha256(canonical_json_bytes(canonicalize(schema))).hexdigest()
