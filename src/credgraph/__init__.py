"""
credgraph (v0.1)

Typed value-transformation graph and schema-driven credential flattening.

Core Principle: Same logical record, same vector.
"A chain of named, typed links turns every credential leaf into an encoded
primitive, in an order no producer can perturb."
"""

__version__ = "0.1.0"
__author__ = "credgraph"

# Errors
from .exceptions import (
    CredGraphError,
    DuplicateNodeError,
    DuplicateLinkError,
    UnknownNodeError,
    UnknownLinkError,
    TypeMismatchError,
    RangeError,
    FormatError,
    SchemaMismatchError,
    InvalidRecordError,
    GraphFrozenError,
    SchemaLoadError,
    CanonicalEncodingError,
    ConfigError,
    InternalError,
    EXCEPTION_MAP,
    wrap_internal_exception,
)

# Value kinds
from .values import ValueKind, kind_of

# Nodes and links
from .nodes import GraphNode, BASE_NODES
from .links import GraphLink, BASE_LINKS

# Engine
from .graph import TransformationGraph

# Canonical ordering and flattening
from .canonical import (
    canonicalize,
    sort_keys_deep,
    canonical_json_bytes,
    canonical_json_string,
)
from .flatten import PathValue, to_path_value_list, get_by_path

# Orchestration
from .preparator import Preparator

# Schemas and settings
from .schema_loader import (
    load_schema_file,
    load_schema_dict,
    validate_schema,
    schema_fingerprint,
)
from .config import Settings, configure_logging

__all__ = [
    # Errors
    'CredGraphError',
    'DuplicateNodeError',
    'DuplicateLinkError',
    'UnknownNodeError',
    'UnknownLinkError',
    'TypeMismatchError',
    'RangeError',
    'FormatError',
    'SchemaMismatchError',
    'InvalidRecordError',
    'GraphFrozenError',
    'SchemaLoadError',
    'CanonicalEncodingError',
    'ConfigError',
    'InternalError',
    'EXCEPTION_MAP',
    'wrap_internal_exception',
    # Values
    'ValueKind',
    'kind_of',
    # Graph
    'GraphNode',
    'GraphLink',
    'BASE_NODES',
    'BASE_LINKS',
    'TransformationGraph',
    # Canonical / flatten
    'canonicalize',
    'sort_keys_deep',
    'canonical_json_bytes',
    'canonical_json_string',
    'PathValue',
    'to_path_value_list',
    'get_by_path',
    # Preparator
    'Preparator',
    # Schemas / settings
    'load_schema_file',
    'load_schema_dict',
    'validate_schema',
    'schema_fingerprint',
    'Settings',
    'configure_logging',
]
