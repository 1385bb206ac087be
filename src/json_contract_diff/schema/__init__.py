"""Schema subpackage: inference, merging and encoding of sample-driven schemas.

Re-exports the public API for the schema module:
- Kind, the property-node classes and SchemaDocument: the tagged-union model
- FormatClassifier: string subtype detection
- SchemaBuilder: infers a property tree from one decoded sample
- SchemaMerger: widens an accumulated document with a new one
- InferenceConfig / MergePolicy: configuration
- to_dict / from_dict / dumps / loads: wire codec
- validate_instance / is_valid: validation through ``jsonschema``
"""

from json_contract_diff.schema.builder import SchemaBuilder
from json_contract_diff.schema.codec import dumps, from_dict, loads, to_dict
from json_contract_diff.schema.config import DEFAULT_DIALECT, InferenceConfig, MergePolicy
from json_contract_diff.schema.formats import FormatClassifier, FormatMatch, StringFormat
from json_contract_diff.schema.merge import SchemaMerger, merge_documents
from json_contract_diff.schema.nodes import (
    ArrayNode,
    BooleanNode,
    Kind,
    NullNode,
    NumberNode,
    ObjectNode,
    PropertyNode,
    SchemaDocument,
    StringNode,
)
from json_contract_diff.schema.validation import is_valid, validate_instance

__all__ = [
    "DEFAULT_DIALECT",
    "ArrayNode",
    "BooleanNode",
    "FormatClassifier",
    "FormatMatch",
    "InferenceConfig",
    "Kind",
    "MergePolicy",
    "NullNode",
    "NumberNode",
    "ObjectNode",
    "PropertyNode",
    "SchemaBuilder",
    "SchemaDocument",
    "SchemaMerger",
    "StringFormat",
    "StringNode",
    "dumps",
    "from_dict",
    "is_valid",
    "loads",
    "merge_documents",
    "to_dict",
    "validate_instance",
]
