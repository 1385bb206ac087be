"""JSON contract diff - sample-driven schema inference and structural diffing."""

from __future__ import annotations

from json_contract_diff.api import (
    chained_diff,
    decode,
    diff,
    infer_schema,
    merge_schemas,
    update_schema,
    validate_instance,
)
from json_contract_diff.diff import (
    ArrayComparisonMode,
    DiffConfig,
    DiffRecord,
    DiffSet,
    StructuralDiffer,
)
from json_contract_diff.errors import (
    AccumulationTimeoutError,
    ContractDiffError,
    DiffTimeoutError,
    NestingDepthError,
    ParseError,
    PathError,
    TypeConflictError,
    UnsupportedTypeError,
)
from json_contract_diff.navigation import resolve, resolve_schema
from json_contract_diff.paths import Member, Path
from json_contract_diff.pipeline import AccumulationReport, SampleFailure, SchemaAccumulator
from json_contract_diff.schema import (
    InferenceConfig,
    Kind,
    MergePolicy,
    SchemaBuilder,
    SchemaDocument,
    SchemaMerger,
    dumps,
    from_dict,
    loads,
    to_dict,
)

__version__: str = "0.1.0"
__all__: list[str] = [
    "AccumulationReport",
    "AccumulationTimeoutError",
    "ArrayComparisonMode",
    "ContractDiffError",
    "DiffConfig",
    "DiffRecord",
    "DiffSet",
    "DiffTimeoutError",
    "InferenceConfig",
    "Kind",
    "Member",
    "MergePolicy",
    "NestingDepthError",
    "ParseError",
    "Path",
    "PathError",
    "SampleFailure",
    "SchemaAccumulator",
    "SchemaBuilder",
    "SchemaDocument",
    "SchemaMerger",
    "StructuralDiffer",
    "TypeConflictError",
    "UnsupportedTypeError",
    "chained_diff",
    "decode",
    "diff",
    "dumps",
    "from_dict",
    "infer_schema",
    "loads",
    "merge_schemas",
    "resolve",
    "resolve_schema",
    "to_dict",
    "update_schema",
    "validate_instance",
]
