"""contract — JSON-RPC wire shapes, error codes and the procedure contract."""

from contract.errors import (
    EERROR,
    EINTRN,
    EPARAM,
    EREQST,
    ERESLT,
    STANDARD_ERRORS,
    ConfigurationError,
    is_standard,
)
from contract.jsonrpc import (
    BATCH_SCHEMA,
    MEDIA_TYPE,
    REQUEST_SCHEMA,
    JsonRpcRequest,
    JsonRpcResponse,
)
from contract.procedure import (
    FunctionProcedure,
    Outcome,
    Procedure,
    ProcedureRegistry,
    Schema,
)
from contract.schema import SchemaChecker

__all__ = [
    "Procedure",
    "FunctionProcedure",
    "ProcedureRegistry",
    "Outcome",
    "Schema",
    "SchemaChecker",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "REQUEST_SCHEMA",
    "BATCH_SCHEMA",
    "MEDIA_TYPE",
    "ConfigurationError",
    "STANDARD_ERRORS",
    "is_standard",
    "EINTRN",
    "EPARAM",
    "EREQST",
    "ERESLT",
    "EERROR",
]
