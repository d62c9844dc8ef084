from .backend import ConfigBackend, DatabaseConfigBackend
from .fields import (
    PARAMETER_FIELDS,
    FieldKind,
    LockMode,
    ParameterField,
    SkuParameterRow,
    extract_tuned_parameters,
)
from .store import SKU_PARAMETERS_PATH, ParameterStore

__all__ = [
    "ConfigBackend",
    "DatabaseConfigBackend",
    "PARAMETER_FIELDS",
    "FieldKind",
    "LockMode",
    "ParameterField",
    "SkuParameterRow",
    "extract_tuned_parameters",
    "SKU_PARAMETERS_PATH",
    "ParameterStore",
]
