"""Per-SKU forecasting parameters and their field-mapping table.

Every translation between the persisted blob / prediction service names and
``SkuParameterRow`` attributes goes through ``PARAMETER_FIELDS``. The row
parser, the training body builder, the training-response extractor and the
accuracy-check request builder all read the same table.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FieldKind(str, Enum):
    """How a field value is parsed and serialized."""
    INT = "int"
    FLOAT = "float"
    MODE = "mode"
    BOOL = "bool"


class LockMode(str, Enum):
    """Per-SKU training lock policy."""
    NONE = ""
    PARAMS = "params"
    MODEL = "model"

    @classmethod
    def parse(cls, value: Any) -> "LockMode":
        """Parse a stored lock value; the old Yes/No column maps 1 to params."""
        if value is None:
            return cls.NONE
        text = str(value).strip().lower()
        if text in ("1", cls.PARAMS.value):
            return cls.PARAMS
        if text == cls.MODEL.value:
            return cls.MODEL
        return cls.NONE


SEASONALITY_MODES = ("additive", "multiplicative")


@dataclass(frozen=True)
class ParameterField:
    """One row of the field-mapping table."""
    external_name: str
    attribute: str
    kind: FieldKind
    trainable: bool = True
    accuracy: bool = False
    legacy: bool = False


PARAMETER_FIELDS: tuple[ParameterField, ...] = (
    ParameterField("alert_threshold", "alert_threshold", FieldKind.INT, trainable=False),
    ParameterField(
        "test_period_days", "alert_threshold", FieldKind.INT,
        trainable=False, accuracy=True, legacy=True,
    ),
    ParameterField("changepoint_prior_scale", "changepoint_prior_scale", FieldKind.FLOAT, accuracy=True),
    ParameterField("seasonality_prior_scale", "seasonality_prior_scale", FieldKind.FLOAT, accuracy=True),
    ParameterField("holidays_prior_scale", "holidays_prior_scale", FieldKind.FLOAT, accuracy=True),
    ParameterField("seasonality_mode", "seasonality_mode", FieldKind.MODE, accuracy=True),
    ParameterField("yearly_seasonality", "yearly_seasonality", FieldKind.BOOL),
    ParameterField("weekly_seasonality", "weekly_seasonality", FieldKind.BOOL),
    ParameterField("daily_seasonality", "daily_seasonality", FieldKind.BOOL),
)

TRAINABLE_FIELDS = tuple(f for f in PARAMETER_FIELDS if f.trainable)
ACCURACY_FIELDS = tuple(f for f in PARAMETER_FIELDS if f.accuracy)

LOCK_PARAMS_KEY = "lock_params"
SKU_KEY = "sku"


def is_empty(value: Any) -> bool:
    """Blank cells in the blob are stored as empty strings."""
    return value is None or (isinstance(value, str) and value.strip() == "")


def is_numeric(value: Any) -> bool:
    """Check for a finite number or a string holding one. Booleans do not count."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            return math.isfinite(float(value.strip()))
        except ValueError:
            return False
    return False


def parse_bool(value: Any) -> bool | None:
    """Parse a tri-state boolean; None means let the trainer decide."""
    if is_empty(value):
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    return None


def store_bool(value: Any) -> str:
    """Coerce to the store's Yes/No column convention."""
    parsed = parse_bool(value)
    if parsed is None:
        return ""
    return "1" if parsed else "0"


def parse_value(kind: FieldKind, value: Any) -> Any:
    """Parse a stored value into its typed form, or None if blank or invalid."""
    if is_empty(value):
        return None
    if kind is FieldKind.BOOL:
        return parse_bool(value)
    if kind is FieldKind.MODE:
        mode = str(value).strip().lower()
        return mode if mode in SEASONALITY_MODES else None
    if not is_numeric(value):
        return None
    number = float(value)
    if kind is FieldKind.INT:
        return int(number) if number >= 0 else None
    return number


def export_value(kind: FieldKind, value: Any) -> Any:
    """Typed value to its wire form for the prediction service."""
    if kind is FieldKind.BOOL:
        return bool(value)
    return value


@dataclass
class SkuParameterRow:
    """Forecasting parameters for one SKU.

    ``raw`` keeps the stored row verbatim so unknown keys survive rewrites.
    """

    sku: str
    alert_threshold: int | None = None
    changepoint_prior_scale: float | None = None
    seasonality_prior_scale: float | None = None
    holidays_prior_scale: float | None = None
    seasonality_mode: str | None = None
    yearly_seasonality: bool | None = None
    weekly_seasonality: bool | None = None
    daily_seasonality: bool | None = None
    lock_params: LockMode = LockMode.NONE
    raw: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_blob(cls, data: dict) -> "SkuParameterRow":
        """Build a row from one stored blob object.

        ``alert_threshold`` wins over the legacy ``test_period_days`` key.
        """
        values: dict[str, Any] = {}
        for entry in PARAMETER_FIELDS:
            if values.get(entry.attribute) is not None:
                continue
            values[entry.attribute] = parse_value(entry.kind, data.get(entry.external_name))
        return cls(
            sku=str(data.get(SKU_KEY) or ""),
            lock_params=LockMode.parse(data.get(LOCK_PARAMS_KEY)),
            raw=dict(data),
            **values,
        )

    @property
    def has_alert_threshold(self) -> bool:
        return self.alert_threshold is not None

    def training_body(self) -> dict[str, Any]:
        """Locked hyperparameters for the trainer; alert threshold is never sent."""
        body = {}
        for entry in TRAINABLE_FIELDS:
            value = getattr(self, entry.attribute)
            if value is not None:
                body[entry.external_name] = export_value(entry.kind, value)
        return body

    def accuracy_body(self) -> dict[str, Any]:
        """Request body for the period-accuracy check, from non-empty stored values."""
        body = {}
        for entry in ACCURACY_FIELDS:
            value = self.raw.get(entry.external_name)
            if not is_empty(value):
                body[entry.external_name] = value
        return body


def extract_tuned_parameters(parameters: dict) -> dict[str, Any]:
    """Map hyperparameters returned by a self-tune run to blob fields."""
    extracted: dict[str, Any] = {}
    for entry in TRAINABLE_FIELDS:
        if entry.external_name not in parameters:
            continue
        value = parameters[entry.external_name]
        if entry.kind is FieldKind.BOOL:
            extracted[entry.external_name] = store_bool(value)
        elif value is None:
            continue
        elif entry.kind is FieldKind.MODE:
            extracted[entry.external_name] = str(value)
        else:
            extracted[entry.external_name] = value
    return extracted
