import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reorder_advisor.core.solutions import CoefficientWeights
from reorder_advisor.models import DEFAULT_DECLARATION_KIND_ORDER, DeclarationKind

_ENV_PREFIX = "REORDER_ADVISOR_"

_ENV_FIELDS = {
    "DEPENDENCY_WEIGHT": "dependency_coefficient_weight",
    "SIMILARITY_WEIGHT": "similarity_coefficient_weight",
    "KIND_WEIGHT": "kind_coefficient_weight",
    "KIND_ORDER": "declaration_kind_order",
    "DEBOUNCE_SECONDS": "debounce_seconds",
    "SELECTED_ONLY": "selected_only",
}


class AdvisorConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    dependency_coefficient_weight: float = Field(default=1.0, ge=0)
    similarity_coefficient_weight: float = Field(default=1.0, ge=0)
    kind_coefficient_weight: float = Field(default=1.0, ge=0)
    # accepted for kind-grouping policies; the coefficients do not read it
    declaration_kind_order: tuple[DeclarationKind, ...] = DEFAULT_DECLARATION_KIND_ORDER
    debounce_seconds: float = Field(default=0.3, ge=0)
    selected_only: bool = False

    @field_validator("declaration_kind_order", mode="before")
    @classmethod
    def _split_kind_order(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value

    @field_validator("declaration_kind_order")
    @classmethod
    def _check_kind_order(cls, value: tuple[DeclarationKind, ...]) -> tuple[DeclarationKind, ...]:
        if len(value) != len(DeclarationKind) or set(value) != set(DeclarationKind):
            raise ValueError("declaration_kind_order must list every declaration kind exactly once")
        return value

    @property
    def weights(self) -> CoefficientWeights:
        return CoefficientWeights(
            dependency=self.dependency_coefficient_weight,
            similarity=self.similarity_coefficient_weight,
            kind=self.kind_coefficient_weight,
        )


def load_config(**overrides: Any) -> AdvisorConfig:
    """Build the configuration from ``REORDER_ADVISOR_*`` variables, then apply non-None overrides."""
    values: dict[str, Any] = {}
    for suffix, field in _ENV_FIELDS.items():
        raw = os.getenv(_ENV_PREFIX + suffix)
        if raw is not None and raw.strip():
            values[field] = raw.strip()
    values.update({key: value for key, value in overrides.items() if value is not None})
    return AdvisorConfig(**values)
