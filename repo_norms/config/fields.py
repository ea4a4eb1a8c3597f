"""Field-kind table for the analyzed repository fields.

Every analyzed field is statically classified into one of four kinds. The kind
decides how a field is extracted from a raw record, how its norm is aggregated
and how a record's value is compared against that norm. Classification happens
once, when the configuration is loaded, and is never re-derived per record.
"""

from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .exceptions import ConfigurationError


class FieldKind(str, Enum):
    """How a field's values are aggregated and compared."""

    SCALAR = "scalar"
    MULTISET = "multiset"
    STRUCTURED_SECURITY = "structured-security"
    STRUCTURED_PROTECTION = "structured-protection"


# Fields whose kind differs from the scalar default
DEFAULT_FIELD_KINDS: Dict[str, FieldKind] = {
    "topics": FieldKind.MULTISET,
    "security_and_analysis": FieldKind.STRUCTURED_SECURITY,
    "branch_protection": FieldKind.STRUCTURED_PROTECTION,
}

# Scalar fields delivered as objects; the named sub-key is the comparable value
DEFAULT_FIELD_ATTRIBUTES: Dict[str, str] = {
    "license": "name",
}

DEFAULT_FIELDS: Tuple[str, ...] = (
    "name",
    "description",
    "homepage",
    "private",
    "has_issues",
    "has_projects",
    "has_wiki",
    "has_downloads",
    "has_discussions",
    "allow_squash_merge",
    "allow_merge_commit",
    "allow_rebase_merge",
    "allow_auto_merge",
    "delete_branch_on_merge",
    "default_branch",
    "topics",
    "archived",
    "disabled",
    "license",
    "allow_forking",
    "web_commit_signoff_required",
    "security_and_analysis",
    "branch_protection",
)

DEFAULT_IGNORE_FIELDS: Tuple[str, ...] = ("name", "description", "homepage")


class FieldSpec(BaseModel):
    """One analyzed field: its identifier, kind and optional nested attribute."""

    name: str = Field(..., min_length=1, description="Field identifier on the raw record")
    kind: FieldKind = Field(FieldKind.SCALAR, description="Aggregation/comparison kind")
    attribute: Optional[str] = Field(
        None, description="Sub-key to take when a scalar field arrives as an object"
    )

    model_config = {"frozen": True}

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Strip whitespace from the field identifier."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field name cannot be empty or whitespace-only")
        return stripped

    @model_validator(mode="after")
    def attribute_only_for_scalars(self):
        """Only scalar fields can be projected through a nested attribute."""
        if self.attribute is not None and self.kind is not FieldKind.SCALAR:
            raise ValueError(
                f"Field '{self.name}': attribute is only supported for scalar fields"
            )
        return self


FieldEntry = Union[str, Mapping[str, Any], FieldSpec]


def apply_field_defaults(entry: Any) -> Any:
    """Fill kind and attribute of a configured field entry from the built-in table.

    A bare identifier takes both from the table. A mapping that names its own
    kind is left alone; one that doesn't gets the table's kind and attribute.
    Anything else is returned unchanged for the model to reject.
    """
    if isinstance(entry, str):
        name = entry.strip()
        return {
            "name": name,
            "kind": DEFAULT_FIELD_KINDS.get(name, FieldKind.SCALAR),
            "attribute": DEFAULT_FIELD_ATTRIBUTES.get(name),
        }

    if isinstance(entry, Mapping):
        data = dict(entry)
        name = data.get("name")
        if isinstance(name, str) and "kind" not in data:
            data["kind"] = DEFAULT_FIELD_KINDS.get(name.strip(), FieldKind.SCALAR)
            data.setdefault("attribute", DEFAULT_FIELD_ATTRIBUTES.get(name.strip()))
        return data

    return entry


def build_field_spec(entry: FieldEntry) -> FieldSpec:
    """Resolve one configured field entry into a FieldSpec.

    Raises:
        ValidationError: If the entry is malformed or names an unknown kind
        ValueError: If the entry is neither a string nor a mapping
    """
    if isinstance(entry, FieldSpec):
        return entry

    data = apply_field_defaults(entry)
    if not isinstance(data, dict):
        raise ValueError(
            f"Field entry must be a string or a mapping, got {type(entry).__name__}"
        )
    return FieldSpec.model_validate(data)


class FieldConfig:
    """Ordered, resolved field-kind table.

    Immutable once built. Lookups by field name are O(1); iteration follows the
    configured order, which is also the order of every norms and config map.
    """

    def __init__(self, specs: Iterable[FieldSpec]):
        self._specs: Tuple[FieldSpec, ...] = tuple(specs)
        self._by_name: Dict[str, FieldSpec] = {}

        duplicates = []
        for spec in self._specs:
            if spec.name in self._by_name:
                duplicates.append(spec.name)
            self._by_name[spec.name] = spec

        if duplicates:
            raise ConfigurationError(
                "Duplicate field identifiers in field configuration",
                errors=[f"Field listed more than once: {name}" for name in duplicates],
                suggestions=["List each field exactly once under 'fields'"],
            )

    @classmethod
    def from_entries(cls, entries: Iterable[FieldEntry]) -> "FieldConfig":
        """Build a FieldConfig from configured entries.

        Raises:
            ConfigurationError: If any entry is malformed or names an unknown kind
        """
        specs: List[FieldSpec] = []
        errors: List[str] = []
        for index, entry in enumerate(entries):
            try:
                specs.append(build_field_spec(entry))
            except ValidationError as e:
                for error in e.errors():
                    errors.append(f"fields -> {index}: {error['msg']}")
            except ValueError as e:
                errors.append(f"fields -> {index}: {e}")

        if errors:
            valid_kinds = ", ".join(kind.value for kind in FieldKind)
            raise ConfigurationError(
                "Invalid field configuration",
                errors=errors,
                suggestions=[f"Field kinds must be one of: {valid_kinds}"],
            )

        return cls(specs)

    @classmethod
    def default(cls) -> "FieldConfig":
        """Field configuration covering the standard repository settings."""
        return cls.from_entries(DEFAULT_FIELDS)

    @property
    def names(self) -> List[str]:
        return [spec.name for spec in self._specs]

    def kind_of(self, name: str) -> FieldKind:
        return self._by_name[name].kind

    def spec(self, name: str) -> FieldSpec:
        return self._by_name[name]

    def of_kind(self, kind: FieldKind) -> List[str]:
        return [spec.name for spec in self._specs if spec.kind is kind]

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"FieldConfig({', '.join(f'{s.name}:{s.kind.value}' for s in self._specs)})"
