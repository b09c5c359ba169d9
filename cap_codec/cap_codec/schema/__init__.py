"""Schema definitions and validation.

This package intentionally avoids depending on the entity classes and the
codecs so that the rule engine and the version table stay format-independent.
"""

from .validation import (
    ClosedRing,
    CollectionValidity,
    Dependency,
    Format,
    Inclusion,
    InclusionOfMembers,
    Length,
    Numericality,
    Presence,
    Validatable,
    ValidationResult,
    Validity,
    Violation,
    validate,
)
from .versions import (
    CAP_1_0,
    CAP_1_1,
    CAP_1_2,
    CAP_VERSIONS,
    LATEST_CAP_VERSION,
    ElementField,
    SchemaVersion,
    get_schema_version,
    schema_version_for_namespace,
)
from .mapping_schema import check_mapping_structure, load_schema
