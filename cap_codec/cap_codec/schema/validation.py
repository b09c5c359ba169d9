from __future__ import annotations

import re
from dataclasses import dataclass
from numbers import Real
from typing import Any, Iterable, List, Optional, Pattern, Protocol, Sequence, Tuple, Union, runtime_checkable

from ..exceptions import UnsupportedVersionError
from ..utils.format_version import normalize_cap_version


AttributePath = str


@dataclass(frozen=True)
class Violation:
    attribute_path: AttributePath
    message: str

    def __str__(self) -> str:
        return f"{self.attribute_path} {self.message}"


@dataclass(frozen=True)
class ValidationResult:
    violations: Tuple[Violation, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.violations

    def paths(self) -> List[AttributePath]:
        return [v.attribute_path for v in self.violations]

    def messages_for(self, attribute_path: AttributePath) -> List[str]:
        return [v.message for v in self.violations if v.attribute_path == attribute_path]


@runtime_checkable
class Validatable(Protocol):
    @classmethod
    def validation_rules(cls) -> Sequence["Rule"]:
        ...


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def _members(entity: Any, attribute: str) -> Tuple[Sequence[Any], List[Violation]]:
    """Read a collection attribute, reporting a value that is not a list."""
    members = getattr(entity, attribute, None)
    if members is None:
        return (), []
    if not isinstance(members, (list, tuple)):
        return (), [Violation(attribute, "is not a collection")]
    return members, []


def _join_path(base: AttributePath, token: AttributePath) -> AttributePath:
    return f"{base}.{token}" if base else token


def _enumeration_text(values: Sequence[str]) -> str:
    return ", ".join(values)


class _VersionGated:
    """Mixin for rules that only hold for some CAP versions.

    An empty ``versions`` tuple means the rule always applies. A gated rule is
    skipped when validation runs without a known version.
    """

    versions: Tuple[str, ...]

    def applies_to(self, version: Optional[str]) -> bool:
        if not self.versions:
            return True
        return version in self.versions


# -------------------------
# Rule kinds
# -------------------------


@dataclass(frozen=True)
class Presence(_VersionGated):
    attribute: str
    when: Optional[Tuple[str, Any]] = None
    versions: Tuple[str, ...] = ()

    def check(self, entity: Any, version: Optional[str]) -> Iterable[Violation]:
        if self.when is not None:
            other, expected = self.when
            if getattr(entity, other, None) != expected:
                return []
            message = f"is not present (required when {other} is {expected})"
        else:
            message = "is not present"
        if is_blank(getattr(entity, self.attribute, None)):
            return [Violation(self.attribute, message)]
        return []


@dataclass(frozen=True)
class Inclusion(_VersionGated):
    attribute: str
    values: Tuple[str, ...]
    versions: Tuple[str, ...] = ()

    def check(self, entity: Any, version: Optional[str]) -> Iterable[Violation]:
        value = getattr(entity, self.attribute, None)
        if value is None or value in self.values:
            return []
        return [
            Violation(
                self.attribute,
                f"can only be assigned the following values: {_enumeration_text(self.values)}",
            )
        ]


@dataclass(frozen=True)
class InclusionOfMembers(_VersionGated):
    attribute: str
    values: Tuple[str, ...]
    versions: Tuple[str, ...] = ()

    def check(self, entity: Any, version: Optional[str]) -> Iterable[Violation]:
        members, issues = _members(entity, self.attribute)
        invalid = [m for m in members if m not in self.values]
        if not invalid:
            return issues
        return [
            Violation(
                self.attribute,
                f"contains members not in the following values: {_enumeration_text(self.values)} "
                f"(got {', '.join(repr(m) for m in invalid)})",
            )
        ]


@dataclass(frozen=True)
class Format(_VersionGated):
    attribute: str
    pattern: Pattern[str]
    versions: Tuple[str, ...] = ()

    def check(self, entity: Any, version: Optional[str]) -> Iterable[Violation]:
        value = getattr(entity, self.attribute, None)
        if is_blank(value):
            return []
        if not isinstance(value, str) or self.pattern.fullmatch(value) is None:
            return [Violation(self.attribute, "is not in the correct format")]
        return []


@dataclass(frozen=True)
class Dependency(_VersionGated):
    """``attribute`` may only be set when ``on`` equals ``value``.

    With ``value`` left as None, ``on`` merely has to be present.
    """

    attribute: str
    on: str
    value: Any = None
    versions: Tuple[str, ...] = ()

    def check(self, entity: Any, version: Optional[str]) -> Iterable[Violation]:
        if is_blank(getattr(entity, self.attribute, None)):
            return []
        other = getattr(entity, self.on, None)
        if self.value is None:
            if is_blank(other):
                return [Violation(self.attribute, f"is dependent on {self.on} being present")]
            return []
        if other != self.value:
            return [Violation(self.attribute, f"is dependent on {self.on} being {self.value}")]
        return []


@dataclass(frozen=True)
class Numericality(_VersionGated):
    attribute: str
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    allow_none: bool = True
    versions: Tuple[str, ...] = ()

    def check(self, entity: Any, version: Optional[str]) -> Iterable[Violation]:
        value = getattr(entity, self.attribute, None)
        if value is None:
            return [] if self.allow_none else [Violation(self.attribute, "is not a number")]
        if isinstance(value, bool) or not isinstance(value, Real):
            return [Violation(self.attribute, "is not a number")]
        if self.minimum is not None and value < self.minimum:
            return [Violation(self.attribute, f"must be greater than or equal to {self.minimum}")]
        if self.maximum is not None and value > self.maximum:
            return [Violation(self.attribute, f"must be less than or equal to {self.maximum}")]
        return []


@dataclass(frozen=True)
class Length(_VersionGated):
    attribute: str
    minimum: int
    versions: Tuple[str, ...] = ()

    def check(self, entity: Any, version: Optional[str]) -> Iterable[Violation]:
        members, issues = _members(entity, self.attribute)
        if issues:
            return issues
        if len(members) < self.minimum:
            return [Violation(self.attribute, f"must have at least {self.minimum} members")]
        return []


@dataclass(frozen=True)
class ClosedRing(_VersionGated):
    attribute: str
    versions: Tuple[str, ...] = ()

    def check(self, entity: Any, version: Optional[str]) -> Iterable[Violation]:
        members, issues = _members(entity, self.attribute)
        if issues:
            return issues
        if members and members[0] != members[-1]:
            return [Violation(self.attribute, "must have the same first and last member")]
        return []


@dataclass(frozen=True)
class Validity(_VersionGated):
    """A single nested entity must itself be valid."""

    attribute: str
    versions: Tuple[str, ...] = ()

    def check(self, entity: Any, version: Optional[str]) -> Iterable[Violation]:
        child = getattr(entity, self.attribute, None)
        if child is None:
            return []
        return [
            Violation(_join_path(self.attribute, v.attribute_path), v.message)
            for v in _collect(child, version)
        ]


@dataclass(frozen=True)
class CollectionValidity(_VersionGated):
    """Every member of a collection must itself be valid."""

    attribute: str
    versions: Tuple[str, ...] = ()

    def check(self, entity: Any, version: Optional[str]) -> Iterable[Violation]:
        members, issues = _members(entity, self.attribute)
        for idx, member in enumerate(members):
            prefix = f"{self.attribute}[{idx}]"
            issues.extend(
                Violation(_join_path(prefix, v.attribute_path), v.message)
                for v in _collect(member, version)
            )
        return issues


Rule = Union[
    Presence,
    Inclusion,
    InclusionOfMembers,
    Format,
    Dependency,
    Numericality,
    Length,
    ClosedRing,
    Validity,
    CollectionValidity,
]


def compile_format(pattern: str) -> Pattern[str]:
    return re.compile(pattern)


# -------------------------
# Engine
# -------------------------


def _resolve_version(version: Any) -> Optional[str]:
    if version is None:
        return None
    raw = getattr(version, "version", version)
    try:
        return normalize_cap_version(raw)
    except UnsupportedVersionError:
        return None


def _collect(entity: Any, version: Optional[str]) -> List[Violation]:
    rules = getattr(type(entity), "validation_rules", None)
    if rules is None:
        return [Violation("", f"{type(entity).__name__} cannot be validated")]
    issues: List[Violation] = []
    for rule in rules():
        if not rule.applies_to(version):
            continue
        # several rules on one attribute can report the same wrong type
        for issue in rule.check(entity, version):
            if issue not in issues:
                issues.append(issue)
    return issues


def validate(entity: Any, version: Any = None) -> ValidationResult:
    """Validate *entity* and, recursively, every entity it owns.

    The CAP version used for version-gated rules is *version* when given,
    otherwise the entity's own ``cap_version`` (alerts carry one). The version
    found at the root applies to every nested entity.

    Never raises for invalid data and never mutates the entity; each problem
    becomes a :class:`Violation` in the returned result.
    """
    if version is None:
        version = getattr(entity, "cap_version", None)
    return ValidationResult(tuple(_collect(entity, _resolve_version(version))))
