from __future__ import annotations

from typing import Any, Callable, ClassVar, List, Optional, Tuple, Type, TypeVar

from ..schema.validation import Rule, ValidationResult, validate
from ..utils.cap_types import normalize_timestamp


E = TypeVar("E", bound="Entity")
Builder = Callable[[Any], None]


class Entity:
    """Behaviour shared by every CAP entity dataclass.

    Subclasses declare their rules once, at class level, in
    ``VALIDATION_RULES``; instances never carry rules of their own.

    Attributes named in ``TIMESTAMP_ATTRIBUTES`` are normalised whenever they
    are set, at construction or later: naive values become UTC and
    sub-second parts are dropped.
    """

    VALIDATION_RULES: ClassVar[Tuple[Rule, ...]] = ()
    TIMESTAMP_ATTRIBUTES: ClassVar[Tuple[str, ...]] = ()

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.TIMESTAMP_ATTRIBUTES:
            value = normalize_timestamp(value)
        super().__setattr__(name, value)

    @classmethod
    def validation_rules(cls) -> Tuple[Rule, ...]:
        return cls.VALIDATION_RULES

    @classmethod
    def build(cls: Type[E], builder: Optional[Builder] = None, **attributes: Any) -> E:
        """Create an entity from keyword attributes, then hand it to *builder*.

        Example:
            area = Area.build(lambda a: a.add_geocode(name="SAME", value="006113"),
                              area_desc="Cape Town CBD")
        """
        entity = cls(**attributes)
        if builder is not None:
            builder(entity)
        return entity

    def validate(self, version: Any = None) -> ValidationResult:
        return validate(self, version)

    def is_valid(self, version: Any = None) -> bool:
        return validate(self, version).valid


def add_child(collection: List[Any], child_type: Type[E], builder: Optional[Builder], attributes: dict) -> E:
    """Build a child entity, append it to *collection* and return it."""
    child = child_type.build(builder, **attributes)
    collection.append(child)
    return child
