"""Builds typed wrappers from raw GEDCOM X fragments.

Everything that turns JSON into a schema object goes through WrapperFactory,
so a subclass can hand back richer types without touching the resolver.
"""

from typing import Any, Dict, Optional, Union
from .helpers import PERSONS, RELATIONSHIPS, CHILD_AND_PARENTS
from .schemas.gedcomx import (
    Attribution,
    ChildAndParentsRelationship,
    Note,
    Person,
    Relationship,
    SourceDescription,
    SourceRef,
)

Entity = Union[Person, Relationship, ChildAndParentsRelationship]

ENTITY_MODELS = {
    PERSONS: Person,
    RELATIONSHIPS: Relationship,
    CHILD_AND_PARENTS: ChildAndParentsRelationship,
}

class WrapperFactory:
    def create_source_description(self, data: Optional[Dict[str, Any]] = None) -> SourceDescription:
        if isinstance(data, SourceDescription):
            return data
        return SourceDescription.model_validate(data or {})

    def create_source_ref(self, data: Optional[Dict[str, Any]] = None) -> SourceRef:
        """
        Accepts wire data, or `{"source_description": <SourceDescription>}`
        when building a new reference to an existing description.
        """
        if isinstance(data, SourceRef):
            return data
        data = dict(data or {})
        description = data.pop("source_description", None)
        ref = SourceRef.model_validate(data)
        if description is not None:
            description = self.create_source_description(description)
            ref.description = description.source_description_url or (
                f"#{description.id}" if description.id else None
            )
            ref.source_description = description
        return ref

    def create_note(self, data: Optional[Dict[str, Any]] = None) -> Note:
        if isinstance(data, Note):
            return data
        return Note.model_validate(data or {})

    def create_attribution(self, change_message: Optional[str] = None) -> Attribution:
        return Attribution(change_message=change_message)

    def create_entity(self, entity_type: str, data: Optional[Dict[str, Any]]) -> Entity:
        """Wraps one entity; its raw sources are wrapped with create_source_ref."""
        data = dict(data or {})
        raw_sources = data.pop("sources", None) or []
        entity = ENTITY_MODELS[entity_type].model_validate(data)
        entity.sources = [self.create_source_ref(s) for s in raw_sources if s is not None]
        return entity

default_factory = WrapperFactory()
