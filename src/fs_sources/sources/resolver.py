"""Cross-reference resolver for sources responses.

A sources response is a GEDCOM X envelope with up to four sibling
collections: persons, relationships, childAndParentsRelationships and
sourceDescriptions. Entities cite descriptions either by absolute URL or by
a `#<id>` fragment pointing into the same envelope. resolve() wraps every
fragment into typed objects, stamps each SourceRef with the entity it came
from and, for a single-entity response, links fragment references to the
description they name.

The envelope itself is never modified; the returned view holds the typed
objects built from it plus a reference to the original dict.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from ..factory import Entity, WrapperFactory, default_factory
from ..helpers import PERSONS, RELATIONSHIPS, CHILD_AND_PARENTS, ENTITY_TYPES
from ..log import get_logger
from ..schemas.gedcomx import SourceDescription, SourceRef
from ..transport import Response

logger = get_logger("resolver")

def _collection(envelope: Dict[str, Any], name: str) -> List[Dict[str, Any]]:
    items = envelope.get(name)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]

def find_source_description(descriptions: Iterable[SourceDescription], id: Optional[str]) -> Optional[SourceDescription]:
    """Linear scan by id; first match wins. Ids compare as opaque strings."""
    for description in descriptions:
        if description.id == id:
            return description
    return None

@dataclass
class SourcesView:
    envelope: Dict[str, Any]
    persons: List[Entity] = field(default_factory=list)
    relationships: List[Entity] = field(default_factory=list)
    child_and_parents_relationships: List[Entity] = field(default_factory=list)
    source_descriptions: Optional[List[SourceDescription]] = None
    root_entity_type: Optional[str] = None
    response: Optional[Response] = field(default=None, compare=False, repr=False)

    @property
    def root(self) -> Optional[Entity]:
        if self.root_entity_type is None:
            return None
        entities = self._entities(self.root_entity_type)
        return entities[0] if entities else None

    def _entities(self, entity_type: str) -> List[Entity]:
        return {
            PERSONS: self.persons,
            RELATIONSHIPS: self.relationships,
            CHILD_AND_PARENTS: self.child_and_parents_relationships,
        }[entity_type]

    def get_source_descriptions(self) -> List[SourceDescription]:
        return self.source_descriptions or []

    def get_source_description(self, id: str) -> Optional[SourceDescription]:
        return find_source_description(self.get_source_descriptions(), id)

    def get_person_source_refs(self) -> List[SourceRef]:
        return [ref for person in self.persons for ref in person.sources]

    def get_couple_source_refs(self) -> List[SourceRef]:
        return [ref for couple in self.relationships for ref in couple.sources]

    def get_child_and_parents_source_refs(self) -> List[SourceRef]:
        return [ref for cap in self.child_and_parents_relationships for ref in cap.sources]

    def get_source_refs(self) -> List[SourceRef]:
        """Source refs of the root entity; empty for multi-entity responses."""
        root = self.root
        return root.sources if root is not None else []

    def get_person_ids(self) -> List[Optional[str]]:
        return [person.id for person in self.persons]

    def get_couple_ids(self) -> List[Optional[str]]:
        return [couple.id for couple in self.relationships]

    def get_child_and_parents_ids(self) -> List[Optional[str]]:
        return [cap.id for cap in self.child_and_parents_relationships]

@dataclass
class SourceDescriptionView:
    envelope: Dict[str, Any]
    source_descriptions: List[SourceDescription] = field(default_factory=list)
    response: Optional[Response] = field(default=None, compare=False, repr=False)

    def get_source_descriptions(self) -> List[SourceDescription]:
        return self.source_descriptions

    def get_source_description(self) -> Optional[SourceDescription]:
        return self.source_descriptions[0] if self.source_descriptions else None

def _wrap_entities(
    envelope: Dict[str, Any],
    entity_type: str,
    factory: WrapperFactory,
) -> List[Entity]:
    entities = []
    for raw in _collection(envelope, entity_type):
        entity = factory.create_entity(entity_type, raw)
        entity_url = entity.self_url
        for ref in entity.sources:
            ref.attached_entity_id = entity.id
            ref.attached_entity_url = entity_url
        entities.append(entity)
    return entities

def resolve(
    envelope: Optional[Dict[str, Any]],
    include_descriptions: bool = False,
    root_entity_type: Optional[str] = None,
    factory: WrapperFactory = default_factory,
    response: Optional[Response] = None,
) -> SourcesView:
    """
    Builds a SourcesView from a decoded sources envelope.

    With root_entity_type=None every entity of every collection is processed
    (source references query). With a root type, the first entity of that
    collection is the subject of the response and its fragment references
    are linked to the matching description, when descriptions are included.
    Missing collections, links or descriptions degrade to empty/None.
    """
    envelope = envelope if isinstance(envelope, dict) else {}
    if root_entity_type is not None and root_entity_type not in ENTITY_TYPES:
        raise ValueError(f"Unknown entity type: {root_entity_type}")

    descriptions = None
    if include_descriptions:
        descriptions = [
            factory.create_source_description(raw)
            for raw in _collection(envelope, "sourceDescriptions")
        ]

    view = SourcesView(
        envelope=envelope,
        persons=_wrap_entities(envelope, PERSONS, factory),
        relationships=_wrap_entities(envelope, RELATIONSHIPS, factory),
        child_and_parents_relationships=_wrap_entities(envelope, CHILD_AND_PARENTS, factory),
        source_descriptions=descriptions,
        root_entity_type=root_entity_type,
        response=response,
    )

    root = view.root
    if root is not None:
        for ref in root.sources:
            description_id = ref.description_id
            if description_id is None:
                continue
            ref.source_description = view.get_source_description(description_id)
            if ref.source_description is None:
                logger.debug(f"No source description {description_id!r} in envelope for {root.id}")
    return view

def resolve_source_description(
    envelope: Optional[Dict[str, Any]],
    factory: WrapperFactory = default_factory,
    response: Optional[Response] = None,
) -> SourceDescriptionView:
    envelope = envelope if isinstance(envelope, dict) else {}
    return SourceDescriptionView(
        envelope=envelope,
        source_descriptions=[
            factory.create_source_description(raw)
            for raw in _collection(envelope, "sourceDescriptions")
        ],
        response=response,
    )
