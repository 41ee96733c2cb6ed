"""Pydantic models for the GEDCOM X fragments the sources API returns.

Each wire object (source description, source reference, note, and the three
entity kinds that carry sources) gets an explicit model. Unknown fields are
kept as extras so a model can be posted back without losing data.
"""

from __future__ import annotations
from typing import Any, ClassVar, Dict, List, Optional, Protocol, runtime_checkable
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..helpers import remove_access_token

class GedcomxModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        """JSON null reads as absent, so declared fields fall back to their defaults."""
        if not isinstance(data, dict):
            return data
        declared = set(cls.model_fields)
        declared.update(f.alias for f in cls.model_fields.values() if f.alias)
        cleaned = {}
        for key, value in data.items():
            if key in declared:
                if value is None:
                    continue
                if isinstance(value, list):
                    value = [v for v in value if v is not None]
                elif isinstance(value, dict) and key == "links":
                    value = {k: v for k, v in value.items() if v is not None}
            cleaned[key] = value
        return cleaned

    def to_wire(self) -> dict:
        """Dump with camelCase keys, dropping empty and default fields."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude_defaults=True)

class Link(GedcomxModel):
    href: Optional[str] = None
    template: Optional[str] = None
    title: Optional[str] = None

class ResourceReference(GedcomxModel):
    resource: Optional[str] = None
    resource_id: Optional[str] = None

class TextValue(GedcomxModel):
    value: Optional[str] = None
    lang: Optional[str] = None

class Attribution(GedcomxModel):
    contributor: Optional[ResourceReference] = None
    modified: Optional[int] = None
    change_message: Optional[str] = None

class Tag(GedcomxModel):
    resource: Optional[str] = None

class Note(GedcomxModel):
    id: Optional[str] = None
    subject: Optional[str] = None
    text: Optional[str] = None
    attribution: Optional[Attribution] = None
    links: Dict[str, Link] = {}

    @property
    def note_url(self) -> Optional[str]:
        link = self.links.get("note")
        return remove_access_token(link.href) if link else None

class SourceDescription(GedcomxModel):
    id: Optional[str] = None
    about: Optional[str] = None
    titles: List[TextValue] = []
    citations: List[TextValue] = []
    notes: List[Note] = []
    attribution: Optional[Attribution] = None
    links: Dict[str, Link] = {}

    @property
    def title(self) -> Optional[str]:
        return self.titles[0].value if self.titles else None

    @property
    def citation(self) -> Optional[str]:
        return self.citations[0].value if self.citations else None

    @property
    def text(self) -> Optional[str]:
        return self.notes[0].text if self.notes else None

    @property
    def source_description_url(self) -> Optional[str]:
        link = self.links.get("description")
        return remove_access_token(link.href) if link else None

class SourceRef(GedcomxModel):
    """A reference from a person or relationship to a source description.

    `description` is what the server sent: an absolute URL or a `#<id>`
    fragment. The last three fields are never on the wire; the resolver
    fills them in.
    """

    id: Optional[str] = None
    description: Optional[str] = None
    tags: List[Tag] = []
    attribution: Optional[Attribution] = None
    links: Dict[str, Link] = {}

    attached_entity_id: Optional[str] = Field(None, exclude=True)
    attached_entity_url: Optional[str] = Field(None, exclude=True)
    source_description: Optional[SourceDescription] = Field(None, exclude=True)

    @property
    def description_id(self) -> Optional[str]:
        """Id of the referenced description when `description` is a fragment."""
        if self.description and self.description.startswith("#"):
            return self.description[1:]
        return None

    @property
    def tag_resources(self) -> List[str]:
        return [t.resource for t in self.tags]

    def set_tags(self, tags: List[str]):
        self.tags = [Tag(resource=t) for t in tags]

    def add_tag(self, tag: str):
        if tag not in self.tag_resources:
            self.tags.append(Tag(resource=tag))

    def remove_tag(self, tag: str):
        self.tags = [t for t in self.tags if t.resource != tag]

    @property
    def source_ref_url(self) -> Optional[str]:
        link = self.links.get("source-reference")
        return remove_access_token(link.href) if link else None

class User(GedcomxModel):
    id: Optional[str] = None
    contact_name: Optional[str] = None
    display_name: Optional[str] = None
    person_id: Optional[str] = None
    tree_user_id: Optional[str] = None
    email: Optional[str] = None
    preferred_language: Optional[str] = None

@runtime_checkable
class SourceBearer(Protocol):
    """Anything that owns source references: a person or either relationship kind."""

    id: Optional[str]
    sources: List[SourceRef]

    @property
    def self_url(self) -> Optional[str]:
        ...

class Person(GedcomxModel):
    SELF_LINK: ClassVar[str] = "person"

    id: Optional[str] = None
    links: Dict[str, Link] = {}
    sources: List[SourceRef] = []

    @property
    def self_url(self) -> Optional[str]:
        link = self.links.get(self.SELF_LINK)
        return link.href if link else None

class Relationship(GedcomxModel):
    """Couple relationship."""

    SELF_LINK: ClassVar[str] = "relationship"

    id: Optional[str] = None
    person1: Optional[ResourceReference] = None
    person2: Optional[ResourceReference] = None
    links: Dict[str, Link] = {}
    sources: List[SourceRef] = []

    @property
    def self_url(self) -> Optional[str]:
        link = self.links.get(self.SELF_LINK)
        return link.href if link else None

class ChildAndParentsRelationship(GedcomxModel):
    SELF_LINK: ClassVar[str] = "relationship"

    id: Optional[str] = None
    father: Optional[ResourceReference] = None
    mother: Optional[ResourceReference] = None
    child: Optional[ResourceReference] = None
    links: Dict[str, Link] = {}
    sources: List[SourceRef] = []

    @property
    def self_url(self) -> Optional[str]:
        link = self.links.get(self.SELF_LINK)
        return link.href if link else None
