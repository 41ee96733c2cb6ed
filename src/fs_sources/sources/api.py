"""Source description and source reference operations.

Every read goes through the transport and is handed to the resolver; every
transport error propagates to the caller untouched.
"""

import asyncio
from typing import Dict, Iterable, List, Optional, Union
from ..factory import WrapperFactory, default_factory
from ..helpers import CHILD_AND_PARENTS, get_entity_type, last_path_segment
from ..log import get_logger
from ..schemas.gedcomx import Link, SourceDescription, SourceRef
from ..transport import FS_JSON, Transport
from .resolver import SourceDescriptionView, SourcesView, resolve, resolve_source_description

logger = get_logger("sources")

SOURCE_DESCRIPTIONS_PATH = "/platform/sources/descriptions"
SOURCE_REFERENCES_QUERY_PATH = "/platform/tree/source-references"

def _reason_headers(change_message: Optional[str]) -> Dict[str, str]:
    return {"X-Reason": change_message} if change_message else {}

class SourcesClient:
    def __init__(self, transport: Transport, factory: WrapperFactory = default_factory):
        self.transport = transport
        self.factory = factory

    async def get_source_description(self, url: str) -> SourceDescriptionView:
        response = await self.transport.get(url)
        return resolve_source_description(response.get_data(), self.factory, response=response)

    async def fetch_many(self, urls: Iterable[str]) -> Dict[str, SourceDescriptionView]:
        """
        Reads several source descriptions concurrently.
        Returns url -> view once all succeed; the first failure is raised
        and the other results are discarded.
        """
        urls = list(urls)
        views = await asyncio.gather(*(self.get_source_description(u) for u in urls))
        return dict(zip(urls, views))

    get_multi_source_description = fetch_many

    async def get_source_refs_query(self, url: str) -> SourcesView:
        """People, couples and child-and-parents relationships citing a source description."""
        response = await self.transport.get(url, headers={"Accept": FS_JSON})
        return resolve(response.get_data(), include_descriptions=False, factory=self.factory, response=response)

    async def get_source_attachments(self, source_url: str) -> SourcesView:
        """
        Entities that have `source_url` attached as a source, along with the
        descriptions pointing at it.
        """
        response = await self.transport.get(
            SOURCE_REFERENCES_QUERY_PATH,
            params={"source": source_url},
            headers={"X-FS-Feature-Tag": "local-source-description-references"},
        )
        return resolve(response.get_data(), include_descriptions=True, factory=self.factory, response=response)

    async def get_source_refs(self, url: str) -> SourcesView:
        """
        Deprecated source-references endpoint of a person or relationship.
        The server answers with a Location pointing at the consolidated resource.
        """
        response = await self.transport.get(url, headers={
            "Accept": FS_JSON,
            "X-Expect-Override": "200-ok",
            "X-FS-Feature-Tag": "consolidate-redundant-resources",
        })
        location = response.get_header("Location")
        if location:
            response = await self.transport.get(location)
        else:
            logger.debug(f"No Location header from {url}, using the first response")
        return resolve(
            response.get_data(),
            include_descriptions=False,
            root_entity_type=self._root_type(url),
            factory=self.factory,
            response=response,
        )

    async def get_sources_query(self, url: str) -> SourcesView:
        """Source references and descriptions of one person, couple or child-and-parents relationship."""
        response = await self.transport.get(url, headers={"Accept": FS_JSON})
        return resolve(
            response.get_data(),
            include_descriptions=True,
            root_entity_type=self._root_type(url),
            factory=self.factory,
            response=response,
        )

    def _root_type(self, url: str) -> Optional[str]:
        entity_type = get_entity_type(url)
        if entity_type is None:
            logger.warning(f"Cannot tell the entity type of {url}; resolving as a multi-entity response")
        return entity_type

    async def delete_source_description(self, url: str, change_message: Optional[str] = None):
        """
        Note: FamilySearch does not delete the references to a deleted
        description; callers have to remove those themselves.
        """
        return await self.transport.delete(url, headers=_reason_headers(change_message))

    async def delete_source_ref(self, url: str, change_message: Optional[str] = None):
        return await self.transport.delete(url, headers=_reason_headers(change_message))

    async def save_source_description(
        self,
        source_description: Union[SourceDescription, dict],
        change_message: Optional[str] = None,
    ) -> SourceDescription:
        """Creates (no id) or updates the description, then records its id and URL."""
        source_description = self.factory.create_source_description(source_description)
        if change_message:
            source_description.attribution = self.factory.create_attribution(change_message)
        url = source_description.source_description_url or SOURCE_DESCRIPTIONS_PATH
        payload = {"sourceDescriptions": [source_description.to_wire()]}
        response = await self.transport.post(url, payload)

        location = response.get_header("Location")
        entity_id = response.get_header("X-ENTITY-ID") or last_path_segment(location)
        if entity_id and not source_description.id:
            source_description.id = entity_id
        if location:
            source_description.links["description"] = Link(href=location)
        return source_description

    async def save_source_ref(
        self,
        url: str,
        source_ref: Union[SourceRef, dict],
        change_message: Optional[str] = None,
    ) -> SourceRef:
        """Attaches (or updates) a source reference on the entity addressed by `url`."""
        source_ref = self.factory.create_source_ref(source_ref)
        entity_type = get_entity_type(url)
        if entity_type is None:
            raise ValueError(f"Cannot attach a source to {url}")

        headers = {}
        if entity_type == CHILD_AND_PARENTS:
            headers["Content-Type"] = FS_JSON
        entity: Dict[str, object] = {"sources": [source_ref.to_wire()]}
        if change_message:
            entity["attribution"] = self.factory.create_attribution(change_message).to_wire()
        response = await self.transport.post(url, {entity_type: [entity]}, headers=headers)

        entity_id = response.get_header("X-ENTITY-ID")
        if entity_id:
            source_ref.id = entity_id
        source_ref.attached_entity_url = url
        return source_ref

    async def create_and_attach_source(
        self,
        url: str,
        source_description: Union[SourceDescription, dict],
        change_message: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> SourceRef:
        """
        Saves the description first when it has no id yet, then attaches a
        reference to it on the entity at `url`.
        """
        source_description = self.factory.create_source_description(source_description)
        if not source_description.id:
            source_description = await self.save_source_description(source_description)

        source_ref = self.factory.create_source_ref({"source_description": source_description})
        if tags:
            source_ref.set_tags(tags)
        return await self.save_source_ref(url, source_ref, change_message)
