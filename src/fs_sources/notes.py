from typing import Optional, Union
from .factory import WrapperFactory, default_factory
from .helpers import CHILD_AND_PARENTS, get_entity_type
from .log import get_logger
from .schemas.gedcomx import Link, Note
from .transport import FS_JSON, Transport

logger = get_logger("notes")

class NotesClient:
    def __init__(self, transport: Transport, factory: WrapperFactory = default_factory):
        self.transport = transport
        self.factory = factory

    async def save_note(
        self,
        note: Union[Note, dict],
        url: Optional[str] = None,
        change_message: Optional[str] = None,
    ) -> Note:
        """
        Creates a note on the entity at `url`, or updates an existing note
        at its own URL when `url` is omitted. A new note needs subject and text.
        """
        note = self.factory.create_note(note)
        url = url or note.note_url
        if not url:
            raise ValueError("A new note needs the notes URL of a person or relationship")

        entity_type = get_entity_type(url)
        if entity_type is None:
            raise ValueError(f"Cannot save a note to {url}")

        headers = {}
        if entity_type == CHILD_AND_PARENTS:
            headers["Content-Type"] = FS_JSON
        entity = {"notes": [note.to_wire()]}
        if change_message:
            entity["attribution"] = self.factory.create_attribution(change_message).to_wire()
        response = await self.transport.post(url, {entity_type: [entity]}, headers=headers)

        entity_id = response.get_header("X-ENTITY-ID")
        if entity_id:
            note.id = entity_id
        location = response.get_header("Location")
        if location:
            note.links["note"] = Link(href=location)
        logger.debug(f"Saved note {note.id} on {url}")
        return note

    async def delete_note(self, url: str, change_message: Optional[str] = None):
        headers = {"X-Reason": change_message} if change_message else {}
        if get_entity_type(url) == CHILD_AND_PARENTS:
            headers["Accept"] = FS_JSON
        return await self.transport.delete(url, headers=headers)
