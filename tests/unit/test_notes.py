import pytest
from unittest.mock import AsyncMock, MagicMock
from fs_sources.notes import NotesClient
from fs_sources.schemas.gedcomx import Link, Note

def _fake_transport():
    transport = MagicMock()
    transport.post = AsyncMock()
    transport.delete = AsyncMock()
    return transport

@pytest.mark.asyncio
async def test_create_note_on_person(make_response):
    """
    WHY: New notes are posted inside the owning entity, keyed by its collection name.
    HOW: Save a new note to a person's notes URL with a change message.
    EXPECTED: persons payload with the note and attribution; id and link taken from response headers.
    """
    transport = _fake_transport()
    transport.post.return_value = make_response(None, status_code=201, headers={
        "X-ENTITY-ID": "N1",
        "Location": "https://api.test/platform/tree/persons/P1/notes/N1",
    })
    client = NotesClient(transport)

    note = await client.save_note(
        {"subject": "Birth", "text": "Born at home"},
        url="https://api.test/platform/tree/persons/P1/notes",
        change_message="adding",
    )

    (url, payload), kwargs = transport.post.call_args
    assert url == "https://api.test/platform/tree/persons/P1/notes"
    assert payload == {"persons": [{
        "notes": [{"subject": "Birth", "text": "Born at home"}],
        "attribution": {"changeMessage": "adding"},
    }]}
    assert kwargs["headers"] == {}
    assert note.id == "N1"
    assert note.note_url == "https://api.test/platform/tree/persons/P1/notes/N1"

@pytest.mark.asyncio
async def test_update_note_uses_own_url_child_and_parents(make_response):
    transport = _fake_transport()
    transport.post.return_value = make_response(None, status_code=204)
    client = NotesClient(transport)
    note = Note(id="N2", subject="s", text="t", links={
        "note": Link(href="https://api.test/platform/tree/child-and-parents-relationships/C1/notes/N2"),
    })

    await client.save_note(note)

    (url, payload), kwargs = transport.post.call_args
    assert url.endswith("/child-and-parents-relationships/C1/notes/N2")
    assert list(payload) == ["childAndParentsRelationships"]
    assert kwargs["headers"] == {"Content-Type": "application/x-fs-v1+json"}

@pytest.mark.asyncio
async def test_save_note_without_url_rejected():
    client = NotesClient(_fake_transport())
    with pytest.raises(ValueError):
        await client.save_note({"subject": "s", "text": "t"})

@pytest.mark.asyncio
async def test_delete_note(make_response):
    transport = _fake_transport()
    transport.delete.return_value = make_response(None, status_code=204)
    client = NotesClient(transport)

    await client.delete_note("https://api.test/platform/tree/couple-relationships/R1/notes/N3", "wrong couple")

    transport.delete.assert_awaited_once_with(
        "https://api.test/platform/tree/couple-relationships/R1/notes/N3",
        headers={"X-Reason": "wrong couple"},
    )
