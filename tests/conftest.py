import pytest
import os
import httpx
from dotenv import load_dotenv

@pytest.fixture(scope="session", autouse=True)
def _load_env():
    # Load .env once per session to avoid side-effects on import time
    load_dotenv()

def _truthy(v: str | None) -> bool:
    return v is not None and v.strip().lower() not in ("", "0", "false", "no")

@pytest.fixture(scope="session")
def allow_integration(_load_env) -> bool:
    # Depends on _load_env to ensure .env is loaded first
    return _truthy(os.getenv("RUN_INTEGRATION_TESTS"))

@pytest.fixture(scope="session")
def fs_access_token(_load_env) -> str | None:
    token = os.getenv("FS_ACCESS_TOKEN")
    if not token or token == "...":
        return None
    return token

@pytest.fixture
def make_response():
    """
    Builds a fs_sources Response around a canned httpx.Response.
    Used where a test fakes the transport instead of HTTP.
    """
    from fs_sources.transport import Response

    def _make(data=None, headers=None, status_code=200, url="https://api.test/x"):
        raw = httpx.Response(
            status_code,
            json=data,
            headers=headers,
            request=httpx.Request("GET", url),
        )
        return Response(raw)

    return _make

@pytest.fixture
def mock_api():
    """
    Returns (build_transport, requests): build_transport(handler) gives a
    Transport whose httpx client is served by `handler` without network.
    Every request the client sends is appended to `requests`.
    """
    from fs_sources.config import Settings
    from fs_sources.transport import Transport

    requests = []

    def build_transport(handler, **kwargs):
        def _recording(request: httpx.Request):
            requests.append(request)
            return handler(request)

        settings = Settings(FS_ACCESS_TOKEN="test-token", FS_BASE_URL="https://api.test")
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(_recording),
            base_url=settings.api_base_url,
            follow_redirects=True,
        )
        kwargs.setdefault("retry_wait", 0)
        return Transport(settings=settings, client=client, **kwargs)

    return build_transport, requests

@pytest.fixture
def person_sources_envelope():
    """Sources query response for one person citing two descriptions."""
    return {
        "persons": [
            {
                "id": "PPPJ-MYZ",
                "links": {"person": {"href": "https://api.test/platform/tree/persons/PPPJ-MYZ"}},
                "sources": [
                    {
                        "id": "SR1",
                        "description": "#SD1",
                        "tags": [{"resource": "http://gedcomx.org/Name"}],
                    },
                    {
                        "id": "SR2",
                        "description": "https://api.test/platform/sources/descriptions/SD2",
                    },
                ],
            }
        ],
        "sourceDescriptions": [
            {
                "id": "SD1",
                "about": "https://familysearch.org/ark:/61903/1:1:XXXX",
                "titles": [{"value": "1900 United States Census"}],
                "citations": [{"value": "Census of 1900, sheet 4B"}],
            },
            {"id": "SD2", "titles": [{"value": "Parish register"}]},
        ],
    }

@pytest.fixture
def attachments_envelope():
    """Source references query response spanning all three entity collections."""
    return {
        "persons": [
            {
                "id": "P1",
                "links": {"person": {"href": "https://api.test/platform/tree/persons/P1"}},
                "sources": [{"id": "S-P1a", "description": "#SD1"}, {"id": "S-P1b", "description": "#SD2"}],
            },
            {
                "id": "P2",
                "links": {"person": {"href": "https://api.test/platform/tree/persons/P2"}},
                "sources": [{"id": "S-P2", "description": "#SD1"}],
            },
        ],
        "relationships": [
            {
                "id": "R1",
                "links": {"relationship": {"href": "https://api.test/platform/tree/couple-relationships/R1"}},
                "sources": [{"id": "S-R1", "description": "#SD1"}],
            }
        ],
        "childAndParentsRelationships": [
            {
                "id": "C1",
                "links": {"relationship": {"href": "https://api.test/platform/tree/child-and-parents-relationships/C1"}},
                "sources": [{"id": "S-C1", "description": "#SD2"}],
            }
        ],
        "sourceDescriptions": [
            {"id": "SD1", "titles": [{"value": "Birth certificate"}]},
            {"id": "SD2", "titles": [{"value": "Marriage record"}]},
        ],
    }
