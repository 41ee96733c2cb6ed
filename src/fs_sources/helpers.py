import re
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

PERSONS = "persons"
RELATIONSHIPS = "relationships"
CHILD_AND_PARENTS = "childAndParentsRelationships"

ENTITY_TYPES = (PERSONS, RELATIONSHIPS, CHILD_AND_PARENTS)

# First match wins; person sub-resources such as /persons/P/notes stay persons
_ENTITY_PATTERNS = [
    (re.compile(r"/child-and-parents-relationships/"), CHILD_AND_PARENTS),
    (re.compile(r"/(couple-)?relationships/"), RELATIONSHIPS),
    (re.compile(r"/persons/"), PERSONS),
]

def get_entity_type(url: Optional[str]) -> Optional[str]:
    """
    Classifies a tree URL as the collection name its response is keyed under.
    Returns None for URLs that address none of the three entity kinds.
    """
    if not url:
        return None
    path = urlsplit(url).path
    for pattern, entity_type in _ENTITY_PATTERNS:
        if pattern.search(path):
            return entity_type
    return None

def remove_access_token(url: Optional[str]) -> Optional[str]:
    """Strips the access_token query parameter the API appends to some links."""
    if not url:
        return url
    parts = urlsplit(url)
    if "access_token" not in parts.query:
        return url
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "access_token"]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))

def last_path_segment(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    path = urlsplit(url).path.rstrip("/")
    return path.rsplit("/", 1)[-1] or None
