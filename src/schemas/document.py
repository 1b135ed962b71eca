"""Schema of the persisted document.

The whole application state is one JSON object with a list per collection.
Records inside the lists are plain dictionaries; the typed entity schemas
validate them at the manager boundary.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

Record = Dict[str, Any]

COLLECTIONS = (
    "users",
    "courses",
    "lessons",
    "assessments",
    "submissions",
    "progress",
    "assigned",
)

# Collections writable through the generic CRUD endpoints. Users are left
# out so passwords only ever enter the store hashed.
GENERIC_COLLECTIONS = (
    "courses",
    "lessons",
    "assessments",
    "submissions",
    "progress",
    "assigned",
)


class Document(BaseModel):
    """The full persisted state. ``Document()`` is the default document."""

    model_config = ConfigDict(extra="allow")

    users: List[Record] = Field(default_factory=list)
    courses: List[Record] = Field(default_factory=list)
    lessons: List[Record] = Field(default_factory=list)
    assessments: List[Record] = Field(default_factory=list)
    submissions: List[Record] = Field(default_factory=list)
    progress: List[Record] = Field(default_factory=list)
    assigned: List[Record] = Field(default_factory=list)

    def get_collection(self, name: str) -> List[Record]:
        """Return the named collection, or an empty list if it is unknown."""
        if name in COLLECTIONS:
            return getattr(self, name)
        value = (self.model_extra or {}).get(name)
        return value if isinstance(value, list) else []

    def set_collection(self, name: str, records: List[Record]) -> None:
        """Replace the named collection."""
        setattr(self, name, records)
