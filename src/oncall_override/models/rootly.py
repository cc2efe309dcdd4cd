"""Rootly directory user projection."""

from pydantic import BaseModel


class RootlyUser(BaseModel):
    """The parts of a Rootly user this bot needs."""

    id: str
    name: str
    email: str

    @classmethod
    def from_api(cls, record: dict) -> "RootlyUser":
        """Build from a JSON:API user resource ({"id": ..., "attributes": {...}})."""
        attributes = record.get("attributes") or {}
        return cls(
            id=str(record["id"]),
            name=attributes.get("name") or "",
            email=attributes.get("email") or "",
        )
