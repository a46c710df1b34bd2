from datetime import datetime
from typing import Any, Dict, List, Optional

from nexus_api.models.user import UserRole
from nexus_api.repositories.event_repository import EventRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.services.errors import NotFoundError, PermissionDenied, ValidationError


ORGANIZER_FIELDS = ("name", "email", "profile_picture", "role", "department")
PARTICIPANT_FIELDS = ("name", "email", "profile_picture", "major")
REQUIRED_FIELDS = ("title", "description", "date", "location")


class EventService:

    def __init__(self, event_repo: EventRepository, user_repo: UserRepository) -> None:
        self._event_repo = event_repo
        self._user_repo = user_repo

    async def list_events(self, organizer_id: Optional[str] = None) -> List[Dict[str, Any]]:
        events = await self._event_repo.list_events(organizer_id=organizer_id)
        return await self._populate(events)

    async def get_event(self, event_id: str) -> Dict[str, Any]:
        event = await self._require(event_id)
        return (await self._populate([event]))[0]

    async def create_event(self, organizer_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        if any(not fields.get(name) for name in REQUIRED_FIELDS):
            raise ValidationError("Title, description, date, and location are required")
        if not isinstance(fields["date"], datetime):
            raise ValidationError("Event date must be a datetime")
        max_participants = fields.get("max_participants")
        if max_participants is not None and max_participants < 1:
            raise ValidationError("Max participants must be at least 1")
        doc = {
            "title": fields["title"].strip(),
            "description": fields["description"],
            "date": fields["date"],
            "location": fields["location"].strip(),
            "max_participants": max_participants,
            "tags": fields.get("tags") or [],
            "image_url": fields.get("image_url") or "",
            "images": fields.get("images") or [],
        }
        event_id = await self._event_repo.create_event(organizer_id, doc)
        return await self.get_event(event_id)

    async def update_event(self, event_id: str, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        event = await self._require(event_id)
        if event["organizer_id"] != user_id:
            raise PermissionDenied("You can only update your own events")
        changes = {k: v for k, v in fields.items() if v or (k == "images" and v is not None)}
        if changes:
            await self._event_repo.update_event(event_id, changes)
        return await self.get_event(event_id)

    async def delete_event(self, event_id: str, user_id: str, role: Optional[str]) -> None:
        event = await self._require(event_id)
        if event["organizer_id"] != user_id and role != UserRole.ADMIN.value:
            raise PermissionDenied("You can only delete your own events")
        await self._event_repo.delete_event(event_id)

    async def join_event(self, event_id: str, user_id: str) -> int:
        event = await self._require(event_id)
        if user_id in event.get("participants", []):
            raise ValidationError("You have already joined this event")
        if not await self._event_repo.add_participant(event_id, user_id, event.get("max_participants")):
            # the conditional push lost to a concurrent join; re-read to say why
            event = await self._require(event_id)
            if user_id in event.get("participants", []):
                raise ValidationError("You have already joined this event")
            raise ValidationError("Event is full")
        event = await self._require(event_id)
        return len(event.get("participants", []))

    async def leave_event(self, event_id: str, user_id: str) -> None:
        await self._require(event_id)
        if not await self._event_repo.remove_participant(event_id, user_id):
            raise ValidationError("You are not a participant of this event")

    async def _require(self, event_id: str) -> Dict[str, Any]:
        event = await self._event_repo.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    async def _populate(self, events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        organizers = await self._user_repo.get_summaries({e["organizer_id"] for e in events}, ORGANIZER_FIELDS)
        participants = await self._user_repo.get_summaries(
            {p for e in events for p in e.get("participants", [])}, PARTICIPANT_FIELDS
        )
        for event in events:
            event["organizer"] = organizers.get(event["organizer_id"])
            event["participant_users"] = [participants[p] for p in event.get("participants", []) if p in participants]
        return events
