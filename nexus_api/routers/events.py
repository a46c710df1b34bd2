from fastapi import APIRouter, Depends, status

from nexus_api.database.connection import mongo_db_dependency
from nexus_api.repositories.event_repository import EventRepository
from nexus_api.repositories.user_repository import UserRepository
from nexus_api.schemas.event import EventCreate, EventUpdate
from nexus_api.services.errors import ServiceError
from nexus_api.services.event_service import EventService
from nexus_api.utils.dependencies import as_http_exception, get_current_user


router = APIRouter(prefix="/api/events", tags=["events"])


def get_event_service(db = Depends(mongo_db_dependency)) -> EventService:
    return EventService(EventRepository(db), UserRepository(db))


@router.get("")
async def list_events(service: EventService = Depends(get_event_service)):
    return {"events": await service.list_events()}


@router.get("/user/{user_id}")
async def list_events_by_user(user_id: str, service: EventService = Depends(get_event_service)):
    return {"events": await service.list_events(organizer_id=user_id)}


@router.get("/{event_id}")
async def get_event(event_id: str, service: EventService = Depends(get_event_service)):
    try:
        return {"event": await service.get_event(event_id)}
    except ServiceError as exc:
        raise as_http_exception(exc)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(payload: EventCreate, current_user: dict = Depends(get_current_user), service: EventService = Depends(get_event_service)):
    try:
        event = await service.create_event(current_user["_id"], payload.model_dump())
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Event created successfully", "event": event}


@router.put("/{event_id}")
async def update_event(event_id: str, payload: EventUpdate, current_user: dict = Depends(get_current_user), service: EventService = Depends(get_event_service)):
    try:
        event = await service.update_event(event_id, current_user["_id"], payload.model_dump(exclude_unset=True))
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Event updated successfully", "event": event}


@router.delete("/{event_id}")
async def delete_event(event_id: str, current_user: dict = Depends(get_current_user), service: EventService = Depends(get_event_service)):
    try:
        await service.delete_event(event_id, current_user["_id"], current_user.get("role"))
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Event deleted successfully"}


@router.post("/{event_id}/join")
async def join_event(event_id: str, current_user: dict = Depends(get_current_user), service: EventService = Depends(get_event_service)):
    try:
        count = await service.join_event(event_id, current_user["_id"])
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Successfully joined event", "participants": count}


@router.post("/{event_id}/leave")
async def leave_event(event_id: str, current_user: dict = Depends(get_current_user), service: EventService = Depends(get_event_service)):
    try:
        await service.leave_event(event_id, current_user["_id"])
    except ServiceError as exc:
        raise as_http_exception(exc)
    return {"message": "Successfully left event"}
