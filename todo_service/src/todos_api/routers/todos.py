from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..errors import ValidationError
from ..schemas import (
    CreateTODORequest,
    CreateTODOResponse,
    DeleteTODORequest,
    DeleteTODOResponse,
    ReadTODOResponse,
    TodoOut,
    UpdateTODORequest,
    UpdateTODOResponse,
)
from ..services import TODOService, get_todo_service
from ..utils import parse_int_param

logger = logging.getLogger(__name__)

DEFAULT_PREV_ID = 0
DEFAULT_PAGE_SIZE = 5

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_ERROR_RESPONSES = {
    400: {"description": "Invalid request (empty body on the wire)"},
    500: {"description": "Store failure (empty body on the wire)"},
}


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=ReadTODOResponse,
    summary="List TODOs",
    description=(
        "List TODOs newest first using keyset pagination.\n\n"
        "Query parameters:\n"
        "- prev_id: smallest ID seen on the previous page; 0 or missing for the newest page\n"
        "- size: maximum number of items to return (default 5)\n\n"
        "Unparseable values fall back to their defaults."
    ),
    responses={500: _ERROR_RESPONSES[500]},
)
def read_todos(
    prev_id: Optional[str] = Query(None, description="Return only TODOs with an ID below this one"),
    size: Optional[str] = Query(None, description="Maximum number of items to return"),
    svc: TODOService = Depends(get_todo_service),
) -> ReadTODOResponse:
    todos = svc.read_todos(
        parse_int_param(prev_id, DEFAULT_PREV_ID),
        parse_int_param(size, DEFAULT_PAGE_SIZE),
    )
    return ReadTODOResponse(todos=[TodoOut.from_entity(t) for t in todos])


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=CreateTODOResponse,
    summary="Create TODO",
    responses=_ERROR_RESPONSES,
)
def create_todo(
    payload: CreateTODORequest, svc: TODOService = Depends(get_todo_service)
) -> CreateTODOResponse:
    """
    Create a TODO and return it with its store-assigned ID and timestamps.
    """
    if payload.subject == "":
        raise ValidationError("subject is required")
    created = svc.create_todo(payload.subject, payload.description)
    return CreateTODOResponse(todo=TodoOut.from_entity(created))


# PUBLIC_INTERFACE
@router.put(
    "",
    response_model=UpdateTODOResponse,
    summary="Update TODO",
    responses={**_ERROR_RESPONSES, 404: {"description": "TODO not found"}},
)
def update_todo(
    payload: UpdateTODORequest, svc: TODOService = Depends(get_todo_service)
) -> UpdateTODOResponse:
    """
    Replace subject and description of the TODO identified by ``id``.
    """
    if payload.subject == "" or payload.id == 0:
        raise ValidationError("id and subject are required")
    updated = svc.update_todo(payload.id, payload.subject, payload.description)
    return UpdateTODOResponse(todo=TodoOut.from_entity(updated))


# PUBLIC_INTERFACE
@router.delete(
    "",
    response_model=DeleteTODOResponse,
    summary="Delete TODOs",
    description="Delete every TODO whose ID is listed. 404 when none of them exist.",
    responses={**_ERROR_RESPONSES, 404: {"description": "No listed TODO exists"}},
)
def delete_todos(
    payload: DeleteTODORequest, svc: TODOService = Depends(get_todo_service)
) -> DeleteTODOResponse:
    if not payload.ids:
        raise ValidationError("ids must not be empty")
    svc.delete_todos(payload.ids)
    logger.info("Deleted todos %s", payload.ids)
    return DeleteTODOResponse()
