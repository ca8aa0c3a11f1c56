import logging
from html import escape
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from users_api.data_store import JsonUserStore
from users_api.database import User, get_session
from users_api.errors import StoreError
from users_api.middleware import authenticate_token
from users_api.models import DbUserOut, StoredUser, UserRecord
from users_api.validation import has_id, parse_path_id, validate_user

logger = logging.getLogger(__name__)

READ_ERROR = "Error connecting to the data source."
SAVE_ERROR = "Error saving the user."
UPDATE_ERROR = "Error updating the user."
DELETE_ERROR = "Error deleting the user."
NO_DATA_ERROR = "No data received."
DB_ERROR = "Error communicating with the database."

router = APIRouter()


def get_store(request: Request) -> JsonUserStore:
    return request.app.state.store


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# --- Users (JSON file) ---

@router.get("/users")
def list_users(store: JsonUserStore = Depends(get_store)):
    try:
        users = store.load_all()
    except StoreError:
        logger.exception("Could not load users")
        return _error(500, READ_ERROR)
    return JSONResponse(content=users)


@router.get("/users/{user_id}", response_class=HTMLResponse)
def show_user(user_id: str):
    # Placeholder: echoes the id without looking the user up.
    return f"<h1>Showing information for user with ID: {escape(user_id)}</h1>"


@router.post("/users", status_code=201)
def create_user(
    payload: Optional[UserRecord] = Body(default=None),
    store: JsonUserStore = Depends(get_store),
):
    candidate = payload.sent_fields() if payload else {}
    try:
        users = store.load_all()
    except StoreError:
        logger.exception("Could not load users")
        return _error(500, READ_ERROR)

    result = validate_user(candidate, users)
    if not result.is_valid:
        return _error(400, result.error)

    user = StoredUser.model_validate(candidate).model_dump()
    users.append(user)
    try:
        store.save_all(users)
    except StoreError:
        logger.exception("Could not save user %r", user["id"])
        return _error(500, SAVE_ERROR)

    logger.info("Created user %r", user["id"])
    return JSONResponse(status_code=201, content=user)


@router.put("/users/{user_id}")
def update_user(
    user_id: str,
    payload: Optional[UserRecord] = Body(default=None),
    store: JsonUserStore = Depends(get_store),
):
    changes = payload.sent_fields() if payload else {}
    # empty payload answers 500, not 400
    if not changes:
        return _error(500, NO_DATA_ERROR)

    target_id = parse_path_id(user_id)
    try:
        users = store.load_all()
    except StoreError:
        logger.exception("Could not load users")
        return _error(500, READ_ERROR)

    # validate the record as it will be stored
    current = next((user for user in users if has_id(user, target_id)), {})
    result = validate_user({**current, **changes}, users, id_being_updated=target_id)
    if not result.is_valid:
        return _error(400, result.error)

    users = [
        StoredUser.model_validate({**user, **changes}).model_dump() if has_id(user, target_id) else user
        for user in users
    ]
    try:
        store.save_all(users)
    except StoreError:
        logger.exception("Could not update user %r", target_id)
        return _error(500, UPDATE_ERROR)

    return JSONResponse(content=changes)


@router.delete("/users/{user_id}", status_code=204)
def delete_user(user_id: str, store: JsonUserStore = Depends(get_store)):
    target_id = parse_path_id(user_id)
    try:
        users = store.load_all()
    except StoreError:
        logger.exception("Could not load users")
        return _error(500, READ_ERROR)

    remaining = [user for user in users if not has_id(user, target_id)]
    try:
        store.save_all(remaining)
    except StoreError:
        logger.exception("Could not delete user %r", target_id)
        return _error(500, DELETE_ERROR)

    logger.info("Deleted %d user(s) with id %r", len(users) - len(remaining), target_id)
    return Response(status_code=204)


# --- Users (database) ---

@router.get("/db-users", response_model=list[DbUserOut])
def list_db_users(session: Session = Depends(get_session)):
    try:
        users = session.scalars(select(User)).all()
    except SQLAlchemyError:
        logger.exception("Database query for users failed")
        return _error(500, DB_ERROR)
    return [DbUserOut.model_validate(user) for user in users]


@router.get("/me")
def current_user(claims: dict[str, Any] = Depends(authenticate_token)):
    return {"user": claims}


# --- Misc ---

@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    port = request.app.state.settings.port
    return (
        "<h1>Users API</h1>"
        "<p>A small FastAPI backend serving a user list.</p>"
        f"<p>Running on port: {port}</p>"
    )


@router.get("/search", response_class=HTMLResponse)
def search(
    term: str = Query(default="", alias="termino"),
    category: str = Query(default="", alias="categoria"),
):
    return (
        "<h2>Search results:</h2>"
        f"<p>Terms: {escape(term or 'Not specified')}</p>"
        f"<p>Category: {escape(category or 'All')}</p>"
    )


@router.post("/form")
def submit_form(payload: Optional[dict[str, Any]] = Body(default=None)):
    payload = payload or {}
    name = payload.get("name") or "Anonymous"
    email = payload.get("email") or "Not provided"
    return {"message": "Data received", "data": {"name": name, "email": email}}


@router.post("/api/data", status_code=201)
def receive_data(payload: Optional[dict[str, Any]] = Body(default=None)):
    if not payload:
        return _error(400, "No data received")
    return {"message": "JSON data received", "data": payload}


@router.get("/error")
def trigger_error():
    raise RuntimeError("Intentional error")
