"""Saved requests: persisted, pre-filled operation calls that can be replayed."""

import json
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, Field, PrivateAttr
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from .coercion import coerce_parameters
from .config import Settings
from .errors import ConfigurationError, NotFoundError
from .models import Operation

if TYPE_CHECKING:
    from .dispatcher import CommandDispatcher, CommandResult

logger = logging.getLogger(__name__)


def build_parameters(operation: Operation, raw_values: Dict[str, Any]) -> Dict[str, Any]:
    """Parameters of a saved request from operator input.

    Values are converted with the value callback of their declared type;
    values left blank are not stored.
    """
    return coerce_parameters(operation, raw_values)


class SaveStatus(str, Enum):
    """Outcome of saving a request."""

    NEW = "new"
    UPDATED = "updated"


class SavedRequest(BaseModel):
    """A named operation call with pre-filled parameters."""

    id: str = Field(..., pattern=r"^[a-z0-9_]+$", description="Machine name of the saved request")
    label: str = Field(..., min_length=1, max_length=255, description="Human readable label")
    service_api: str = Field(..., description="Service api id")
    command_name: str = Field(..., description="Operation name")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Operation parameters")

    _dispatcher: Any = PrivateAttr(default=None)

    def bind(self, dispatcher: "CommandDispatcher") -> "SavedRequest":
        """Attach the dispatcher used by :meth:`execute`."""
        self._dispatcher = dispatcher
        return self

    def execute(self, dispatcher: Optional["CommandDispatcher"] = None) -> "CommandResult":
        """Execute the saved operation call.

        The referenced service api and operation are resolved now, so a
        request pointing at a removed operation fails here with a
        ``NotFoundError``.
        """
        dispatcher = dispatcher or self._dispatcher
        if dispatcher is None:
            raise ConfigurationError(f'Saved request "{self.id}" is not bound to a dispatcher')
        logger.info(f"Executing saved request {self.id} ({self.service_api}.{self.command_name})")
        return dispatcher.execute(self.service_api, self.command_name, self.parameters)


class SavedRequestStore:
    """SQLite persistence for saved requests."""

    def __init__(self, database_url: str, dispatcher: Optional["CommandDispatcher"] = None):
        self.database_url = database_url
        self.dispatcher = dispatcher
        self._engine: Optional[Engine] = None

    @classmethod
    def from_settings(
        cls, settings: Settings, dispatcher: Optional["CommandDispatcher"] = None
    ) -> "SavedRequestStore":
        settings.ensure_directories()
        return cls(f"sqlite:///{settings.requests_db_path}", dispatcher)

    @property
    def engine(self) -> Engine:
        """SQLAlchemy engine, schema created on first access."""
        if self._engine is None:
            if ":memory:" in self.database_url:
                self._engine = create_engine(
                    self.database_url,
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                )
            else:
                self._engine = create_engine(
                    self.database_url,
                    connect_args={"check_same_thread": False, "timeout": 30},
                )
            self._initialize_schema()
        return self._engine

    def _initialize_schema(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                text(
                    """
                    CREATE TABLE IF NOT EXISTS http_config_requests (
                      id TEXT PRIMARY KEY,
                      label TEXT NOT NULL,
                      service_api TEXT NOT NULL,
                      command_name TEXT NOT NULL,
                      parameters_json TEXT NOT NULL
                    )
                    """
                )
            )

    def _row_to_request(self, row: Any) -> SavedRequest:
        request = SavedRequest(
            id=row.id,
            label=row.label,
            service_api=row.service_api,
            command_name=row.command_name,
            parameters=json.loads(row.parameters_json),
        )
        if self.dispatcher is not None:
            request.bind(self.dispatcher)
        return request

    def load(self, request_id: str) -> Optional[SavedRequest]:
        """Load a saved request; returns ``None`` when it does not exist."""
        with self.engine.connect() as conn:
            row = conn.execute(
                text(
                    "SELECT id, label, service_api, command_name, parameters_json "
                    "FROM http_config_requests WHERE id = :id"
                ),
                {"id": request_id},
            ).first()
        return self._row_to_request(row) if row is not None else None

    def load_multiple(self, service_api: Optional[str] = None) -> List[SavedRequest]:
        """All saved requests ordered by id, optionally for one service api."""
        query = "SELECT id, label, service_api, command_name, parameters_json FROM http_config_requests"
        params: Dict[str, Any] = {}
        if service_api is not None:
            query += " WHERE service_api = :service_api"
            params["service_api"] = service_api
        query += " ORDER BY id"

        with self.engine.connect() as conn:
            rows = conn.execute(text(query), params).fetchall()
        return [self._row_to_request(row) for row in rows]

    def exists(self, request_id: str) -> bool:
        with self.engine.connect() as conn:
            row = conn.execute(
                text("SELECT 1 FROM http_config_requests WHERE id = :id"), {"id": request_id}
            ).first()
        return row is not None

    def save(self, request: SavedRequest) -> SaveStatus:
        """Insert or update a saved request."""
        values = {
            "id": request.id,
            "label": request.label,
            "service_api": request.service_api,
            "command_name": request.command_name,
            "parameters_json": json.dumps(request.parameters),
        }

        with self.engine.begin() as conn:
            updated = conn.execute(
                text(
                    "UPDATE http_config_requests SET label = :label, service_api = :service_api, "
                    "command_name = :command_name, parameters_json = :parameters_json WHERE id = :id"
                ),
                values,
            ).rowcount
            if not updated:
                conn.execute(
                    text(
                        "INSERT INTO http_config_requests "
                        "(id, label, service_api, command_name, parameters_json) "
                        "VALUES (:id, :label, :service_api, :command_name, :parameters_json)"
                    ),
                    values,
                )

        status = SaveStatus.UPDATED if updated else SaveStatus.NEW
        logger.info(f"Saved request {request.id} ({status.value})")
        if self.dispatcher is not None:
            request.bind(self.dispatcher)
        return status

    def delete(self, request_id: str) -> bool:
        """Delete a saved request; returns whether it existed."""
        with self.engine.begin() as conn:
            deleted = conn.execute(
                text("DELETE FROM http_config_requests WHERE id = :id"), {"id": request_id}
            ).rowcount
        return bool(deleted)

    def execute(self, request_id: str) -> "CommandResult":
        """Load and execute a saved request.

        Raises:
            NotFoundError: If the saved request does not exist
        """
        request = self.load(request_id)
        if request is None:
            raise NotFoundError(f'Saved request "{request_id}" does not exist', {"request": request_id})
        return request.execute()
