"""
Wire models for the WebSocket protocol.

Inbound frames are decoded once, here, into one request model per action.
Each model carries only the fields its action reads; anything else the peer
sends is ignored.
"""

import json
import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from mo_agent.models.tree import TreeNode

logger = logging.getLogger(__name__)


class MessageDecodeError(ValueError):
    """Raised when an inbound frame is not a well-formed action message."""


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Requests ---


class WriteFileRequest(_WireModel):
    action: Literal["writeFile"]
    file_path: str | None = None
    content: str | None = None


class CommitChangesRequest(_WireModel):
    action: Literal["commitChanges"]
    summary: str | None = None


class RollbackRequest(_WireModel):
    action: Literal["rollback"]


class ExecuteCommandRequest(_WireModel):
    action: Literal["executeCommand"]
    command: str | None = None


class RefreshFileTreeRequest(_WireModel):
    action: Literal["refreshFileTree"]


class InitializationCompleteRequest(_WireModel):
    action: Literal["initializationComplete"]


class SendAppIdRequest(_WireModel):
    action: Literal["sendAppId"]
    app_id: str | None = None


ActionRequest = Annotated[
    Union[
        WriteFileRequest,
        CommitChangesRequest,
        RollbackRequest,
        ExecuteCommandRequest,
        RefreshFileTreeRequest,
        InitializationCompleteRequest,
        SendAppIdRequest,
    ],
    Field(discriminator="action"),
]

KNOWN_ACTIONS = frozenset(
    {
        "writeFile",
        "commitChanges",
        "rollback",
        "executeCommand",
        "refreshFileTree",
        "initializationComplete",
        "sendAppId",
    }
)

_request_adapter: TypeAdapter[ActionRequest] = TypeAdapter(ActionRequest)


def decode_action(raw: str | bytes) -> ActionRequest | None:
    """
    Decodes one inbound frame into its request model.

    Returns:
        The typed request, or None when the frame names an action this server
        does not know. Unknown actions are dropped without a reply.

    Raises:
        MessageDecodeError: If the frame is not a JSON object or its fields
            have the wrong types for the named action.
    """
    try:
        payload: Any = json.loads(raw)
    except ValueError as e:
        # JSONDecodeError, or UnicodeDecodeError for binary frames that are not UTF-8.
        raise MessageDecodeError(f"Frame is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise MessageDecodeError("Frame must be a JSON object.")

    action = payload.get("action")
    if action not in KNOWN_ACTIONS:
        logger.debug("Ignoring message with unknown action: %r", action)
        return None

    try:
        return _request_adapter.validate_python(payload)
    except ValidationError as e:
        raise MessageDecodeError(f"Invalid '{action}' message: {e.error_count()} field error(s)") from e


# --- Responses ---


class ActionResponse(_WireModel):
    """Reply to one action. Optional fields are omitted from the wire when unset."""

    success: bool
    message: str
    content: str | None = None
    file_path: str | None = None
    directory_structure: list[TreeNode] | None = None
    output: str | None = None
    error: str | None = None
    summary: str | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class InitialSnapshot(_WireModel):
    """The first frame sent on every new connection."""

    is_initialized: bool
    directory_structure: list[TreeNode]
    server_address: str
    agent_type: str | None = None
    start_url: str | None = None
    success: bool = True
    setting: list[str] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
