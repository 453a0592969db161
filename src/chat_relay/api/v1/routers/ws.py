from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from chat_relay.api.deps import DirectoryDep, ManagerDep
from chat_relay.api.v1.schemas.message import (
    HistoryRequest,
    JoinPayload,
    SendMessagePayload,
    message_to_wire,
    send_payload_to_dto,
)
from chat_relay.application.exceptions import StoreError
from chat_relay.application.uow import UnitOfWorkFactory
from chat_relay.config import settings
from chat_relay.domain.entities.message import Message
from chat_relay.infrastructure.ws.manager import ConnectionManager
from chat_relay.infrastructure.ws.protocol import WsInbound, WsOutbound
from chat_relay.services import message_service, session_service
from chat_relay.services.session_directory import SessionDirectory

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])


@router.websocket("/ws/chat")
async def ws_chat(
    websocket: WebSocket,
    directory: DirectoryDep,
    manager: ManagerDep,
) -> None:
    await websocket.accept()
    connection_id = manager.register(websocket)
    logger.info("Connected: %s", connection_id)

    heartbeat_task = asyncio.create_task(
        _heartbeat(websocket), name=f"ws-heartbeat-{connection_id}",
    )
    try:
        await _read_loop(websocket, connection_id, directory, manager)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %s", connection_id)
    finally:
        heartbeat_task.cancel()
        await session_service.leave(connection_id, directory, manager)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("Heartbeat stopped", exc_info=True)


async def _read_loop(
    ws: WebSocket,
    connection_id: str,
    directory: SessionDirectory,
    manager: ConnectionManager,
) -> None:
    uow_factory: UnitOfWorkFactory = ws.app.state.uow_factory
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except ValidationError:
            await _send_error(manager, connection_id, "invalid_payload")
            continue

        try:
            if msg.type == "join":
                join = JoinPayload.model_validate(msg.payload)
                await session_service.join(
                    connection_id,
                    directory,
                    manager,
                    username=join.username,
                    role=join.role,
                    user_id=join.user_id,
                )

            elif msg.type == "get-chat-history":
                await _handle_history(
                    connection_id, HistoryRequest.model_validate(msg.payload), manager, uow_factory,
                )

            elif msg.type == "send-message":
                await _handle_send(
                    connection_id,
                    SendMessagePayload.model_validate(msg.payload),
                    directory,
                    manager,
                    uow_factory,
                )

            elif msg.type == "ping":
                await manager.send_to_connection(connection_id, "pong", {})

            else:
                await _send_error(manager, connection_id, "unknown_type", type=msg.type)

        except ValidationError as exc:
            await _send_error(manager, connection_id, "invalid_data", detail=str(exc))


async def _handle_history(
    connection_id: str,
    request: HistoryRequest,
    manager: ConnectionManager,
    uow_factory: UnitOfWorkFactory,
) -> None:
    try:
        messages = await message_service.get_chat_history(request.user_id, uow_factory())
    except StoreError as exc:
        logger.exception("Chat history failed for user_id=%s", request.user_id)
        await _send_error(manager, connection_id, "history_failed", detail=exc.detail)
        return
    await manager.send_to_connection(
        connection_id, "chat-history", [message_to_wire(m) for m in messages],
    )


async def _handle_send(
    connection_id: str,
    payload: SendMessagePayload,
    directory: SessionDirectory,
    manager: ConnectionManager,
    uow_factory: UnitOfWorkFactory,
) -> None:
    try:
        msg = await message_service.send_message(
            connection_id, send_payload_to_dto(payload), directory, uow_factory(),
        )
    except StoreError as exc:
        logger.exception("Send message failed for connection=%s", connection_id)
        await _send_error(manager, connection_id, "send_failed", detail=exc.detail)
        return
    await deliver_message(msg, manager)


async def deliver_message(message: Message, manager: ConnectionManager) -> None:
    data = message_to_wire(message)
    for group in message_service.recipient_groups(message):
        await manager.broadcast_to_group(group, "receive-message", data)


async def _send_error(
    manager: ConnectionManager,
    connection_id: str,
    code: str,
    **extra: str,
) -> None:
    await manager.send_to_connection(connection_id, "error", {"code": code, **extra})
