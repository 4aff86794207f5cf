"""/ws/solve — WebSocket handler for interactive re-solving.

Connection lifecycle:
1. Client opens ws://host:8000/ws/solve
2. Client sends SliderConfig JSON on each slider change or drag step
3. Server solves the latest configuration only (last-write-wins)
4. Server sends a ``geometry`` text frame or an ``error`` text frame
5. On disconnect, pending work is dropped

Concurrency model:
- A task group runs two concurrent tasks: a reader and a solver.
- The reader receives messages, validates them, cancels any in-flight solve
  and posts slider sets to a memory channel.
- The solver drains the channel to the newest slider set and solves it in a
  worker thread.
- A lock protects ws.send_text to prevent interleaved frames.
"""

from __future__ import annotations

import json
import logging

import anyio
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from airway.geometry import solve_checked
from airway.models import SliderConfig, SolveResult

logger = logging.getLogger("airway.ws")

router = APIRouter()

# Maximum accepted WebSocket message size (bytes).
MAX_MESSAGE_SIZE = 16 * 1024  # 16 KB


def _build_error_frame(error: str, detail: str = "", field: str = "") -> str:
    """Build an ``error`` text frame."""
    payload: dict[str, str] = {"type": "error", "error": error}
    if detail:
        payload["detail"] = detail
    if field:
        payload["field"] = field
    return json.dumps(payload)


def _build_geometry_frame(result: SolveResult) -> str:
    """Build a ``geometry`` text frame from a solve result.

    Uses the CamelModel alias generator, so keys are camelCase.
    """
    payload = {"type": "geometry", **result.model_dump(mode="json", by_alias=True)}
    return json.dumps(payload)


def _validation_detail(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors()[:5]:
        loc = ".".join(str(part) for part in err["loc"])
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def _failing_slider(exc: ValidationError) -> str:
    """Slider id of the first invalid value, or "" for a non-field error."""
    errors = exc.errors()
    if not errors or not errors[0]["loc"]:
        return ""
    return str(errors[0]["loc"][0])


@router.websocket("/ws/solve")
async def solve_websocket(ws: WebSocket) -> None:
    """Handle a single WebSocket connection for live solving.

    The reader never waits on the solver, so a burst of drag events collapses
    to one solve of the most recent slider set.
    """
    await ws.accept()
    logger.info("WebSocket client connected")

    send_ch, recv_ch = anyio.create_memory_object_stream[SliderConfig](max_buffer_size=16)
    ws_lock = anyio.Lock()
    solve_scope: anyio.CancelScope | None = None

    async def _send_frame(frame: str) -> None:
        async with ws_lock:
            await ws.send_text(frame)

    async def reader_task() -> None:
        """Read messages from the WebSocket and post validated slider sets."""
        nonlocal solve_scope
        try:
            while True:
                try:
                    raw = await ws.receive()
                except WebSocketDisconnect:
                    return
                if raw.get("type") == "websocket.disconnect":
                    return

                text = raw.get("text")
                if text is None:
                    raw_bytes = raw.get("bytes")
                    if raw_bytes is None:
                        continue
                    try:
                        text = raw_bytes.decode("utf-8")
                    except UnicodeDecodeError:
                        logger.warning("Received non-UTF-8 binary frame, ignoring")
                        await _send_frame(
                            _build_error_frame(
                                error="Invalid message format",
                                detail="Expected UTF-8 encoded JSON text",
                            )
                        )
                        continue

                if len(text) > MAX_MESSAGE_SIZE:
                    await _send_frame(
                        _build_error_frame(
                            error="Message too large",
                            detail=f"Maximum message size is {MAX_MESSAGE_SIZE} bytes",
                        )
                    )
                    continue

                try:
                    data = json.loads(text)
                except json.JSONDecodeError as exc:
                    logger.warning("Malformed JSON from WebSocket client: %s", exc)
                    await _send_frame(_build_error_frame(error="Invalid JSON", detail=str(exc)))
                    continue
                if not isinstance(data, dict):
                    await _send_frame(
                        _build_error_frame(
                            error="Invalid message format",
                            detail="Expected a JSON object of slider values",
                        )
                    )
                    continue

                try:
                    sliders = SliderConfig(**data)
                except ValidationError as exc:
                    logger.warning("Slider validation error: %s", exc)
                    await _send_frame(
                        _build_error_frame(
                            error="Validation error",
                            detail=_validation_detail(exc),
                            field=_failing_slider(exc),
                        )
                    )
                    continue

                if solve_scope is not None:
                    solve_scope.cancel()

                try:
                    send_ch.send_nowait(sliders)
                except anyio.WouldBlock:
                    while True:
                        try:
                            recv_ch.receive_nowait()
                        except anyio.WouldBlock:
                            break
                    send_ch.send_nowait(sliders)
        finally:
            send_ch.close()

    async def solver_task() -> None:
        """Consume slider sets from the channel and send solved geometry."""
        nonlocal solve_scope

        async for sliders in recv_ch:
            latest = sliders
            while True:
                try:
                    latest = recv_ch.receive_nowait()
                except anyio.WouldBlock:
                    break

            solve_scope = anyio.CancelScope()
            with solve_scope:
                params = latest.to_parameters()
                try:
                    result = await anyio.to_thread.run_sync(solve_checked, params)
                except Exception as exc:
                    logger.warning("Solve failed: %s", exc)
                    frame = _build_error_frame(error="Solve failed", detail=str(exc))
                else:
                    frame = _build_geometry_frame(result)

                if solve_scope.cancel_called:
                    continue
                try:
                    await _send_frame(frame)
                except (WebSocketDisconnect, RuntimeError, OSError):
                    return

    try:
        async with anyio.create_task_group() as tg:
            tg.start_soon(reader_task)
            tg.start_soon(solver_task)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WebSocket error")
    logger.info("WebSocket client disconnected")
