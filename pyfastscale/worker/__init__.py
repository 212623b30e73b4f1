"""
Worker message layer.

Message builders, the move-only BufferHandle and the ScalerWorker that serves
scale requests over a connection.
"""

from .messages import (
    BufferHandle,
    echo_message,
    error_response,
    parse_scale_request,
    ready_message,
    scale_request,
    scale_response,
    shutdown_message,
)
from .scaler_worker import ScalerWorker, WorkerNotReadyError, serve, wait_ready

__all__ = [
    "BufferHandle",
    "echo_message",
    "error_response",
    "parse_scale_request",
    "ready_message",
    "scale_request",
    "scale_response",
    "shutdown_message",
    "ScalerWorker",
    "WorkerNotReadyError",
    "serve",
    "wait_ready",
]
