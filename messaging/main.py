# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Messaging Service: threaded internal messages over REST."""

import os
import sys
from contextlib import asynccontextmanager
from typing import Any, Callable

# Add app directory to path
sys.path.insert(0, os.path.dirname(__file__))

import uvicorn
from app import __version__
from app.errors import ForbiddenError, MessagingError, NotFoundError, StoreError, ValidationError
from app.service import MessagingService
from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from fieldops_config import load_typed_config
from fieldops_directory import DocumentIdentityDirectory, DocumentProjectDirectory, UserRecord
from fieldops_logging import create_logger, create_uvicorn_log_config, get_logger, set_default_logger
from fieldops_metrics import create_metrics_collector
from fieldops_notifications import create_notifier
from fieldops_reporting import create_error_reporter
from fieldops_storage import create_document_store

# Stdout fallback until main() installs the configured default logger
logger = get_logger("messaging")

# Global service instance
messaging_service: MessagingService | None = None

# Only honor X-User-Id behind a gateway that strips it from client requests
trust_user_id_header = False

STATUS_BY_ERROR = {
    ValidationError: 400,
    ForbiddenError: 403,
    NotFoundError: 404,
    StoreError: 500,
}

HTTP_ERROR_CODES = {
    400: "validation_error",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    500: "internal_error",
    503: "service_unavailable",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Stop the notification pool on shutdown."""
    yield
    if messaging_service is not None:
        logger.info("Shutting down Messaging Service...")
        messaging_service.shutdown(wait=False)


app = FastAPI(
    title="Messaging Service",
    version=__version__,
    description="Threaded internal messaging with role-based recipients",
    lifespan=lifespan,
)


class SendMessageRequest(BaseModel):
    """Request body for sending a message."""

    recipients: list[str] = Field(..., description="Recipient user ids")
    subject: str = Field(..., description="Message subject")
    body: str = Field(..., description="Message body")
    thread_id: str | None = Field(None, description="Id of a message in the thread being replied to")


def error_response(status_code: int, code: str, message: str, details: dict[str, Any] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": code, "message": message, "details": details or {}},
    )


def success(message: str, data: Any) -> dict[str, Any]:
    return {"success": True, "message": message, "data": data}


@app.exception_handler(MessagingError)
async def messaging_error_handler(request: Request, exc: MessagingError) -> JSONResponse:
    status_code = STATUS_BY_ERROR.get(type(exc), 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}", error=exc.code)
    body = exc.to_dict()
    return error_response(status_code, body["error"], body["message"], body["details"])


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, HTTP_ERROR_CODES.get(exc.status_code, "error"), str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    field = ".".join(str(part) for part in errors[0]["loc"][1:]) if errors else ""
    reason = errors[0]["msg"] if errors else "invalid request"
    return error_response(400, "validation_error", f"{field}: {reason}", {"field": field, "reason": reason})


def get_service() -> MessagingService:
    if messaging_service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return messaging_service


def current_user(request: Request, service: MessagingService = Depends(get_service)) -> UserRecord:
    """Resolve the caller from upstream auth state, or from X-User-Id when trusted."""
    user_id = getattr(request.state, "user_id", None)
    if not user_id and trust_user_id_header:
        user_id = request.headers.get("X-User-Id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Authentication required")

    user = service.identity_directory.get_user(user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=401, detail="Unknown or inactive user")
    return user


def run_operation(service: MessagingService, operation: str, user: UserRecord, func: Callable[[], Any]) -> Any:
    """Run a service call, turning unexpected failures into reported 500s."""
    try:
        return func()
    except MessagingError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error in {operation}: {e}", user_id=user.id)
        if service.error_reporter:
            service.error_reporter.report(e, context={"operation": operation, "user_id": user.id})
        raise HTTPException(status_code=500, detail=f"Failed to {operation.replace('_', ' ')}")


@app.get("/")
def root():
    """Root endpoint redirects to health check."""
    return health()


@app.get("/health")
def health():
    """Health check endpoint."""
    stats = messaging_service.get_stats() if messaging_service is not None else {}

    return {
        "status": "healthy",
        "service": "messaging",
        "version": __version__,
        "messages_sent": stats.get("messages_sent", 0),
        "notifications_failed": stats.get("notifications_failed", 0),
    }


@app.get("/stats")
def get_stats(service: MessagingService = Depends(get_service)):
    """Get messaging statistics."""
    return service.get_stats()


@app.get("/metrics")
def metrics(service: MessagingService = Depends(get_service)):
    """Prometheus scrape endpoint, available with the prometheus metrics driver."""
    exposition = service.metrics_collector.exposition() if service.metrics_collector else None
    if exposition is None:
        raise HTTPException(status_code=404, detail="Metrics exposition not enabled")
    payload, content_type = exposition
    return Response(content=payload, media_type=content_type)


@app.get("/api/messages/conversations")
def list_conversations(
    page: int = Query(1, description="Page number, starting at 1"),
    limit: int | None = Query(None, description="Conversations per page"),
    user: UserRecord = Depends(current_user),
    service: MessagingService = Depends(get_service),
):
    """List the caller's conversations, most recent activity first."""
    data = run_operation(service, "list_conversations", user, lambda: service.list_inbox(user.id, page, limit))
    return success("Conversations retrieved successfully", data)


@app.get("/api/messages/conversations/{thread_key}/messages")
def get_conversation_messages(
    thread_key: str,
    user: UserRecord = Depends(current_user),
    service: MessagingService = Depends(get_service),
):
    """Get a thread oldest first. Marks the caller's messages in it read."""
    data = run_operation(service, "get_thread", user, lambda: service.get_thread(user.id, thread_key))
    return success("Messages retrieved successfully", data)


@app.get("/api/messages/recipients")
def list_recipients(
    user: UserRecord = Depends(current_user),
    service: MessagingService = Depends(get_service),
):
    """Users the caller may message."""
    recipients = run_operation(
        service, "list_recipients", user, lambda: service.list_allowed_recipients(user.id, user.role)
    )
    return success("Recipients retrieved successfully", {"recipients": recipients})


@app.post("/api/messages", status_code=201)
def send_message(
    request_body: SendMessageRequest,
    user: UserRecord = Depends(current_user),
    service: MessagingService = Depends(get_service),
):
    """Send a new message or reply to a thread."""
    message = run_operation(
        service,
        "send_message",
        user,
        lambda: service.send(
            user.id,
            user.role,
            request_body.recipients,
            request_body.subject,
            request_body.body,
            thread_id=request_body.thread_id,
        ),
    )
    return success("Message sent successfully", message)


@app.patch("/api/messages/conversations/{thread_key}/read")
def mark_conversation_read(
    thread_key: str,
    user: UserRecord = Depends(current_user),
    service: MessagingService = Depends(get_service),
):
    """Mark every message in a thread read for the caller."""
    updated = run_operation(service, "mark_read", user, lambda: service.mark_thread_read(user.id, thread_key))
    return success("Conversation marked as read", {"updated": updated})


@app.delete("/api/messages/conversations/{thread_key}")
def delete_conversation(
    thread_key: str,
    user: UserRecord = Depends(current_user),
    service: MessagingService = Depends(get_service),
):
    """Hide a conversation from the caller. Super admins only."""
    deleted = run_operation(
        service, "delete_conversation", user, lambda: service.delete_thread(thread_key, user.id, user.role)
    )
    return success("Conversation deleted successfully", {"deleted": deleted})


@app.get("/api/messages/unread-count")
def unread_count(
    user: UserRecord = Depends(current_user),
    service: MessagingService = Depends(get_service),
):
    """Number of messages the caller has not read."""
    count = run_operation(service, "unread_count", user, lambda: service.get_unread_count(user.id))
    return success("Unread count retrieved successfully", {"unread_count": count})


def main():
    """Main entry point for the messaging service."""
    global messaging_service, logger, trust_user_id_header

    logger.info(f"Starting Messaging Service (version {__version__})")

    try:
        # Load configuration using config adapter
        config = load_typed_config("messaging")

        set_default_logger(create_logger(logger_type=config.log_type, level=config.log_level, name="messaging"))
        logger = get_logger()
        logger.info("Configuration loaded successfully")

        trust_user_id_header = config.trust_user_id_header
        if trust_user_id_header:
            logger.warning("Trusting the X-User-Id header; deploy only behind an authenticating gateway")

        document_store = create_document_store(
            store_type=config.doc_store_type,
            host=config.doc_store_host,
            port=config.doc_store_port,
            database=config.doc_store_name,
            username=config.doc_store_user if config.doc_store_user else None,
            password=config.doc_store_password if config.doc_store_password else None,
        )
        document_store.connect()

        logger.info("Creating notifier...", notify_type=config.notify_type)
        notifier = create_notifier(
            config.notify_type,
            webhook_url=config.notify_webhook_url,
            timeout_seconds=config.notify_timeout_seconds,
        )

        # Create metrics collector - fail fast on errors
        metrics_collector = create_metrics_collector(config.metrics_type)

        # Create error reporter - fail fast on errors
        error_reporter = create_error_reporter(config.error_reporter_type)

        messaging_service = MessagingService(
            document_store=document_store,
            identity_directory=DocumentIdentityDirectory(document_store),
            project_directory=DocumentProjectDirectory(document_store),
            notifier=notifier,
            metrics_collector=metrics_collector,
            error_reporter=error_reporter,
            default_page_size=config.default_page_size,
            max_page_size=config.max_page_size,
            message_scan_limit=config.message_scan_limit or None,
            message_preview_length=config.message_preview_length,
            notify_max_workers=config.notify_max_workers,
        )

        logger.info(f"Starting HTTP server on port {config.http_port}...")
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=config.http_port,
            log_config=create_uvicorn_log_config("messaging", config.log_level),
        )

    except Exception as e:
        logger.exception(f"Failed to start messaging service: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
