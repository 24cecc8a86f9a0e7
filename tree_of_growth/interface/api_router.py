"""HTTP API router for tasks, the tree, preferences, images and backups."""

import logging
from datetime import date

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from tree_of_growth.core.errors import ErrorCode, classify_error_with_response
from tree_of_growth.core.logging import log_with_context
from tree_of_growth.domain.image import UserImage
from tree_of_growth.domain.preferences import AppSettingsUpdate
from tree_of_growth.domain.task import TaskCreate, TaskUpdate
from tree_of_growth.services import data_service, image_service, preferences_service, task_service


logger = logging.getLogger(__name__)

router = APIRouter(tags=["tree"])

_STATUS_BY_CODE = {
    ErrorCode.ERR_TASK_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ERR_IMAGE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ERR_INVALID_TASK: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.ERR_INVALID_BACKUP: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def error_response(exc: Exception, *, operation: str) -> JSONResponse:
    """Classify a service error and render it as a JSON error body."""
    error = classify_error_with_response(exc)
    status_code = _STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    level = "warning" if status_code < status.HTTP_500_INTERNAL_SERVER_ERROR else "error"
    log_with_context(logger, level, "api_request_failed", operation=operation, code=error.code, error=str(exc))
    return JSONResponse(content=error.model_dump(mode="json"), status_code=status_code)


@router.get("/tasks")
async def list_tasks() -> JSONResponse:
    """List all tasks."""
    try:
        tasks = await task_service.list_tasks()
    except Exception as e:
        return error_response(e, operation="list_tasks")
    return JSONResponse(content=[task.to_json_dict() for task in tasks])


@router.get("/tasks/due")
async def list_tasks_due(day: date) -> JSONResponse:
    """List tasks due on a calendar day (YYYY-MM-DD)."""
    try:
        tasks = await task_service.get_tasks_due_on(day=day)
    except Exception as e:
        return error_response(e, operation="list_tasks_due")
    return JSONResponse(content=[task.to_json_dict() for task in tasks])


@router.post("/tasks")
async def add_task(payload: TaskCreate) -> JSONResponse:
    """Create a task."""
    try:
        task = await task_service.add_task(data=payload)
    except Exception as e:
        return error_response(e, operation="add_task")
    return JSONResponse(content=task.to_json_dict(), status_code=status.HTTP_201_CREATED)


@router.get("/tasks/{task_id}")
async def get_task(task_id: str) -> JSONResponse:
    """Fetch a single task."""
    try:
        task = await task_service.get_task(task_id=task_id)
    except Exception as e:
        return error_response(e, operation="get_task")
    return JSONResponse(content=task.to_json_dict())


@router.patch("/tasks/{task_id}")
async def update_task(task_id: str, payload: TaskUpdate) -> JSONResponse:
    """Partially update a task."""
    try:
        task = await task_service.update_task(task_id=task_id, updates=payload)
    except Exception as e:
        return error_response(e, operation="update_task")
    return JSONResponse(content=task.to_json_dict())


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: str) -> Response:
    """Delete a task."""
    try:
        await task_service.delete_task(task_id=task_id)
    except Exception as e:
        return error_response(e, operation="delete_task")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/tasks/{task_id}/toggle")
async def toggle_task(task_id: str) -> JSONResponse:
    """Flip a task between done and not done."""
    try:
        task = await task_service.toggle_task(task_id=task_id)
    except Exception as e:
        return error_response(e, operation="toggle_task")
    return JSONResponse(content=task.to_json_dict())


@router.get("/tree")
async def get_tree() -> JSONResponse:
    """Current tree state with its motivational message."""
    try:
        summary = await task_service.get_tree_summary()
    except Exception as e:
        return error_response(e, operation="get_tree")
    return JSONResponse(content=summary.to_json_dict())


@router.get("/settings")
async def get_settings() -> JSONResponse:
    """Read preferences."""
    try:
        app_settings = await preferences_service.get_settings()
    except Exception as e:
        return error_response(e, operation="get_settings")
    return JSONResponse(content=app_settings.to_json_dict())


@router.patch("/settings")
async def update_settings(payload: AppSettingsUpdate) -> JSONResponse:
    """Update preferences."""
    try:
        app_settings = await preferences_service.update_settings(updates=payload)
    except Exception as e:
        return error_response(e, operation="update_settings")
    return JSONResponse(content=app_settings.to_json_dict())


@router.get("/images")
async def list_images() -> JSONResponse:
    """List imported images."""
    try:
        images = await image_service.list_images()
    except Exception as e:
        return error_response(e, operation="list_images")
    return JSONResponse(content=[image.to_json_dict() for image in images])


@router.post("/images")
async def add_image(payload: UserImage) -> JSONResponse:
    """Import an image file into the asset directory."""
    try:
        image = await image_service.add_image(image=payload)
    except Exception as e:
        return error_response(e, operation="add_image")
    return JSONResponse(content=image.to_json_dict(), status_code=status.HTTP_201_CREATED)


@router.delete("/images/{image_id}")
async def delete_image(image_id: str) -> Response:
    """Remove an imported image."""
    try:
        await image_service.delete_image(image_id=image_id)
    except Exception as e:
        return error_response(e, operation="delete_image")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/backup")
async def export_backup() -> Response:
    """Download all data as a JSON backup."""
    try:
        document = await data_service.export_data()
    except Exception as e:
        return error_response(e, operation="export_backup")
    return Response(content=document, media_type="application/json")


@router.post("/backup")
async def import_backup(request: Request) -> JSONResponse:
    """Replace all data with an uploaded JSON backup."""
    try:
        body = await request.body()
        snapshot = await data_service.import_data(data=body.decode("utf-8"))
    except Exception as e:
        return error_response(e, operation="import_backup")
    return JSONResponse(content=snapshot.to_json_dict())
