import logging
from pathlib import Path
from typing import Annotated

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

import config
from database import TaskRegistry, UserStore
from errors import TaskApiError
from logging_setup import setup_logging
from schemas import Credentials, Message, Task, TaskCreate, TaskUpdate
from security import make_pwd_context

logger = logging.getLogger(__name__)


# Dependencies handing the per-app state to the endpoints
def get_user_store(request: Request) -> UserStore:
    return request.app.state.users


def get_task_registry(request: Request) -> TaskRegistry:
    return request.app.state.tasks


Users = Annotated[UserStore, Depends(get_user_store)]
Tasks = Annotated[TaskRegistry, Depends(get_task_registry)]

router = APIRouter()


# --- API Endpoints ---
@router.get("/", response_class=PlainTextResponse)
def read_root():
    return "Task Management API"


# Endpoint for user registration
@router.post("/register", response_model=Message, status_code=status.HTTP_201_CREATED)
def register_user(credentials: Credentials, users: Users):
    users.register(credentials.username, credentials.password)
    return {"message": "User registered successfully"}


# Endpoint for user login. Only checks the credentials; no token is issued.
@router.post("/login", response_model=Message)
def login(credentials: Credentials, users: Users):
    users.login(credentials.username, credentials.password)
    return {"message": "Login successful"}


# --- Task Endpoints ---
@router.post("/task", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, tasks: Tasks):
    return tasks.create(task)


@router.get("/task/{task_id}", response_model=Task, responses={404: {"model": Message}})
def read_task(task_id: int, tasks: Tasks):
    return tasks.get(task_id)


# Only the fields present in the body change
@router.put("/task/{task_id}", response_model=Task, responses={404: {"model": Message}})
def update_task(task_id: int, task: TaskUpdate, tasks: Tasks):
    return tasks.update(task_id, task.changes())


@router.delete(
    "/task/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"model": Message}},
)
def delete_task(task_id: int, tasks: Tasks):
    tasks.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Both filters are optional; when both are given a task must match both
@router.get("/tasks", response_model=list[Task])
def read_tasks(
    tasks: Tasks,
    assigned_to: Annotated[str | None, Query(alias="assignedTo")] = None,
    category: str | None = None,
):
    return tasks.list(assigned_to=assigned_to, category=category)


async def task_api_error_handler(request: Request, exc: TaskApiError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
        # Internal detail stays in the log
        return JSONResponse(status_code=exc.status_code, content={"message": "Internal Server Error"})
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


# Malformed bodies, wrong field types and non-integer ids are plain 400s
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": "Invalid request"})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
    )


def create_app(users_file: str | Path | None = None, bcrypt_rounds: int | None = None) -> FastAPI:
    """
    Build the API with its own user store and task registry.

    The state lives on ``app.state`` and reaches the endpoints through
    dependencies, so every app instance (one per test, for example) starts empty.
    """
    app = FastAPI(
        title="Task Management API",
        version="1.0.0",
        description="A simple RESTful API for managing tasks",
        docs_url="/api-docs",
    )

    # Configure CORS (Cross-Origin Resource Sharing) so a browser frontend can call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.users = UserStore(
        users_file or config.USERS_FILE,
        context=make_pwd_context(bcrypt_rounds),
    )
    app.state.tasks = TaskRegistry()

    app.add_exception_handler(TaskApiError, task_api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)
    logger.info("Starting Task Management API on %s:%s users_file=%s", config.HOST, config.PORT, config.USERS_FILE)
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_config=None)


if __name__ == "__main__":
    run()
