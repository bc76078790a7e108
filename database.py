import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path

from passlib.context import CryptContext
from pydantic import ValidationError as SchemaError

from errors import AuthError, ConflictError, NotFoundError, StoreError, ValidationError
from schemas import Task, TaskCreate, TaskStatus
from security import get_password_hash, pwd_context, verify_password

logger = logging.getLogger(__name__)

# This file holds the two pieces of state behind the API:
# - UserStore: registered users, kept as a JSON array of
#   {"username": ..., "password": <bcrypt hash>} objects in a flat file that is
#   read fully and rewritten fully on every registration.
# - TaskRegistry: tasks, kept in memory only and lost on restart.
# FastAPI runs sync handlers on a thread pool, so each one guards its state
# with a single lock.


class UserStore:
    def __init__(self, path: str | Path, context: CryptContext = pwd_context):
        self.path = Path(path)
        self.context = context
        self._lock = threading.Lock()

    def _read(self) -> list[dict]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                users = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot read user store {self.path}") from e
        if not isinstance(users, list):
            raise StoreError(f"User store {self.path} is not a JSON array")
        return users

    def _write(self, users: list[dict]) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(users, f, indent=2)
        except OSError as e:
            raise StoreError(f"Cannot write user store {self.path}") from e

    @staticmethod
    def _require(username, password) -> None:
        if not username or not password:
            raise ValidationError("Username and password are required")

    def register(self, username: str | None, password: str | None) -> None:
        self._require(username, password)
        with self._lock:
            users = self._read()
            # Usernames are case-sensitive
            if any(user.get("username") == username for user in users):
                logger.info("Registration rejected, username taken: %s", username)
                raise ConflictError()
            users.append(
                {"username": username, "password": get_password_hash(password, self.context)}
            )
            self._write(users)
        logger.info("Registered user %s", username)

    def login(self, username: str | None, password: str | None) -> None:
        self._require(username, password)
        with self._lock:
            users = self._read()
        user = next((u for u in users if u.get("username") == username), None)
        if user is None or not verify_password(password, user["password"], self.context):
            logger.info("Failed login for %s", username)
            raise AuthError()
        logger.debug("Login ok for %s", username)

    def delete(self, username: str) -> bool:
        """Remove a user record directly. Not exposed over HTTP."""
        with self._lock:
            users = self._read()
            remaining = [u for u in users if u.get("username") != username]
            if len(remaining) == len(users):
                return False
            self._write(remaining)
        return True


class TaskRegistry:
    """
    In-memory tasks keyed by id.

    Ids come from a sequence that only moves forward, so a deleted task's id is
    never handed out again. Iteration order of the dict is creation order.
    """

    def __init__(self):
        self._tasks: dict[int, Task] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._tasks)

    def create(self, fields: TaskCreate) -> Task:
        with self._lock:
            self._seq += 1
            task = Task(
                id=self._seq,
                creation_date=datetime.now(timezone.utc),
                status=TaskStatus.PENDING,
                **fields.model_dump(),
            )
            self._tasks[task.id] = task
        logger.info("Created task %s assigned_to=%s", task.id, task.assigned_to)
        return task

    def get(self, task_id: int) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFoundError()
        return task

    def update(self, task_id: int, changes: dict) -> Task:
        # id and creationDate are owned by the registry
        changes = {k: v for k, v in changes.items() if k not in ("id", "creationDate", "creation_date")}
        with self._lock:
            current = self.get(task_id)
            merged = {**current.model_dump(by_alias=True), **changes}
            try:
                task = Task.model_validate(merged)
            except SchemaError as e:
                raise ValidationError("Invalid task fields") from e
            self._tasks[task_id] = task
        logger.debug("Updated task %s fields=%s", task_id, sorted(changes))
        return task

    def delete(self, task_id: int) -> None:
        with self._lock:
            if self._tasks.pop(task_id, None) is None:
                raise NotFoundError()
        logger.info("Deleted task %s", task_id)

    def list(self, assigned_to: str | None = None, category: str | None = None) -> list[Task]:
        with self._lock:
            tasks = list(self._tasks.values())
        # An empty filter value means "no filter"
        if assigned_to:
            tasks = [t for t in tasks if t.assigned_to == assigned_to]
        if category:
            tasks = [t for t in tasks if t.category == category]
        return tasks

    def clear(self) -> None:
        with self._lock:
            self._tasks.clear()
