import os
from pathlib import Path

# Every setting can be overridden from the environment.

# Flat JSON file holding the registered users.
USERS_FILE = Path(os.getenv("TASK_API_USERS_FILE", "users.json")).expanduser()

# bcrypt cost factor used when hashing new passwords
BCRYPT_ROUNDS = int(os.getenv("TASK_API_BCRYPT_ROUNDS", "10"))

# Origins allowed to call the API from a browser (comma separated)
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("TASK_API_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

HOST = os.getenv("TASK_API_HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "3000"))

LOG_LEVEL = os.getenv("TASK_API_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("TASK_API_LOG_FILE") or None
