import os

from .base import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "")
JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", "")
JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "")

DEBUG = False

# create_app refuses to start while any of these is empty
REQUIRED_SETTINGS = (
    "SECRET_KEY",
    "JWT_ACCESS_SECRET",
    "JWT_REFRESH_SECRET",
    "FRONTEND_URL",
)
