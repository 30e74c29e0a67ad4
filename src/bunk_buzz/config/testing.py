from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
JWT_ACCESS_SECRET = "test-access-secret-0123456789abcdef"
JWT_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"
GOOGLE_CLIENT_ID = "test-client-id"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
