import os


MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "nexusnu")

JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "7"))
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"

# optional; memory backends are used for the limiter and lookup cache when unset
REDIS_URL = os.getenv("REDIS_URL")

CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5173")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

MESSAGE_RATE_LIMIT = int(os.getenv("MESSAGE_RATE_LIMIT", "50"))
MESSAGE_RATE_WINDOW_MS = int(os.getenv("MESSAGE_RATE_WINDOW_MS", "3600000"))

LOOKUP_CACHE_TTL = int(os.getenv("LOOKUP_CACHE_TTL", "86400"))
LOOKUP_TIMEOUT_SECONDS = float(os.getenv("LOOKUP_TIMEOUT_SECONDS", "5"))
