from decouple import config, Csv

DATABASE_URL = config("DATABASE_URL", default="sqlite:///./lexai.db")

SECRET_KEY = config("SECRET_KEY", default="change-me")
ALGORITHM = config("ALGORITHM", default="HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = config("ACCESS_TOKEN_EXPIRE_MINUTES", default=60 * 12, cast=int)

OPENAI_API_KEY = config("OPENAI_API_KEY", default="")
OPENAI_MODEL = config("OPENAI_MODEL", default="gpt-4o-mini")
OPENAI_SEARCH_MODEL = config("OPENAI_SEARCH_MODEL", default="gpt-4o-mini")

GOOGLE_CALENDAR_API_BASE = config("GOOGLE_CALENDAR_API_BASE", default="https://www.googleapis.com/calendar/v3")
CALENDAR_TIMEOUT_SECONDS = config("CALENDAR_TIMEOUT_SECONDS", default=15, cast=int)

CORS_ORIGINS = config("CORS_ORIGINS", default="http://localhost:5173,http://localhost:3000", cast=Csv())

# Listing caps
ACTIVITY_LOG_LIMIT = 20
DEADLINES_PER_PAGE = 3

# Uploaded logos are stored as data URLs
LOGO_MAX_BYTES = config("LOGO_MAX_BYTES", default=2 * 1024 * 1024, cast=int)
