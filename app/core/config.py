from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "sqlite:///./kanban.db")
    API_PREFIX = getenv("API_PREFIX", "/api")
    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "10080"))  # 7 jours
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = [o.strip() for o in getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

settings = Settings()
