from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "TeamUp"
    API_V1_STR: str = "/api/v1"

    MONGODB_URL: str
    DATABASE_NAME: str = "teamup"

    # Redis Cache Settings
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_PREFIX: str = "tu:"
    CACHE_DEFAULT_TTL_HOURS: int = 24
    CACHE_RETRY_SECONDS: int = 30

    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # GitHub
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_ANALYSIS_CACHE_TTL: int = 3600

    # Gemini certificate analysis
    GEMINI_API_KEY: str = ""
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1"
    GEMINI_MODEL: str = "gemini-1.5-flash"

    # Teams & feed
    DEFAULT_TEAM_MAX_MEMBERS: int = 4
    FEED_PAGE_SIZE: int = 50
    NOTIFICATIONS_PAGE_SIZE: int = 50

    # Frontend
    FRONTEND_BASE_URL: str = "http://localhost:5173"

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
