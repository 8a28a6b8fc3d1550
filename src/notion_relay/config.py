from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Notion
    notion_api_key: str
    default_workspace_name: str | None = None

    # Executor
    retry_attempts: int = 3
    request_timeout_ms: int = 30000

    # Database
    database_url: str = "sqlite+aiosqlite:///./notion_relay.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
