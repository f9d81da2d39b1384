from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="QUIZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Direct URL override (takes precedence if set)
    database_url: str | None = None
    db_path: Path = Path("quizzes.sqlite")
    seed_quizzes: bool = True

    tcp_host: str = "0.0.0.0"
    tcp_port: int = 3030
    # Longest line a TCP client may send, in bytes
    line_limit: int = 64 * 1024
    http_host: str = "0.0.0.0"
    http_port: int = 8000

    colorize: bool = True
    prompt: str = "quiz > "
    credits_author: str = "Quiz server contributors"

    @property
    def assembled_db_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.db_path}"


settings = Settings()
