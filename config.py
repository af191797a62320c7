# config.py
import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    mongodb_uri: Optional[str] = None
    db_name: str = "math_solutions_db"
    api_key: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"
    web_domain: str = "http://localhost:3000"
    teacher_line_id: Optional[str] = None
    jwt_secret: Optional[str] = None  # reserved for signed links
    timezone: str = "Asia/Taipei"
    solution_ttl_days: int = 30
    sweep_interval_minutes: int = 60
    search_page_size: int = 20
    dev_origins: list = field(default_factory=lambda: ["http://localhost:3000", "http://localhost:3001"])

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> list:
        return [self.web_domain] if self.is_production else list(self.dev_origins)

    def display_url(self, solution_id: str) -> str:
        return f"{self.web_domain}/display/{solution_id}"


def get_settings() -> Settings:
    port = int(os.getenv("PORT", "3000"))
    web_domain = os.getenv("WEB_DOMAIN") or f"http://localhost:{port}"
    return Settings(
        mongodb_uri=os.getenv("MONGODB_URI") or os.getenv("DATABASE_URL"),
        db_name=os.getenv("DB_NAME", "math_solutions_db"),
        api_key=os.getenv("API_KEY") or None,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        environment=os.getenv("APP_ENV") or os.getenv("NODE_ENV", "development"),
        web_domain=web_domain.rstrip("/"),
        teacher_line_id=os.getenv("TEACHER_LINE_ID") or None,
        jwt_secret=os.getenv("JWT_SECRET") or None,
        timezone=os.getenv("APP_TIMEZONE", "Asia/Taipei"),
        solution_ttl_days=int(os.getenv("SOLUTION_TTL_DAYS", "30")),
        sweep_interval_minutes=int(os.getenv("SWEEP_INTERVAL_MINUTES", "60")),
        search_page_size=int(os.getenv("SEARCH_PAGE_SIZE", "20")),
    )
