from pydantic import BaseModel
import os

class Settings(BaseModel):
    user_agent: str = os.getenv("USER_AGENT", "Mozilla/5.0 (compatible; EntentiReader/1.0)")
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "20"))
    fetch_concurrency: int = int(os.getenv("FETCH_CONCURRENCY", "6"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = os.getenv("LOG_JSON", "1") not in ("0", "false", "no")
    cors_origins: str = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_anon_key: str = os.getenv("SUPABASE_ANON_KEY", "")
    password_reset_redirect: str = os.getenv("PASSWORD_RESET_REDIRECT", "")

    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


settings = Settings()
