from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000
    # When the port is taken, listen on an OS-assigned port instead of exiting
    port_fallback: bool = True
    cors_origins: str = "http://localhost:5173"
    # "" serves /health and /analyze; "/api" matches the browser client's paths
    api_prefix: str = ""
    enable_hsts: bool = False  # Set True in production behind HTTPS
    gzip_minimum_size: int = 500
    log_level: str = "INFO"
    log_payloads: bool = True  # Received records are logged at DEBUG

    @property
    def cors_origin_list(self) -> list[str]:
        """Allowed CORS origins; empty setting allows any origin."""
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return origins or ["*"]


settings = Settings()
