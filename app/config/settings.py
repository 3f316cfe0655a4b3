from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase (metadata store)
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Bypasses RLS; preferred for server-side repositories
    supabase_timeout_seconds: int = 10

    # JWT session tokens
    jwt_secret: str = ""
    jwt_access_token_ttl_seconds: int = 15 * 60
    jwt_refresh_token_ttl_seconds: int = 7 * 24 * 60 * 60
    jwt_issuer: str = "fileshare-backend"

    # AWS S3 / MinIO (will read from uppercase env vars automatically)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    aws_endpoint_url: Optional[str] = None  # MinIO or localstack; empty for real AWS
    s3_bucket_name: Optional[str] = None
    s3_use_path_style: bool = False
    s3_multipart_threshold_bytes: int = 5 * 1024 * 1024
    s3_multipart_chunk_bytes: int = 10 * 1024 * 1024
    s3_max_concurrency: int = 3
    s3_connect_timeout_seconds: int = 5
    s3_read_timeout_seconds: int = 60
    presigned_url_ttl_seconds: int = 15 * 60

    # Files
    max_upload_bytes: int = 1024 * 1024 * 1024

    # App
    app_name: str = "fileshare-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def s3_path_style(self) -> bool:
        # Custom endpoints (MinIO, localstack) only work with path-style addressing
        return self.s3_use_path_style or bool(self.aws_endpoint_url)

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def validate_required(self) -> List[str]:
        """Return a list of configuration problems; empty when the service can start."""
        problems = []
        if not self.supabase_url:
            problems.append("SUPABASE_URL is required")
        if not self.supabase_key and not self.supabase_service_role_key:
            problems.append("SUPABASE_KEY or SUPABASE_SERVICE_ROLE_KEY is required")
        if not self.jwt_secret:
            problems.append("JWT_SECRET is required")
        elif len(self.jwt_secret) < 32:
            problems.append("JWT_SECRET must be at least 32 characters")
        if not self.s3_bucket_name:
            problems.append("S3_BUCKET_NAME is required")
        return problems

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
