from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Gateway tables shipped with the package (iam_api/gateways/*.yaml)
PACKAGED_GATEWAY_DIR = Path(__file__).resolve().parent / "gateways"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: str = "INFO"
    port: int = 8080

    # Identity inference
    # Set by the Lambda runtime in some deployments; read once here and passed
    # to the inferencer explicitly.
    aws_execution_role_arn: str = ""
    gateway_dir: Path = PACKAGED_GATEWAY_DIR
    gateway_file: str = "default.yaml"
    preview_length: int = 20  # chars of token/auth header kept in user_id
    log_preview_length: int = 100  # chars of header value written to logs

    # CORS (attached at the HTTP boundary)
    cors_allow_origin: str = "*"
    cors_allow_methods: str = "GET,POST,PUT,DELETE,OPTIONS"
    cors_allow_headers: str = (
        "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token"
    )


settings = Settings()
