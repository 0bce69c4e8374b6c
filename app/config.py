from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    environment: str = "development"
    log_level: str = "INFO"
    service_name: str = "user-store"

    # DynamoDB
    aws_region: str = "us-east-2"
    users_table_name: str = "users"  # partition key: username (S)
    dynamodb_endpoint_url: Optional[str] = (
        None  # Override for DynamoDB Local: http://localhost:8001
    )


settings = Settings()
