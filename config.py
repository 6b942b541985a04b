"""
Configuration management for the Worklog Dashboard
"""
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


ENV_CONFIG = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class DatabaseSettings(BaseSettings):
    """Database configuration"""
    model_config = ENV_CONFIG

    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    postgres_host: str = Field(default="localhost", validation_alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, validation_alias="POSTGRES_PORT")
    postgres_db: str = Field(default="worklog", validation_alias="POSTGRES_DB")
    postgres_user: str = Field(default="postgres", validation_alias="POSTGRES_USER")
    postgres_password: str = Field(default="password", validation_alias="POSTGRES_PASSWORD")

    redis_host: str = Field(default="localhost", validation_alias="REDIS_HOST")
    redis_port: int = Field(default=6379, validation_alias="REDIS_PORT")
    redis_db: int = Field(default=0, validation_alias="REDIS_DB")
    cache_ttl_seconds: int = Field(default=86400, validation_alias="CACHE_TTL_SECONDS")

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"postgresql://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    @property
    def redis_url(self) -> str:
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


class AtlassianSettings(BaseSettings):
    """JIRA API configuration"""
    model_config = ENV_CONFIG

    jira_url: str = Field(default="", validation_alias="JIRA_URL")
    jira_username: str = Field(default="", validation_alias="JIRA_USERNAME")
    jira_api_token: str = Field(default="", validation_alias="JIRA_API_TOKEN")

    # Keys with this prefix only exist locally
    internal_key_prefix: str = Field(default="JANE", validation_alias="JIRA_INTERNAL_PREFIX")


class HolidaySettings(BaseSettings):
    """Public holiday API configuration"""
    model_config = ENV_CONFIG

    api_url: str = Field(
        default="https://apigw1.bot.or.th/bot/public/financial-institutions-holidays/",
        validation_alias="HOLIDAY_API_URL"
    )
    api_key: str = Field(default="", validation_alias="BOT_API_KEY")


class SchedulingSettings(BaseSettings):
    """Scheduling configuration"""
    model_config = ENV_CONFIG

    enabled: bool = Field(default=True, validation_alias="SCHEDULER_ENABLED")
    status_sync_time: str = Field(default="06:00", validation_alias="STATUS_SYNC_TIME")  # Daily at 6 AM
    timezone: str = Field(default="Asia/Bangkok", validation_alias="TIMEZONE")


class WorkloadSettings(BaseSettings):
    """Capacity and alert thresholds"""
    model_config = ENV_CONFIG

    hours_per_day: float = Field(default=8, validation_alias="HOURS_PER_DAY")
    low_log_hours: float = Field(default=6, validation_alias="LOW_LOG_HOURS")
    high_log_hours: float = Field(default=10, validation_alias="HIGH_LOG_HOURS")
    due_soon_days: int = Field(default=3, validation_alias="DUE_SOON_DAYS")
    inactive_member_days: int = Field(default=5, validation_alias="INACTIVE_MEMBER_DAYS")


class AppSettings(BaseSettings):
    """Main application settings"""
    model_config = ENV_CONFIG

    app_name: str = Field(default="Worklog Dashboard", validation_alias="APP_NAME")
    debug: bool = Field(default=False, validation_alias="DEBUG")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    cors_origins: List[str] = Field(default=["http://localhost:3000", "http://localhost:8080"], validation_alias="CORS_ORIGINS")


class Settings(BaseSettings):
    """Combined settings"""
    model_config = ENV_CONFIG

    database: DatabaseSettings = DatabaseSettings()
    atlassian: AtlassianSettings = AtlassianSettings()
    holidays: HolidaySettings = HolidaySettings()
    scheduling: SchedulingSettings = SchedulingSettings()
    workload: WorkloadSettings = WorkloadSettings()
    app: AppSettings = AppSettings()


# Global settings instance
settings = Settings()
