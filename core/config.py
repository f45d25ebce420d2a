"""
配置文件 - 项目配置管理
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, field_validator
from pathlib import Path
from typing import Optional


class GrpcTlsSettings(BaseModel):
    enabled: bool = False
    cert: Optional[str] = None
    key: Optional[str] = None
    ca: Optional[str] = None


class GrpcSettings(BaseModel):
    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 50051
    # This maps to GRPC option grpc.max_concurrent_streams
    max_concurrent_streams: int = 100
    # Seconds given to in-flight calls on shutdown; None cancels them at once
    grace_period: Optional[float] = 5.0
    tls: GrpcTlsSettings = Field(default_factory=GrpcTlsSettings)


# 内置特征库随 infrastructure 包一起安装，与当前工作目录无关
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "infrastructure" / "data" / "route_guide_db.json"


class RouteGuideSettings(BaseModel):
    # JSON array of {"location": {"latitude", "longitude"}, "name"}
    db_path: str = str(DEFAULT_DB_PATH)


class GrpcClientSettings(BaseModel):
    target: str = "localhost:50051"
    timeout: float = 10.0
    retry_attempts: int = 3
    # Demo chat loop: one note every `chat_interval` seconds
    chat_interval: float = 1.0
    chat_messages: int = 5

    @field_validator("retry_attempts")
    @classmethod
    def _at_least_one_attempt(cls, v: int) -> int:
        return max(1, v)


class Settings(BaseSettings):
    """项目配置"""

    # 基础配置
    PROJECT_NAME: str = Field(default="Route Guide")
    VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=True)
    ENVIRONMENT: str = Field(default="development")
    LOG_LEVEL: Optional[str] = Field(default=None, description="覆盖默认日志级别（DEBUG 时为 DEBUG，否则 INFO）")

    # 分组配置：嵌套模型，环境变量形如 GRPC__PORT=50052
    grpc: GrpcSettings = Field(default_factory=GrpcSettings)
    route_guide: RouteGuideSettings = Field(default_factory=RouteGuideSettings)
    client: GrpcClientSettings = Field(default_factory=GrpcClientSettings)

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_log_level(cls, v):
        """允许小写写法，如 LOG_LEVEL=info。"""
        if isinstance(v, str):
            s = v.strip().upper()
            return s or None
        return v


settings = Settings()
