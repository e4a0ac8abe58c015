from meme_lib.config import BaseAppConfig, LayeredSettings, layered
from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    url: str
    echo: bool = False


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class AwsConfig(LayeredSettings):
    """S3-compatible object storage.

    Each setting is looked up in ``AWS_*`` env vars, then ``AWS__*`` env vars,
    then the ``AWS`` section of ``appsettings.json``. Bucket and service URL
    have no default: start-up fails without them.
    """

    access_key: str | None = layered(
        "AWS_ACCESS_KEY", "AWS__AccessKey", "AWS:AccessKey", default=None
    )
    secret_key: str | None = layered(
        "AWS_SECRET_KEY", "AWS__SecretKey", "AWS:SecretKey", default=None
    )
    service_url: str = layered(
        "AWS_SERVICE_URL", "AWS__ServiceURL", "AWS:ServiceURL", min_length=1
    )
    bucket_name: str = layered(
        "AWS_BUCKET_NAME", "AWS__BucketName", "AWS:BucketName", min_length=1
    )
    region: str = layered("AWS_REGION", "AWS__Region", "AWS:Region", default="us-east-1")


class AppConfig(BaseAppConfig):
    db: DatabaseConfig
    aws: AwsConfig = Field(default_factory=AwsConfig)  # type: ignore[arg-type]
    server: ServerConfig = ServerConfig()
