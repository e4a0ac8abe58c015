import json

import pytest
from dishka import make_container
from pydantic import ValidationError

from meme_service.config import AppConfig, AwsConfig, DatabaseConfig

AWS_ENV = [
    f"{prefix}{name}"
    for prefix, names in (
        ("AWS_", ("ACCESS_KEY", "SECRET_KEY", "SERVICE_URL", "BUCKET_NAME", "REGION")),
        ("AWS__", ("AccessKey", "SecretKey", "ServiceURL", "BucketName", "Region")),
    )
    for name in names
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in AWS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def write_settings(path, **aws):
    (path / "appsettings.json").write_text(json.dumps({"AWS": aws}))


def test_single_underscore_env_wins(monkeypatch, tmp_path):
    write_settings(tmp_path, BucketName="from-file", ServiceURL="http://file")
    monkeypatch.setenv("AWS_BUCKET_NAME", "single")
    monkeypatch.setenv("AWS__BucketName", "double")

    config = AwsConfig()

    assert config.bucket_name == "single"
    assert config.service_url == "http://file"


def test_double_underscore_env_beats_file(monkeypatch, tmp_path):
    write_settings(tmp_path, BucketName="from-file", ServiceURL="http://file")
    monkeypatch.setenv("AWS__BucketName", "double")
    monkeypatch.setenv("AWS__ServiceURL", "http://env")

    config = AwsConfig()

    assert config.bucket_name == "double"
    assert config.service_url == "http://env"


def test_file_values(tmp_path):
    write_settings(
        tmp_path,
        AccessKey="access",
        SecretKey="secret",
        ServiceURL="http://minio:9000",
        BucketName="memes",
    )

    config = AwsConfig()

    assert config.access_key == "access"
    assert config.secret_key == "secret"
    assert config.service_url == "http://minio:9000"
    assert config.bucket_name == "memes"
    assert config.region == "us-east-1"


def test_credentials_are_optional(monkeypatch):
    monkeypatch.setenv("AWS_SERVICE_URL", "http://minio:9000")
    monkeypatch.setenv("AWS_BUCKET_NAME", "memes")

    config = AwsConfig()

    assert config.access_key is None
    assert config.secret_key is None


def test_bucket_name_is_mandatory(monkeypatch):
    monkeypatch.setenv("AWS_SERVICE_URL", "http://minio:9000")

    with pytest.raises(ValidationError):
        AwsConfig()


def test_empty_bucket_name_is_rejected(monkeypatch):
    monkeypatch.setenv("AWS_SERVICE_URL", "http://minio:9000")
    monkeypatch.setenv("AWS_BUCKET_NAME", "")

    with pytest.raises(ValidationError):
        AwsConfig()


def test_init_arguments_win(monkeypatch):
    monkeypatch.setenv("AWS_BUCKET_NAME", "env")

    config = AwsConfig(bucket_name="explicit", service_url="http://minio:9000")

    assert config.bucket_name == "explicit"


def test_app_config_reads_aws_section(monkeypatch):
    monkeypatch.setenv("APP__DB__URL", "sqlite+aiosqlite:///memes.db")
    monkeypatch.setenv("AWS_SERVICE_URL", "http://minio:9000")
    monkeypatch.setenv("AWS_BUCKET_NAME", "memes")

    config = AppConfig()  # type: ignore

    assert config.db.url == "sqlite+aiosqlite:///memes.db"
    assert config.aws.bucket_name == "memes"


def test_app_config_provider_exposes_sections(app_config):
    container = make_container(app_config.dishka_provider())

    assert container.get(AppConfig) is app_config
    assert container.get(DatabaseConfig) is app_config.db
    assert container.get(AwsConfig) is app_config.aws

    container.close()
