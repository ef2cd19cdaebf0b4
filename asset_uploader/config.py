from pydantic_settings import BaseSettings


PLUGIN_KEY = "aws-s3-upload"
PLUGIN_ID = "asset-uploader"


class Settings(BaseSettings):
    # Initial storage settings, overridden by reloads from the host
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = ""
    s3_bucket_name: str = ""
    s3_upload_path: str = ""
    s3_host: str = ""

    # Upload policy (maximum size in KB)
    maximum_file_size: int = 2048
    allowed_file_extensions: str = "png,jpg,bmp,txt"
    profile_image_dimension: int = 200

    fetch_timeout: float = 30.0
    environment: str = "development"

    server_host: str = "0.0.0.0"
    server_port: int = 8000

    class Config:
        env_file = ".env"


settings = Settings()
