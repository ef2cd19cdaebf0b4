#!/usr/bin/env python3
"""
Development server for the asset uploader.

Seeds ``.env`` from ``env.example``, warns about storage settings that are
still unset (uploads would fail against S3 without them) and serves the app
with auto-reload on the configured host and port.
"""

import shutil
import sys
from pathlib import Path
from typing import List

import structlog
import uvicorn

from asset_uploader.config import Settings

logger = structlog.get_logger()

REQUIRED_STORAGE_FIELDS = {
    "s3_bucket_name": "S3_BUCKET_NAME",
    "aws_region": "AWS_REGION",
    "aws_access_key_id": "AWS_ACCESS_KEY_ID",
    "aws_secret_access_key": "AWS_SECRET_ACCESS_KEY",
}


def ensure_env_file(env_file: Path = Path(".env"), template: Path = Path("env.example")) -> bool:
    """Return True when ``.env`` already existed; seed it from the template otherwise."""
    if env_file.exists():
        return True
    if template.exists():
        shutil.copyfile(template, env_file)
        logger.warning("Created env file from template", env_file=str(env_file), template=str(template))
    else:
        logger.warning("No env file found", env_file=str(env_file))
    return False


def missing_storage_settings(config: Settings) -> List[str]:
    """Environment variable names of storage settings that are empty."""
    return [env for field, env in REQUIRED_STORAGE_FIELDS.items() if not getattr(config, field)]


def main():
    if not ensure_env_file():
        logger.error("Fill in .env with your storage configuration and run again")
        sys.exit(1)

    config = Settings()
    missing = missing_storage_settings(config)
    if missing:
        # The host may still push these through a settings reload
        logger.warning("Storage settings not configured", missing=missing)

    uvicorn.run(
        "asset_uploader.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=True,
    )


if __name__ == "__main__":
    main()
