# stdlib
import os
import logging
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))


class Config:
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    AWS_DEFAULT_REGION: str = os.getenv("AWS_DEFAULT_REGION", "us-east-2")
    BUCKET_NAME_FILES: str = os.getenv("BUCKET_NAME_FILES", "")
    API_URL_PARAMETER_NAME: str = os.getenv("API_URL_PARAMETER_NAME", "")
    API_KEY_SECRET_NAME: str = os.getenv("API_KEY_SECRET_NAME", "")


config = Config()
