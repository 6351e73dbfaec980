import os

from services.common.core.logging_config import setup_logging as common_setup_logging

DEFAULT_LOG_CONFIG_PATH = "/app/config/adapter_log.yaml"


def setup_logging(config_path: str = None):
    """
    Load the YAML config and initialize logging.
    """
    config_path = config_path or os.getenv("LOG_CONFIG_PATH", DEFAULT_LOG_CONFIG_PATH)
    common_setup_logging(config_path)
