"""Application entry point for the travel document OCR API server."""

from pathlib import Path

import uvicorn

from travel_ocr.api.app import app, configure
from travel_ocr.utils.config import load_config
from travel_ocr.utils.logger import setup_logging


def main(config_path: Path | None = None) -> None:
    """Start the FastAPI application server.

    Args:
        config_path: YAML config file. Defaults to configs/config.yaml.
    """
    config = load_config(config_path)
    setup_logging(config.log_level)
    configure(config)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
