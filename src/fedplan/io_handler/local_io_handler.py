import logging
import os
from pathlib import Path
from typing import Any, Optional

import pandas as pd
import yaml

from fedplan.io_handler.io_handler_base import AbstractIOHandler

CONFIG_FOLDER_ENV: str = "FEDPLAN_CONFIG_FOLDER"
OUTPUT_FOLDER_ENV: str = "FEDPLAN_OUTPUT_FOLDER"
RESULTS_FILE_NAME: str = "results.csv"

logger = logging.getLogger(__name__)


class LocalIOHandler(AbstractIOHandler):
    """
    Local IO handler:
    - Loads YAML from a folder given explicitly or via FEDPLAN_CONFIG_FOLDER
    - Saves result tables as CSV below an output folder, one subfolder per run
    """

    def __init__(
        self,
        config_file_name: str,
        config_folder: Optional[str] = None,
        output_folder: Optional[str] = None,
    ) -> None:
        super().__init__(config_file_name=config_file_name)
        self.config_folder = config_folder or os.getenv(CONFIG_FOLDER_ENV)
        self.output_folder = output_folder or os.getenv(OUTPUT_FOLDER_ENV)

    def load_config(self) -> dict[str, Any]:
        if not self.config_folder:
            raise ValueError(f"Environment variable '{CONFIG_FOLDER_ENV}' not set")

        path = Path(self.config_folder) / self.config_file_name
        if not path.exists():
            raise FileNotFoundError(path)

        logger.info("Loading YAML configuration from: %s", path)

        with path.open("r") as f:
            yaml_data = yaml.safe_load(f)

        if not isinstance(yaml_data, dict):
            raise ValueError(f"configuration file {path} does not contain a mapping")

        logger.info("Successfully loaded configuration from %s", path)
        return yaml_data

    def save_results(self, results: pd.DataFrame, run_id: str) -> None:
        if not self.output_folder:
            raise ValueError(f"Environment variable '{OUTPUT_FOLDER_ENV}' not set")

        output_dir = Path(self.output_folder) / run_id
        output_dir.mkdir(parents=True, exist_ok=True)

        path = output_dir / RESULTS_FILE_NAME
        logger.info("Saving results to: %s", path)
        results.to_csv(path, header=True)
