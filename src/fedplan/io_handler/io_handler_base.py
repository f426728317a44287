from abc import ABC, abstractmethod
from typing import Any

import pandas as pd


class AbstractIOHandler(ABC):
    """
    Abstract base class for loading planning configuration and saving
    result tables.
    """

    def __init__(self, config_file_name: str) -> None:
        """
        Parameters
        ----------
        config_file_name : str
            Name of the YAML configuration file to load.
        """
        self.config_file_name = config_file_name

    @abstractmethod
    def load_config(self) -> dict[str, Any]:
        """
        Load the raw YAML document.

        Returns
        -------
        dict
            Parsed YAML, ready for ``ConfigMapper.map_yaml_to_params``.
        """
        pass

    @abstractmethod
    def save_results(self, results: pd.DataFrame, run_id: str) -> None:
        """
        Save a result table (comparison set, multi-dimensional results).

        Parameters
        ----------
        results : pd.DataFrame
            Table to persist.
        run_id : str
            Run identifier; used to organize results by run.
        """
        pass
