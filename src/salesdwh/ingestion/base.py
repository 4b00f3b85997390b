"""
Base classes and utilities for data ingestion.

Provides common functionality for all data loaders.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import pandas as pd
import pandera.pandas as pa

from salesdwh.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T", bound=pa.DataFrameModel)


class DataLoader(ABC, Generic[T]):
    """
    Abstract base class for data loaders.

    All data loaders inherit from this class to ensure consistent
    schema validation at system boundaries.
    """

    def __init__(self, schema: type[T]) -> None:
        """
        Initialize data loader.

        Args:
            schema: Pandera schema for validation.
        """
        self.schema = schema

    @abstractmethod
    def _load_raw(self) -> pd.DataFrame:
        """Load raw data from source. Implemented by subclasses."""
        ...

    def load(self, *, validate: bool = True) -> pd.DataFrame:
        """
        Load and optionally validate data.

        Args:
            validate: Whether to validate against schema.

        Returns:
            Loaded (and optionally validated) DataFrame.

        Raises:
            FileNotFoundError: If data file not found.
            pandera.errors.SchemaError: If validation fails.
        """
        log.debug("Loading data", loader=self.__class__.__name__)

        df = self._load_raw()
        log.debug("Loaded raw data", rows=len(df), columns=list(df.columns))

        if validate:
            df = self._validate(df)
            log.debug("Schema validation passed", schema=self.schema.__name__)

        return df

    def _validate(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Validate DataFrame against schema.

        Args:
            df: DataFrame to validate.

        Returns:
            Validated DataFrame.
        """
        return self.schema.validate(df)
