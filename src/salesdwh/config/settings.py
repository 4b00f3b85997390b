"""
Typed configuration models using Pydantic.

All configuration is defined here with explicit typing and validation.
Source paths, warehouse location and cleansing vocabularies live here,
never in processing code.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Raw table name -> default export path relative to the sources root
DEFAULT_SOURCE_FILES: dict[str, Path] = {
    "crm_cust_info": Path("source_crm/cust_info.csv"),
    "crm_prd_info": Path("source_crm/prd_info.csv"),
    "crm_sales_details": Path("source_crm/sales_details.csv"),
    "erp_cust_az12": Path("source_erp/CUST_AZ12.csv"),
    "erp_loc_a101": Path("source_erp/LOC_A101.csv"),
    "erp_px_cat_g1v2": Path("source_erp/PX_CAT_G1V2.csv"),
}


class WarehouseConfig(BaseModel):
    """Warehouse connection configuration.

    Without a ``url`` the warehouse is a set of SQLite files under
    ``directory``: ``warehouse.db`` plus one attached database per layer
    (``raw.db``, ``cleansed.db``, ``curated.db``).
    """

    model_config = ConfigDict(frozen=True)

    url: str | None = Field(
        default=None, description="SQLAlchemy URL of a schema-capable database"
    )
    directory: Path = Field(
        default=Path("./warehouse"),
        description="Directory holding the SQLite warehouse files",
    )
    echo: bool = Field(default=False, description="Echo SQL statements")

    @property
    def is_sqlite(self) -> bool:
        """Whether the warehouse is backed by SQLite files."""
        return self.url is None or self.url.startswith("sqlite")


class SourcesConfig(BaseModel):
    """Source file paths configuration.

    Paths are relative to ``root``. Use resolve() to get the full path.
    """

    model_config = ConfigDict(frozen=True)

    root: Path = Field(
        default=Path("./datasets"), description="Root directory of the CSV exports"
    )
    crm_cust_info: Path = Field(default=DEFAULT_SOURCE_FILES["crm_cust_info"])
    crm_prd_info: Path = Field(default=DEFAULT_SOURCE_FILES["crm_prd_info"])
    crm_sales_details: Path = Field(default=DEFAULT_SOURCE_FILES["crm_sales_details"])
    erp_cust_az12: Path = Field(default=DEFAULT_SOURCE_FILES["erp_cust_az12"])
    erp_loc_a101: Path = Field(default=DEFAULT_SOURCE_FILES["erp_loc_a101"])
    erp_px_cat_g1v2: Path = Field(default=DEFAULT_SOURCE_FILES["erp_px_cat_g1v2"])

    def resolve(self, table: str) -> Path:
        """Resolve the source file of a raw table against root."""
        if table not in DEFAULT_SOURCE_FILES:
            msg = f"No source file configured for table '{table}'"
            raise ValueError(msg)
        return self.root / getattr(self, table)

    def as_mapping(self) -> dict[str, Path]:
        """All raw tables mapped to their resolved source files, in load order."""
        return {table: self.resolve(table) for table in DEFAULT_SOURCE_FILES}


class CleansingConfig(BaseModel):
    """Controlled vocabularies and constants used by the cleansing rules.

    Mapping keys are matched against the upper-cased, trimmed raw value.
    """

    model_config = ConfigDict(frozen=True)

    not_available: str = Field(
        default="n/a", description="Sentinel for unmapped or missing codes"
    )
    marital_status: dict[str, str] = Field(
        default_factory=lambda: {"S": "Single", "M": "Married"}
    )
    gender: dict[str, str] = Field(default_factory=lambda: {"F": "Female", "M": "Male"})
    product_line: dict[str, str] = Field(
        default_factory=lambda: {
            "M": "Mountain",
            "R": "Road",
            "S": "Other Sales",
            "T": "Touring",
        }
    )
    erp_gender: dict[str, str] = Field(
        default_factory=lambda: {
            "F": "Female",
            "FEMALE": "Female",
            "M": "Male",
            "MALE": "Male",
        }
    )
    country: dict[str, str] = Field(
        default_factory=lambda: {
            "DE": "Germany",
            "US": "United States",
            "USA": "United States",
        }
    )
    customer_id_prefix: str = Field(
        default="NAS", description="Prefix stripped from ERP customer identifiers"
    )
    category_id_length: int = Field(
        default=5, ge=1, description="Width of the category prefix of a product key"
    )

    @field_validator("marital_status", "gender", "product_line", "erp_gender", "country")
    @classmethod
    def normalize_codes(cls, v: dict[str, str]) -> dict[str, str]:
        """Upper-case and trim mapping keys so lookups are case-insensitive."""
        return {str(code).strip().upper(): label for code, label in v.items()}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False, description="Render log lines as JSON")
    file: Path | None = Field(default=None, description="Operational log file")


class PipelineConfig(BaseModel):
    """Complete pipeline configuration."""

    model_config = ConfigDict(frozen=True)

    project: str = Field(description="Project identifier (e.g., 'sales-dwh')")

    warehouse: WarehouseConfig = Field(default_factory=WarehouseConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    cleansing: CleansingConfig = Field(default_factory=CleansingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
