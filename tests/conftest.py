"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy import Engine

from salesdwh.config import PipelineConfig, SourcesConfig, WarehouseConfig
from salesdwh.warehouse import create_warehouse_engine, initialize_warehouse

FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0)

# Small but complete exports; each line exercises one cleansing rule
SOURCE_FILES: dict[str, list[str]] = {
    "source_crm/cust_info.csv": [
        "cst_id,cst_key,cst_firstname,cst_lastname,cst_marital_status,cst_gndr,cst_create_date",
        "29449,AW00029449, Ana ,Diaz ,S,F,2024-10-06",
        "29449,AW00029449,Ana,Diaz,M,F,2024-12-01",
        "29466,AW00029466,Lee,Chen,m, M ,2024-10-06",
        "29473,AW00029473,Sam,Roe,X,,2024-10-07",
    ],
    "source_crm/prd_info.csv": [
        "prd_id,prd_key,prd_nm,prd_cost,prd_line,prd_start_dt,prd_end_dt",
        "212,AC-HE-HL-U509-R,Sport-100 Helmet- Red,12,S ,2011-07-01,2011-12-28",
        "213,AC-HE-HL-U509-R,Sport-100 Helmet- Red,14,S ,2012-07-01,2012-12-27",
        "214,AC-HE-HL-U509-R,Sport-100 Helmet- Red,,S ,2013-07-01,",
        "215,CO-RF-FR-R92B-58,HL Road Frame - Black- 58,1431,R ,2003-07-01,",
    ],
    "source_crm/sales_details.csv": [
        "sls_ord_num,sls_prd_key,sls_cust_id,sls_order_dt,sls_ship_dt,sls_due_dt,sls_sales,sls_quantity,sls_price",
        "SO43697,HL-U509-R,29449,20101229,20110105,20110110,35,1,35",
        "SO43698,FR-R92B-58,29466,20230230,20110106,20110111,-10,2,1431",
        "SO43699,HL-U509-R,29473,0,20110107,20110112,70,2,",
        "SO43700,XX-UNKNOWN,99999,2010123,20110107,20110112,,3,-5",
    ],
    "source_erp/CUST_AZ12.csv": [
        "CID,BDATE,GEN",
        "NASAW00029449,1971-10-06,Male",
        "AW00029466,1976-05-11,F",
        "NASAW00029473,2090-01-01, female ",
    ],
    "source_erp/LOC_A101.csv": [
        "CID,CNTRY",
        "AW-00029449,DE",
        "AW-00029466, usa ",
        "AW-00029473,",
        "AW-00011000,Australia",
    ],
    "source_erp/PX_CAT_G1V2.csv": [
        "ID,CAT,SUBCAT,MAINTENANCE",
        "AC_HE,Accessories,Helmets,Yes",
        "CO_RF,Components,Road Frames,No",
    ],
}


def write_sources(root: Path, files: dict[str, list[str]]) -> Path:
    """Write CSV exports below root and return root."""
    for relative, lines in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return root


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Directory holding a complete set of source exports."""
    return write_sources(tmp_path / "datasets", SOURCE_FILES)


@pytest.fixture
def warehouse_config(tmp_path: Path) -> WarehouseConfig:
    """SQLite warehouse in a temporary directory."""
    return WarehouseConfig(directory=tmp_path / "warehouse")


@pytest.fixture
def bare_engine(warehouse_config: WarehouseConfig) -> Iterator[Engine]:
    """Engine of a warehouse whose tables were never created."""
    engine = create_warehouse_engine(warehouse_config)
    yield engine
    engine.dispose()


@pytest.fixture
def engine(bare_engine: Engine) -> Engine:
    """Engine of an initialized, empty warehouse."""
    initialize_warehouse(bare_engine)
    return bare_engine


@pytest.fixture
def pipeline_config(source_dir: Path, warehouse_config: WarehouseConfig) -> PipelineConfig:
    """Pipeline configuration pointing at the sample exports."""
    return PipelineConfig(
        project="test-dwh",
        warehouse=warehouse_config,
        sources=SourcesConfig(root=source_dir),
    )


@pytest.fixture
def sources(pipeline_config: PipelineConfig) -> dict[str, Path]:
    """Raw table name -> sample export path."""
    return pipeline_config.sources.as_mapping()


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always returns the same instant."""
    return lambda: FIXED_NOW
