"""Tests for the cleansing rules and the cleansed layer refresh."""

from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path

import pandas as pd
import pandera.pandas as pa
import pytest
from sqlalchemy import Engine

from salesdwh.cleansing import (
    cleanse_customers,
    cleanse_erp_categories,
    cleanse_erp_customers,
    cleanse_erp_locations,
    cleanse_products,
    cleanse_sales,
    load_cleansed_layer,
)
from salesdwh.cleansing import engine as engine_module
from salesdwh.cleansing.temporal import parse_int_date
from salesdwh.config import CleansingConfig
from salesdwh.ingestion import load_raw_layer
from salesdwh.warehouse import (
    CLEANSED,
    ENTITIES,
    WarehouseNotInitializedError,
    get_table,
    read_frame,
)

CONFIG = CleansingConfig()


def _customers(rows: list[tuple]) -> pd.DataFrame:
    df = pd.DataFrame(
        rows,
        columns=[
            "cst_id",
            "cst_key",
            "cst_firstname",
            "cst_lastname",
            "cst_marital_status",
            "cst_gndr",
            "cst_create_date",
        ],
    )
    return df.assign(
        cst_id=df["cst_id"].astype("Int64"),
        cst_create_date=pd.to_datetime(df["cst_create_date"]),
    )


def _products(rows: list[tuple]) -> pd.DataFrame:
    df = pd.DataFrame(
        rows,
        columns=[
            "prd_id",
            "prd_key",
            "prd_nm",
            "prd_cost",
            "prd_line",
            "prd_start_dt",
            "prd_end_dt",
        ],
    )
    return df.assign(
        prd_id=df["prd_id"].astype("Int64"),
        prd_cost=df["prd_cost"].astype("Int64"),
        prd_start_dt=pd.to_datetime(df["prd_start_dt"]),
        prd_end_dt=pd.to_datetime(df["prd_end_dt"]),
    )


def _sales(sales: list, quantity: list, price: list) -> pd.DataFrame:
    n = len(sales)
    return pd.DataFrame(
        {
            "sls_ord_num": [f"SO{i}" for i in range(n)],
            "sls_prd_key": ["BK-1"] * n,
            "sls_cust_id": pd.array([1] * n, dtype="Int64"),
            "sls_order_dt": pd.array([20101229] * n, dtype="Int64"),
            "sls_ship_dt": pd.array([20110105] * n, dtype="Int64"),
            "sls_due_dt": pd.array([20110110] * n, dtype="Int64"),
            "sls_sales": pd.array(sales, dtype="Int64"),
            "sls_quantity": pd.array(quantity, dtype="Int64"),
            "sls_price": pd.array(price, dtype="Int64"),
        }
    )


class TestCleanseCustomers:
    """Tests for customer deduplication and standardization."""

    def test_keeps_latest_record(self) -> None:
        """Test that the most recently created row per id survives."""
        df = _customers(
            [
                (1, "AW1", "Ana", "Diaz", "S", "F", "2024-01-01"),
                (1, "AW1", "Ana", "Diaz", "M", "F", "2024-06-01"),
                (2, "AW2", "Lee", "Chen", "S", "M", "2024-03-01"),
            ]
        )

        result = cleanse_customers(df, CONFIG)

        assert result["cst_id"].tolist() == [1, 2]
        assert result.loc[0, "cst_marital_status"] == "Married"
        assert result.loc[0, "cst_create_date"] == pd.Timestamp("2024-06-01")

    def test_order_independent(self) -> None:
        """Test that shuffling the input does not change the survivor."""
        df = _customers(
            [
                (1, "AW1", "Ana", "Diaz", "S", "F", "2024-06-01"),
                (1, "AW9", "Ann", "Diaz", "M", "F", "2024-06-01"),
                (1, "AW5", "Anne", "Diaz", "M", "F", None),
            ]
        )

        forward = cleanse_customers(df, CONFIG)
        backward = cleanse_customers(df.iloc[::-1].reset_index(drop=True), CONFIG)

        pd.testing.assert_frame_equal(forward, backward)
        # Equal dates are decided by the greatest customer key
        assert forward.loc[0, "cst_key"] == "AW9"

    def test_null_date_loses(self) -> None:
        """Test that a row without creation date never beats a dated row."""
        df = _customers(
            [
                (1, "AW9", "Ana", "Diaz", "S", "F", None),
                (1, "AW1", "Ana", "Diaz", "M", "F", "2020-01-01"),
            ]
        )

        result = cleanse_customers(df, CONFIG)

        assert result.loc[0, "cst_key"] == "AW1"

    def test_trims_names(self) -> None:
        """Test that names lose surrounding whitespace."""
        df = _customers([(1, "AW1", "  Ana ", " Diaz", "S", "F", "2024-01-01")])

        result = cleanse_customers(df, CONFIG)

        assert result.loc[0, "cst_firstname"] == "Ana"
        assert result.loc[0, "cst_lastname"] == "Diaz"

    def test_code_mapping(self) -> None:
        """Test case-insensitive codes and the n/a fallback."""
        df = _customers(
            [
                (1, "AW1", "A", "B", " s ", " f ", "2024-01-01"),
                (2, "AW2", "A", "B", "m", "M", "2024-01-01"),
                (3, "AW3", "A", "B", "X", "", "2024-01-01"),
                (4, "AW4", "A", "B", None, None, "2024-01-01"),
            ]
        )

        result = cleanse_customers(df, CONFIG)

        assert result["cst_marital_status"].tolist() == [
            "Single",
            "Married",
            "n/a",
            "n/a",
        ]
        assert result["cst_gndr"].tolist() == ["Female", "Male", "n/a", "n/a"]

    def test_custom_sentinel(self) -> None:
        """Test that the not-available label is configurable."""
        config = CleansingConfig(not_available="unknown")
        df = _customers([(1, "AW1", "A", "B", "X", "X", "2024-01-01")])

        result = cleanse_customers(df, config)

        assert result.loc[0, "cst_gndr"] == "unknown"


class TestCleanseProducts:
    """Tests for product key splitting and validity ranges."""

    @pytest.fixture
    def history(self) -> pd.DataFrame:
        """Three versions of one product and one single-version product."""
        return _products(
            [
                (212, "AC-HE-HL-U509-R", "Helmet", 12, "S ", "2011-07-01", "2011-12-28"),
                (214, "AC-HE-HL-U509-R", "Helmet", None, "s", "2013-07-01", None),
                (213, "AC-HE-HL-U509-R", "Helmet", 14, "S", "2012-07-01", "2012-12-27"),
                (215, "CO-RF-FR-R92B-58", "Frame", 1431, "z", "2003-07-01", None),
            ]
        )

    def test_splits_key(self, history: pd.DataFrame) -> None:
        """Test the category prefix and the remaining product key."""
        result = cleanse_products(history, CONFIG).set_index("prd_id")

        assert result.loc[215, "cat_id"] == "CO_RF"
        assert result.loc[215, "prd_key"] == "FR-R92B-58"
        assert result.loc[212, "cat_id"] == "AC_HE"
        assert result.loc[212, "prd_key"] == "HL-U509-R"

    def test_end_date_chain(self, history: pd.DataFrame) -> None:
        """Test that each version ends the day before the next one starts."""
        result = cleanse_products(history, CONFIG).set_index("prd_id")

        assert result.loc[212, "prd_end_dt"] == pd.Timestamp("2012-06-30")
        assert result.loc[213, "prd_end_dt"] == pd.Timestamp("2013-06-30")
        assert pd.isna(result.loc[214, "prd_end_dt"])
        assert pd.isna(result.loc[215, "prd_end_dt"])

    def test_cost_and_line(self, history: pd.DataFrame) -> None:
        """Test that missing costs become 0 and lines are decoded."""
        result = cleanse_products(history, CONFIG).set_index("prd_id")

        assert result.loc[214, "prd_cost"] == 0
        assert result.loc[212, "prd_line"] == "Other Sales"
        assert result.loc[214, "prd_line"] == "Other Sales"
        assert result.loc[215, "prd_line"] == "n/a"

    def test_start_truncated_to_date(self) -> None:
        """Test that start timestamps become dates."""
        df = _products([(1, "CO-RF-FR-1", "Frame", 1, "R", "2012-07-01 13:45:00", None)])

        result = cleanse_products(df, CONFIG)

        assert result.loc[0, "prd_start_dt"] == pd.Timestamp("2012-07-01")

    def test_null_start_sorts_last(self) -> None:
        """Test that a version without start date ends no other version."""
        df = _products(
            [
                (1, "CO-RF-FR-1", "Frame", 1, "R", "2012-07-01", None),
                (2, "CO-RF-FR-1", "Frame", 1, "R", None, None),
            ]
        )

        result = cleanse_products(df, CONFIG).set_index("prd_id")

        assert pd.isna(result.loc[1, "prd_end_dt"])
        assert pd.isna(result.loc[2, "prd_end_dt"])

    def test_order_independent(self, history: pd.DataFrame) -> None:
        """Test that input order does not matter."""
        forward = cleanse_products(history, CONFIG)
        backward = cleanse_products(history.iloc[::-1].reset_index(drop=True), CONFIG)

        pd.testing.assert_frame_equal(forward, backward)


class TestParseIntDate:
    """Tests for YYYYMMDD integer dates."""

    def test_conversion(self) -> None:
        """Test valid, zero, short, null and impossible dates."""
        values = pd.array([20101229, 0, 2010123, None, 20230230, 201012290], dtype="Int64")

        result = parse_int_date(pd.Series(values))

        assert result[0] == pd.Timestamp("2010-12-29")
        assert result[1:].isna().all()


class TestCleanseSales:
    """Tests for sales date conversion and amount repair."""

    def test_consistent_line_preserved(self) -> None:
        """Test that a consistent line keeps its values."""
        result = cleanse_sales(_sales([35], [1], [35]))

        assert result.loc[0, "sls_sales"] == 35
        assert result.loc[0, "sls_price"] == 35.0

    def test_sales_recomputed(self) -> None:
        """Test that missing, non-positive and inconsistent amounts are recomputed."""
        result = cleanse_sales(_sales([None, -10, 0, 50], [2, 2, 2, 2], [10, 10, -10, 10]))

        assert result["sls_sales"].tolist() == [20, 20, 20, 20]

    def test_price_derived(self) -> None:
        """Test that missing or non-positive prices are derived from the amount."""
        result = cleanse_sales(_sales([70, 30, -30], [2, 3, 3], [None, 0, -10]))

        assert result["sls_price"].tolist() == [35.0, 10.0, 10.0]

    def test_price_zero_quantity(self) -> None:
        """Test that a zero quantity yields a null price."""
        result = cleanse_sales(_sales([70], [0], [None]))

        assert pd.isna(result.loc[0, "sls_price"])

    def test_price_uses_raw_amount(self) -> None:
        """Test that a null amount and a null price stay unresolved."""
        result = cleanse_sales(_sales([None], [3], [-5]))

        assert result.loc[0, "sls_sales"] == 15
        assert pd.isna(result.loc[0, "sls_price"])

    def test_amount_kept_without_price(self) -> None:
        """Test that a positive amount is kept when no price can check it."""
        result = cleanse_sales(_sales([70], [2], [None]))

        assert result.loc[0, "sls_sales"] == 70

    def test_invalid_order_date(self) -> None:
        """Test that 20230230 becomes a null order date."""
        df = _sales([35], [1], [35]).assign(
            sls_order_dt=pd.array([20230230], dtype="Int64")
        )

        result = cleanse_sales(df)

        assert pd.isna(result.loc[0, "sls_order_dt"])
        assert result.loc[0, "sls_ship_dt"] == pd.Timestamp("2011-01-05")


class TestCleanseErp:
    """Tests for the ERP entities."""

    def test_customer_prefix_stripped(self) -> None:
        """Test that NAS123456 becomes 123456."""
        df = pd.DataFrame(
            {
                "cid": ["NAS123456", "AW00011000", None],
                "bdate": pd.to_datetime(["1971-10-06", "1976-05-11", None]),
                "gen": ["M", "F", None],
            }
        )

        result = cleanse_erp_customers(df, CONFIG, today=date(2025, 1, 15))

        assert result["cid"].tolist()[:2] == ["123456", "AW00011000"]
        assert pd.isna(result.loc[2, "cid"])

    def test_future_birth_dates(self) -> None:
        """Test that birth dates after the run date become null."""
        df = pd.DataFrame(
            {
                "cid": ["A", "B", "C"],
                "bdate": pd.to_datetime(["2025-01-16", "2025-01-15", "1980-01-01"]),
                "gen": ["M", "M", "M"],
            }
        )

        result = cleanse_erp_customers(df, CONFIG, today=date(2025, 1, 15))

        assert pd.isna(result.loc[0, "bdate"])
        assert result.loc[1, "bdate"] == pd.Timestamp("2025-01-15")
        assert result.loc[2, "bdate"] == pd.Timestamp("1980-01-01")

    def test_gender_mapping(self) -> None:
        """Test the ERP gender vocabulary."""
        df = pd.DataFrame(
            {
                "cid": ["A", "B", "C", "D", "E"],
                "bdate": pd.to_datetime([None] * 5),
                "gen": ["F", " female ", "MALE", "", None],
            }
        )

        result = cleanse_erp_customers(df, CONFIG, today=date(2025, 1, 15))

        assert result["gen"].tolist() == ["Female", "Female", "Male", "n/a", "n/a"]

    def test_locations(self) -> None:
        """Test id hyphen removal and country standardization."""
        df = pd.DataFrame(
            {
                "cid": ["AW-00011000", "AW-1", "AW-2", "AW-3", "AW-4", "AW-5"],
                "cntry": ["DE", " usa ", "us", "", None, " Australia "],
            }
        )

        result = cleanse_erp_locations(df, CONFIG)

        assert result.loc[0, "cid"] == "AW00011000"
        assert result["cntry"].tolist() == [
            "Germany",
            "United States",
            "United States",
            "n/a",
            "n/a",
            "Australia",
        ]

    def test_categories_unchanged(self) -> None:
        """Test that categories pass through."""
        df = pd.DataFrame(
            {
                "id": ["AC_HE"],
                "cat": ["Accessories"],
                "subcat": ["Helmets"],
                "maintenance": ["Yes"],
            }
        )

        pd.testing.assert_frame_equal(cleanse_erp_categories(df), df)


class TestLoadCleansedLayer:
    """Tests for the cleansed layer refresh."""

    @pytest.fixture
    def loaded(self, engine: Engine, sources: dict[str, Path]) -> Engine:
        """Warehouse with a fully loaded raw layer."""
        load_raw_layer(engine, sources)
        return engine

    def _read(self, engine: Engine, name: str) -> pd.DataFrame:
        with engine.connect() as conn:
            return read_frame(conn, get_table(CLEANSED, name))

    def test_refresh_counts(
        self, loaded: Engine, fixed_clock: Callable[[], datetime]
    ) -> None:
        """Test row counts in and out per table."""
        report = load_cleansed_layer(loaded, clock=fixed_clock)

        counts = {r.table: (r.rows_in, r.rows_out) for r in report.results}
        assert list(counts) == list(ENTITIES)
        assert counts["crm_cust_info"] == (4, 3)
        assert counts["crm_sales_details"] == (4, 4)
        assert counts["erp_loc_a101"] == (4, 4)
        assert report.loaded_at == fixed_clock()

    def test_cleansed_values(
        self, loaded: Engine, fixed_clock: Callable[[], datetime]
    ) -> None:
        """Test the persisted results of the sample exports."""
        load_cleansed_layer(loaded, clock=fixed_clock)

        customers = self._read(loaded, "crm_cust_info").set_index("cst_id")
        assert customers.loc[29449, "cst_firstname"] == "Ana"
        assert customers.loc[29449, "cst_marital_status"] == "Married"
        assert customers.loc[29466, "cst_gndr"] == "Male"
        assert customers.loc[29473, "cst_gndr"] == "n/a"

        sales = self._read(loaded, "crm_sales_details").set_index("sls_ord_num")
        assert pd.isna(sales.loc["SO43698", "sls_order_dt"])
        assert sales.loc["SO43698", "sls_sales"] == 2862
        assert sales.loc["SO43699", "sls_price"] == 35.0

        erp = self._read(loaded, "erp_cust_az12").set_index("cid")
        assert pd.isna(erp.loc["AW00029473", "bdate"])
        assert erp.loc["AW00029473", "gen"] == "Female"

        locations = self._read(loaded, "erp_loc_a101").set_index("cid")
        assert locations.loc["AW00029466", "cntry"] == "United States"
        assert locations.loc["AW00029473", "cntry"] == "n/a"

        audit = self._read(loaded, "erp_px_cat_g1v2")["dwh_create_date"]
        assert (audit == pd.Timestamp(fixed_clock())).all()

    def test_idempotent(
        self, loaded: Engine, fixed_clock: Callable[[], datetime]
    ) -> None:
        """Test that a second refresh leaves identical tables."""
        load_cleansed_layer(loaded, clock=fixed_clock)
        first = {name: self._read(loaded, name) for name in ENTITIES}

        load_cleansed_layer(loaded, clock=fixed_clock)
        second = {name: self._read(loaded, name) for name in ENTITIES}

        for name in ENTITIES:
            pd.testing.assert_frame_equal(first[name], second[name])

    def test_schema_violation_aborts(
        self,
        loaded: Engine,
        fixed_clock: Callable[[], datetime],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that invalid output stops the refresh before later tables."""
        monkeypatch.setattr(
            engine_module,
            "cleanse_erp_locations",
            lambda df, config: df.assign(cntry=""),  # noqa: ARG005
        )

        with pytest.raises(pa.errors.SchemaError):
            load_cleansed_layer(loaded, clock=fixed_clock)

        assert len(self._read(loaded, "crm_cust_info")) == 3
        assert self._read(loaded, "erp_loc_a101").empty
        assert self._read(loaded, "erp_px_cat_g1v2").empty

    def test_empty_raw_layer(
        self, engine: Engine, fixed_clock: Callable[[], datetime]
    ) -> None:
        """Test that an empty raw layer refreshes to empty tables."""
        report = load_cleansed_layer(engine, clock=fixed_clock)

        assert report.total_rows == 0

    def test_not_initialized(self, bare_engine: Engine) -> None:
        """Test that refreshing a bare warehouse is a configuration error."""
        with pytest.raises(WarehouseNotInitializedError):
            load_cleansed_layer(bare_engine)
