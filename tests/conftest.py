# tests/conftest.py

from io import StringIO

import pandas as pd
import pytest

SALES_CSV = """sale_id,dsr_id,sale_type,package_option,payment_status,admin_approved,stock_id,created_at
s1,dsr-1,FS,Premium,paid,true,STK-001,2025-06-02
s2,dsr-1,DO,Compact,paid,true,STK-002,2025-06-05
s3,dsr-1,DVS,Access,unpaid,true,,2025-06-09
s4,dsr-1,FS,Compact,paid,,STK-004,2025-06-12
s5,dsr-1,DO,Bomba,unpaid,true,STK-005,2025-06-15
s6,dsr-2,DVS,Shangwe,paid,false,,2025-06-18
s7,dsr-2,FS,,paid,true,STK-007,2025-06-20
s8,dsr-1,FS,Premium,paid,true,STK-008,2025-05-20
"""


@pytest.fixture
def app(tmp_path):
    """A new app instance per test, with uploads kept in a temporary folder."""
    from config import TestingConfig
    from dsr_commission import create_app

    app = create_app(TestingConfig)
    app.config.update({"UPLOAD_FOLDER": str(tmp_path / "uploads")})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sales_csv():
    return SALES_CSV


@pytest.fixture
def sales_frame():
    """The demo sales sheet, validated and normalised."""
    from dsr_commission.calculator.validator import validate_sales_frame

    df, errors = validate_sales_frame(pd.read_csv(StringIO(SALES_CSV)))
    assert errors == []
    return df
