from __future__ import annotations

from pathlib import Path

import pytest

CLIENTS_CSV = """id,name,parent_id
a1,ABC,
p1,XYZ,
c1,XYZ 강남점,p1
c2,XYZ 분당점,p1
"""

TRANSACTIONS_CSV = """id,client_id,amount,status,order_date,paid_at,description
t1,a1,50000,design,2024-01-01,,명함
t2,c1,"30,000",production,2024-03-01,,전단
t3,c2,20000,production,2024-03-02,,배너
t4,zz,12345,quote,,,스티커
t5,a1,99000,completed,2024-01-01,2024-01-03,
"""

# Bank site export: short title lines above the header row
STATEMENT_CSV = """거래내역조회
계좌번호,123-456-789
거래일시,적요,보낸분/받는분,출금액(원),입금액(원),잔액(원)
2024.01.05 13:45:10,타행이체,ABC 홍길동,0,"50,000","1,050,000"
2024.03.10 10:00:00,입금 XYZ,,0,"50,000","1,100,000"
2024.03.11 10:00:00,카드대금,,"20,000",0,"1,080,000"
"""


@pytest.fixture
def store_exports(tmp_path: Path) -> dict[str, Path]:
    """clients.csv, transactions.csv and statement.csv written under tmp_path."""
    paths = {
        "clients": tmp_path / "clients.csv",
        "transactions": tmp_path / "transactions.csv",
        "statement": tmp_path / "statement.csv",
    }
    paths["clients"].write_text(CLIENTS_CSV, encoding="utf-8")
    paths["transactions"].write_text(TRANSACTIONS_CSV, encoding="utf-8")
    paths["statement"].write_text(STATEMENT_CSV, encoding="utf-8")
    return paths
