from __future__ import annotations

import argparse

from sqlalchemy import inspect

from masterdata.db import engine
from masterdata.models import Base


def setup_schema(*, drop_existing: bool = False) -> list[str]:
    if drop_existing:
        Base.metadata.drop_all(bind=engine)
    existing = set(inspect(engine).get_table_names())
    Base.metadata.create_all(bind=engine)
    return [table for table in Base.metadata.sorted_tables if table.name not in existing]


def main() -> None:
    parser = argparse.ArgumentParser(description='Create the master data tables.')
    parser.add_argument(
        '--drop-existing',
        action='store_true',
        help='Drop users, accounts, purchase_accounts and fields before creating them again.',
    )
    args = parser.parse_args()

    created = setup_schema(drop_existing=args.drop_existing)
    names = ', '.join(table.name for table in created) or 'none'
    print(f'Schema setup complete: created tables={names}')


if __name__ == '__main__':
    main()
