from masterdata.db import SessionLocal
from masterdata.services.account_service import create_account, list_accounts
from masterdata.services.field_service import create_field
from masterdata.services.master_data import ListFilter
from masterdata.services.purchase_account_service import create_purchase_account, list_purchase_accounts
from masterdata.services.user_service import create_user, user_exists


def seed() -> None:
    with SessionLocal() as db:
        if not user_exists(db, 'admin'):
            create_user(
                db,
                values={
                    'id': 'admin',
                    'name': '관리자',
                    'grade': 'admin',
                    'department': '관리부',
                    'password': 'adminpass',
                },
                created_by='seed',
            )

        _, account_count = list_accounts(db, filters=ListFilter(limit=1))
        if not account_count:
            account = create_account(
                db,
                values={
                    'name': '신경산업',
                    'representative': '홍길동',
                    'registration_number': '123-45-67890',
                    'phone': '02-1234-5678',
                    'business_type': '제조업',
                    'invoice': '월말',
                },
                created_by='seed',
            )
            create_field(db, values={'account_id': account.id, 'field_name': '본사 현장'}, created_by='seed')

        _, purchase_count = list_purchase_accounts(db, filters=ListFilter(limit=1))
        if not purchase_count:
            create_purchase_account(
                db,
                values={'name': '대한자재', 'representative': '김철수', 'phone': '031-123-4567'},
                created_by='seed',
            )

        db.commit()


if __name__ == '__main__':
    seed()
    print('Seed data inserted/verified.')
