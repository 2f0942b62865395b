import pytest

from customer_directory.models import Customer
from customer_directory.uow import ReadOnlyViolation
from customer_directory.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from tests.factories.customer import CustomerFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, app, session):
        """
        Flushing a pending customer inside the RO UoW raises.
        """
        with ROuow() as uow, pytest.raises(ReadOnlyViolation, match="cannot flush 1 pending"):
            uow.session.add(CustomerFactory.build())
            uow.session.flush()

    def test_blocks_dirty_records(self, app, session):
        c = CustomerFactory()
        session.commit()

        with ROuow() as uow, pytest.raises(ReadOnlyViolation):
            c.first_name = "Changed"
            uow.session.flush()

    def test_allows_reads(self, app, session):
        """
        Read operations should work normally within RO UoW.
        """
        CustomerFactory()
        session.commit()

        with ROuow() as uow:
            assert uow.session.query(Customer).count() >= 1
            assert uow.customers.find_all().total >= 1

    def test_joins_running_transaction(self, app, session):
        """
        GIVEN a transaction already running on the session
        WHEN a RO UoW opens and closes inside it
        THEN the outer transaction and its rows are left alone.
        """
        c = CustomerFactory()

        with ROuow() as uow:
            assert uow.customers.find_by_id(c.id) is not None

        assert session.in_transaction()
        assert session.get(Customer, c.id) is not None

    def test_guard_is_removed_on_exit(self, app, session):
        with ROuow():
            pass

        session.add(CustomerFactory.build())
        session.flush()

    def test_nested_scopes_keep_the_outer_guard(self, app, session):
        with ROuow() as outer:
            with ROuow():
                pass
            with pytest.raises(ReadOnlyViolation):
                outer.session.add(CustomerFactory.build())
                outer.session.flush()

    def test_disallows_commit(self, app, session):
        """
        RO UoW must reject commit().
        """
        with ROuow() as uow, pytest.raises(ReadOnlyViolation, match="cannot commit"):
            uow.commit()
