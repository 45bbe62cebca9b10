import pytest
from django.db import connection, transaction

from hms.models import ActivityLog, Patient
from hms.services.audit import log_activity

pytestmark = pytest.mark.django_db


def test_log_activity_writes_row(make_user):
    user = make_user('nurse')
    row = log_activity(user=user, action='UPDATE', module='BED', record_id=7, description='Bed G01 occupied')
    assert row.record_id == '7'
    assert ActivityLog.objects.get().user == user


def test_failed_audit_write_leaves_transaction_usable(monkeypatch, make_patient):
    def broken_create(**kwargs):
        with connection.cursor() as c:
            c.execute('SELECT * FROM hms_missing_table')

    monkeypatch.setattr(ActivityLog.objects, 'create', broken_create)
    with transaction.atomic():
        assert log_activity(user=None, action='CREATE', module='PATIENT') is None
        assert not transaction.get_rollback()
        make_patient()
    assert Patient.objects.count() == 1
