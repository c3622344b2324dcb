import logging
from types import SimpleNamespace
from unittest import mock

from django.test import SimpleTestCase

from config.logging_filters import RequestIdFilter
from config.middleware import current_request_id
from .audit import LoggingAuditSink, safe_audit
from .exceptions import BadRequest, NotFound, GradingError
from .permissions import ADMIN_ROLES, STAFF_ROLES, IsRegistrarOrAdmin, IsStaffRole, has_role


def user(role=None, superuser=False, authenticated=True):
    return SimpleNamespace(role=role, is_superuser=superuser, is_authenticated=authenticated)


class PermissionHelperTests(SimpleTestCase):

    def test_has_role(self):
        self.assertTrue(has_role(user("REGISTRAR"), ADMIN_ROLES))
        self.assertFalse(has_role(user("LECTURER"), ADMIN_ROLES))
        self.assertTrue(has_role(user("LECTURER"), STAFF_ROLES))
        self.assertFalse(has_role(user("STUDENT"), STAFF_ROLES))
        self.assertTrue(has_role(user(superuser=True), ADMIN_ROLES))
        self.assertFalse(has_role(user("ADMIN", authenticated=False), ADMIN_ROLES))


class StaffPermissionTests(SimpleTestCase):

    def allowed(self, permission, role, method):
        return permission().has_permission(SimpleNamespace(method=method, user=user(role)), None)

    def test_staff_role_reads_and_writes(self):
        self.assertTrue(self.allowed(IsStaffRole, "LECTURER", "POST"))
        self.assertTrue(self.allowed(IsStaffRole, "LECTURER", "GET"))
        self.assertFalse(self.allowed(IsStaffRole, "STUDENT", "GET"))

    def test_registrar_or_admin_writes(self):
        self.assertTrue(self.allowed(IsRegistrarOrAdmin, "LECTURER", "GET"))
        self.assertFalse(self.allowed(IsRegistrarOrAdmin, "LECTURER", "POST"))
        self.assertTrue(self.allowed(IsRegistrarOrAdmin, "REGISTRAR", "POST"))


class ExceptionTests(SimpleTestCase):

    def test_status_codes(self):
        self.assertEqual(NotFound("x").status_code, 404)
        self.assertEqual(BadRequest("x").status_code, 400)
        self.assertIsInstance(NotFound("x"), GradingError)
        self.assertEqual(str(BadRequest("Reason required").detail), "Reason required")


class AuditTests(SimpleTestCase):

    def test_logging_sink_writes_audit_line(self):
        with self.assertLogs("audit", level="INFO") as cm:
            LoggingAuditSink().log(action="UPDATE", resource="Class", resource_id=7, user_id=3,
                                   new_values={"students_count": 2})
        self.assertIn("resource=Class", cm.output[0])
        self.assertIn('"students_count": 2', cm.output[0])
        self.assertEqual(cm.records[0].user, 3)

    def test_safe_audit_swallows_sink_errors(self):
        sink = mock.Mock()
        sink.log.side_effect = RuntimeError("down")
        with self.assertLogs("core.audit", level="ERROR"):
            safe_audit(sink, action="DELETE", resource="GradeScale", resource_id=1, user_id=None)
        sink.log.assert_called_once()


class RequestIdFilterTests(SimpleTestCase):

    def test_fills_missing_fields(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        self.assertTrue(RequestIdFilter().filter(record))
        self.assertEqual(record.request_id, "-")
        self.assertEqual(record.user, "-")

    def test_uses_current_request_id(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        token = current_request_id.set("abc123")
        try:
            RequestIdFilter().filter(record)
        finally:
            current_request_id.reset(token)
        self.assertEqual(record.request_id, "abc123")
