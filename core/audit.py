# core/audit.py
import json
import logging

audit_logger = logging.getLogger("audit")
logger = logging.getLogger(__name__)


class AuditSink:
    """Receives before/after values of grading actions. Fire-and-forget."""

    def log(self, action, resource, resource_id, user_id, old_values=None, new_values=None):
        raise NotImplementedError


class LoggingAuditSink(AuditSink):
    """Writes one structured line per action to the 'audit' logger."""

    def log(self, action, resource, resource_id, user_id, old_values=None, new_values=None):
        audit_logger.info(
            "action=%s resource=%s resource_id=%s old=%s new=%s",
            action,
            resource,
            resource_id,
            _dump(old_values),
            _dump(new_values),
            extra={"user": user_id if user_id is not None else "-"},
        )


def _dump(values):
    if values is None:
        return "-"
    return json.dumps(values, default=str, sort_keys=True)


def safe_audit(sink, **kwargs):
    """
    Call the sink; a failing audit write never fails the primary operation.
    """
    try:
        sink.log(**kwargs)
    except Exception:
        logger.exception("audit sink failed for action=%s resource=%s resource_id=%s",
                         kwargs.get("action"), kwargs.get("resource"), kwargs.get("resource_id"))
