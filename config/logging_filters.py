from .middleware import current_request_id


class RequestIdFilter:
    """
    Adds request_id / user to every record so the formatter never fails.
    request_id comes from the request being served, '-' outside a request.
    """
    def filter(self, record):
        if not hasattr(record, "request_id"):
            record.request_id = current_request_id.get()
        if not hasattr(record, "user"):
            record.user = "-"
        return True
