from django.db import models


class AuditAction(models.TextChoices):
    ADDED = "Added", "Added"
    MODIFIED = "Modified", "Modified"
    DELETED = "Deleted", "Deleted"


# Bookkeeping columns that never produce an audit diff on their own.
IGNORED_FIELDS = ("updated_at",)
