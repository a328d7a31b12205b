# apps/core/models.py
import uuid
from django.db import models
from django.utils.translation import gettext_lazy as _


class CoreBaseModel(models.Model):
    """
    Base model shared by hostel records:
    - UUID primary key
    - Created/updated timestamps
    """

    # UUID Primary Key
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Timestamp fields
    created_at = models.DateTimeField(_('created at'), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True, db_index=True)

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.__class__.__name__} {self.id}"


class AppendOnlyModel(models.Model):
    """
    Base model for log rows that are written once and never changed.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(_('created at'), auto_now_add=True, db_index=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError(_("%(model)s entries cannot be modified.") % {
                'model': self.__class__.__name__
            })
        super().save(*args, **kwargs)

    def delete(self, using=None, keep_parents=False):
        raise ValueError(_("%(model)s entries cannot be deleted.") % {
            'model': self.__class__.__name__
        })
