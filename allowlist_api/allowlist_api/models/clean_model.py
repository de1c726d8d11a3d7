from django.db import models


# Basis
class CleanModel(models.Model):
    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        self.full_clean()
        return super(CleanModel, self).save(*args, **kwargs)


# Bookkeeping columns owned by the administrative tooling
class TimestampedCleanModel(CleanModel):
    created_at = models.DateTimeField(
        auto_now_add=True,
        editable=False)
    updated_at = models.DateTimeField(
        auto_now=True,
        editable=False)

    class Meta:
        abstract = True
