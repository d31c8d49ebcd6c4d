from django.db import models


class SiteSetting(models.Model):
    """Site-wide key/value settings, e.g. the active theme."""
    key = models.CharField(max_length=50, unique=True)
    value = models.JSONField(default=dict)
    updated_at = models.DateTimeField(auto_now=True)
    updated_by = models.CharField(max_length=150, blank=True)

    def __str__(self):
        return self.key
