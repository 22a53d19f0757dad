from django.db import models


class KeyValue(models.Model):
    """
    A single JSON document stored under a string key.
    Every record the bot keeps (files, indexes, sessions, usage counters)
    lives in this table; the key prefix tells them apart.
    """
    key = models.CharField(max_length=255, primary_key=True)
    value = models.JSONField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Key-value entry"
        verbose_name_plural = "Key-value entries"
        ordering = ['key']

    def __str__(self):
        return self.key
