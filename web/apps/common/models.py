from django.db import models


class Counter(models.Model):
    """Persisted monotonic counter backing a named sequence.

    One row per sequence (``users.code``, ``orders.number``). The value is
    the last number handed out and is only ever advanced with an atomic
    ``UPDATE ... SET value = value + 1``.
    """

    name = models.CharField(max_length=64, primary_key=True)
    value = models.BigIntegerField(default=0)

    class Meta:
        db_table = "counters"

    def __str__(self):
        return f"{self.name}={self.value}"
