import json
import math

from django.db import models


class SettingManager(models.Manager):

    def as_dict(self):
        values = dict(self.values_list('setting_key', 'setting_value'))
        if values.get(Setting.LOW_STOCK_THRESHOLD):
            values[Setting.LOW_STOCK_THRESHOLD] = _to_number(values[Setting.LOW_STOCK_THRESHOLD])
        return values

    def save_many(self, values):
        for key, value in values.items():
            self.update_or_create(setting_key=str(key), defaults={'setting_value': _to_text(value)})

    def low_stock_threshold(self, default=10):
        raw = self.filter(setting_key=Setting.LOW_STOCK_THRESHOLD).values_list('setting_value', flat=True).first()
        value = _to_number(raw) if raw else None
        if isinstance(value, (int, float)):
            return value
        return default


def _to_number(raw):
    try:
        return int(raw)
    except (TypeError, ValueError):
        pass
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return raw
    # nan and inf have no JSON form; keep them as the text that was saved
    return number if math.isfinite(number) else raw


def _to_text(value):
    if value is None:
        return ''
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


class Setting(models.Model):
    """Shop preferences as free-form key/value pairs."""
    LOW_STOCK_THRESHOLD = 'lowStockThreshold'

    setting_key = models.CharField(max_length=100, unique=True)
    setting_value = models.TextField(blank=True, default='')
    updated_at = models.DateTimeField(auto_now=True)

    objects = SettingManager()

    def __str__(self):
        return f"{self.setting_key}={self.setting_value}"
