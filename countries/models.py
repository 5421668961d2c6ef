from django.db import models


def name_key_for(name):
    """Case-folded form of a country name, used for every name lookup."""
    return name.casefold()


class Country(models.Model):
    # id — auto-generated, kept stable across refreshes
    name = models.CharField(max_length=200, unique=True)
    # name_key — casefold(name); unique, so "Åland Islands" and
    # "åland islands" cannot both be stored
    name_key = models.CharField(max_length=400, unique=True, editable=False)
    capital = models.CharField(max_length=200, blank=True, default="")
    region = models.CharField(max_length=100, blank=True, default="")
    population = models.BigIntegerField(default=0)
    # currency_code — first listed currency, empty when the source had none
    currency_code = models.CharField(max_length=10, blank=True, default="")
    # exchange_rate — null when the currency has no quoted rate
    exchange_rate = models.FloatField(null=True, blank=True)
    # estimated_gdp — computed; null exactly when exchange_rate is null
    estimated_gdp = models.FloatField(null=True, blank=True)
    flag_url = models.URLField(max_length=500, blank=True, default="")
    # last_refreshed_at — shared by every record touched in one refresh
    last_refreshed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name_plural = "countries"

    def save(self, *args, **kwargs):
        self.name_key = name_key_for(self.name)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "name" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"name_key"}
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name
