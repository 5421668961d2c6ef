from rest_framework import serializers
from .models import Country


class CountrySerializer(serializers.ModelSerializer):
    class Meta:
        model = Country
        fields = [
            'id', 'name', 'capital', 'region', 'population',
            'currency_code', 'exchange_rate', 'estimated_gdp',
            'flag_url', 'last_refreshed_at'
        ]
        read_only_fields = fields


class RawCurrencySerializer(serializers.Serializer):
    code = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=10)


class RawCountrySerializer(serializers.Serializer):
    """
    One entry of the countries API payload.

    - name is required; an entry without one cannot be stored
    - population must be a non-negative integer, missing/null means 0
    - null text fields become empty strings
    - text longer than the matching column rejects the entry
    - currencies collapse to their codes, in source order; a null entry
      counts as an empty code
    """
    name = serializers.CharField(max_length=200)
    capital = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=200)
    region = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=100)
    population = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    flag = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=500)
    currencies = RawCurrencySerializer(many=True, required=False, allow_null=True)

    def validate(self, data):
        return {
            "name": data["name"],
            "capital": data.get("capital") or "",
            "region": data.get("region") or "",
            "population": data.get("population") or 0,
            "flag": data.get("flag") or "",
            "currencies": [(c or {}).get("code") or "" for c in data.get("currencies") or []],
        }


class ExchangeRatesSerializer(serializers.Serializer):
    rates = serializers.DictField()

    def validate_rates(self, value):
        """Keep numeric quotes only; null or non-numeric entries are dropped."""
        rates = {}
        for code, rate in value.items():
            if isinstance(rate, bool):
                continue
            try:
                rates[code] = float(rate)
            except (TypeError, ValueError):
                continue
        return rates


class CountryQuerySerializer(serializers.Serializer):
    """Query string accepted by GET /countries."""
    region = serializers.CharField(required=False)
    currency = serializers.CharField(required=False)
    currency_code = serializers.CharField(required=False)
    sort = serializers.ChoiceField(choices=["gdp_desc"], required=False)

    def validate(self, data):
        errors = {}
        for key in self.initial_data.keys():
            if key not in self.fields:
                errors[key] = "is not a valid filter"
        if errors:
            raise serializers.ValidationError(errors)
        # `currency` is the short alias of `currency_code`
        if "currency_code" in data:
            data.setdefault("currency", data.pop("currency_code"))
        return data
