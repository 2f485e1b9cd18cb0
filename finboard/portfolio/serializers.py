from rest_framework import serializers


class StockHoldingSerializer(serializers.Serializer):
    id = serializers.CharField()
    particulars = serializers.CharField()
    purchase_price = serializers.FloatField()
    quantity = serializers.FloatField()
    investment = serializers.FloatField()
    portfolio_percentage = serializers.FloatField()
    exchange = serializers.CharField()
    sector = serializers.CharField()
    cmp = serializers.FloatField()
    present_value = serializers.FloatField()
    gain_loss = serializers.FloatField()
    pe_ratio = serializers.FloatField()
    latest_earnings = serializers.FloatField()
    market_cap = serializers.FloatField(allow_null=True)
    flagged = serializers.BooleanField()
    last_updated = serializers.DateTimeField()


class SectorSummarySerializer(serializers.Serializer):
    sector = serializers.CharField()
    total_investment = serializers.FloatField()
    total_present_value = serializers.FloatField()
    total_gain_loss = serializers.FloatField()
    stock_count = serializers.IntegerField()


class PortfolioDataSerializer(serializers.Serializer):
    holdings = StockHoldingSerializer(many=True)
    sector_summaries = SectorSummarySerializer(many=True)
    total_investment = serializers.FloatField()
    total_present_value = serializers.FloatField()
    total_gain_loss = serializers.FloatField()
    total_gain_loss_percentage = serializers.FloatField()


class PortfolioImportSerializer(serializers.Serializer):
    file = serializers.FileField()
