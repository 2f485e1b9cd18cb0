from rest_framework import status
from rest_framework.parsers import MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from finboard.portfolio.importer import ImportException, import_holdings
from finboard.portfolio.market_data import is_market_open
from finboard.portfolio.serializers import PortfolioDataSerializer, PortfolioImportSerializer
from finboard.portfolio.service import get_portfolio_service


def _portfolio_response(service, **extra):
    data = PortfolioDataSerializer(service.get_portfolio_data()).data
    return Response({**data, "market_open": is_market_open(), **extra})


class PortfolioView(APIView):
    def get(self, request, *args, **kwargs):
        service = get_portfolio_service()
        service.refresh_if_stale()
        return _portfolio_response(service)


class PortfolioRefreshView(APIView):
    def post(self, request, *args, **kwargs):
        service = get_portfolio_service()
        updated = service.update_financial_data()
        return _portfolio_response(service, updated=updated)


class PortfolioImportView(APIView):
    parser_classes = [MultiPartParser]

    def post(self, request, *args, **kwargs):
        serializer = PortfolioImportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            holdings = import_holdings(serializer.validated_data["file"])
        except ImportException as e:
            return Response({"error": e.message}, status=status.HTTP_400_BAD_REQUEST)

        service = get_portfolio_service()
        service.replace_holdings(holdings)
        return _portfolio_response(service, imported=len(holdings))


class PortfolioResetView(APIView):
    def post(self, request, *args, **kwargs):
        service = get_portfolio_service()
        service.reset_to_sample_data()
        return _portfolio_response(service)
