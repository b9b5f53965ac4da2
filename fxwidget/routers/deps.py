"""Shared FastAPI dependencies resolving the per-app widget objects."""

from fastapi import Request

from fxwidget.services.controller import ConversionController
from fxwidget.services.rates.providers import HTTPRateProvider


def get_controller(request: Request) -> ConversionController:
    return request.app.state.controller


def get_rate_provider(request: Request) -> HTTPRateProvider:
    return request.app.state.rate_provider
