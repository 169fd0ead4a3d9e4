"""Shared request dependencies."""

from __future__ import annotations

from fastapi import Request

from ..services.analysis.service import OrderAnalyzer, build_analyzer
from ..services.onemap.client import OneMapClient


def get_onemap_client(request: Request) -> OneMapClient:
    state = request.app.state
    if getattr(state, "onemap_client", None) is None:
        state.onemap_client = OneMapClient()
    return state.onemap_client


def get_analyzer(request: Request) -> OrderAnalyzer:
    state = request.app.state
    if getattr(state, "analyzer", None) is None:
        state.analyzer = build_analyzer(get_onemap_client(request))
    return state.analyzer
