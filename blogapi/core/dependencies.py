from fastapi import Request

from blogapi.core.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_asset_gateway(request: Request):
    return request.app.state.asset_gateway
