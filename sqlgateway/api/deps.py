from typing import Annotated

from fastapi import Depends, Request

from sqlgateway.core.config import Settings
from sqlgateway.core.connection import ConnectionManager, get_connection_manager
from sqlgateway.models import ConnectionConfig


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_connection_config(request: Request) -> ConnectionConfig:
    """The immutable config built at startup; never re-read from the environment."""
    return request.app.state.connection_config


def get_manager() -> ConnectionManager:
    return get_connection_manager()


SettingsDep = Annotated[Settings, Depends(get_settings)]
ConfigDep = Annotated[ConnectionConfig, Depends(get_connection_config)]
ManagerDep = Annotated[ConnectionManager, Depends(get_manager)]
