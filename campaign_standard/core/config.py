"""API configuration loading utilities."""

from __future__ import annotations

import pathlib
from functools import lru_cache
from typing import Dict, List

import yaml
from pydantic import BaseModel, Field

BASE_DIR = pathlib.Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = BASE_DIR / "campaign_standard.yaml"


class ServerVariableModel(BaseModel):
    default: str = ""
    description: str | None = None


class ServerModel(BaseModel):
    url: str
    variables: Dict[str, ServerVariableModel] = Field(default_factory=dict)


class SecuritySchemeModel(BaseModel):
    type: str
    scheme: str | None = None
    name: str | None = None
    location: str | None = Field(default=None, alias="in")


class ApiConfig(BaseModel):
    servers: List[ServerModel]
    security_schemes: Dict[str, SecuritySchemeModel] = Field(default_factory=dict)
    timeout: float = Field(default=30.0, gt=0)

    @property
    def server(self) -> ServerModel:
        return self.servers[0]


@lru_cache(maxsize=1)
def load_config(path: pathlib.Path | None = None) -> ApiConfig:
    """Load the API server and security scheme description from YAML."""
    config_path = path or DEFAULT_CONFIG_PATH
    raw = yaml.safe_load(config_path.read_text())
    return ApiConfig(**raw)
