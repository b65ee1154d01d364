from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from mine_web.config import AppConfig, EndpointConfig, load_config


@dataclass
class Endpoint:
    """Resolved endpoint with id, label and SPARQL URL."""

    id: str
    label: str
    sparql_url: str


def _to_endpoint(cfg: EndpointConfig) -> Endpoint:
    return Endpoint(id=cfg["id"], label=cfg["label"], sparql_url=cfg["sparql_url"])


def get_config() -> AppConfig:
    """Small wrapper for ease of import from other modules."""

    return load_config()


def get_endpoints() -> List[Endpoint]:
    cfg = get_config()
    return [_to_endpoint(e) for e in cfg.endpoints]


def get_default_endpoint() -> Endpoint:
    endpoints = get_endpoints()
    if not endpoints:
        raise RuntimeError("No SPARQL endpoints available from configuration.")
    return endpoints[0]


def get_endpoint(endpoint_id: Optional[str]) -> Endpoint:
    """Return the endpoint with the given id, or the default one when id is None."""

    if endpoint_id is None:
        return get_default_endpoint()
    for endpoint in get_endpoints():
        if endpoint.id == endpoint_id:
            return endpoint
    raise KeyError(f"Unknown SPARQL endpoint {endpoint_id!r}.")


__all__ = [
    "Endpoint",
    "get_config",
    "get_endpoints",
    "get_default_endpoint",
    "get_endpoint",
]
