from __future__ import annotations

from justmcp.config import ServerConfig
from justmcp.dump import load_recipes
from justmcp.listing import load_recipes_from_listing
from justmcp.models import Recipe


def load_recipes_for(config: ServerConfig) -> list[Recipe]:
    if config.source == "list":
        return load_recipes_from_listing(config)
    return load_recipes(config)
