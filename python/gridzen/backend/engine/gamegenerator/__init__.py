from gridzen.backend.engine.gamegenerator.colors import (
    generate_distinct_colors,
    hsl_to_rgb,
)
from gridzen.backend.engine.gamegenerator.generator import GameGenerator

__all__ = ["GameGenerator", "generate_distinct_colors", "hsl_to_rgb"]
