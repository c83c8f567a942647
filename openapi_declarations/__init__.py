"""
Генератор Python объявлений и клиентов из Swagger 2.0 / OpenAPI 3.x
"""

from .generator import ApiClientGenerator, generate_declarations
from .loader import SpecLoadError, load_spec

__all__ = [
    "ApiClientGenerator",
    "generate_declarations",
    "SpecLoadError",
    "load_spec",
]
