from dataclasses import dataclass

from schema_reflector import schema_field


@dataclass
class Hardware:
    brand: str = schema_field(json="brand", jsonschema="notEmpty")
    memory: int = schema_field(json="memory")
