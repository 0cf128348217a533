from dataclasses import dataclass

from schema_reflector import schema_field


@dataclass
class Hardware:
    brand: str = schema_field(json="brand", jsonschema="enum=apple|lenovo|dell")
    memory: int = schema_field(json="memory", jsonschema="minimum=8")
    ssd: bool = schema_field(json="ssd,omitempty")
