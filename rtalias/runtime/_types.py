"""Data classes shared by alias generation, grouping, and resolution."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional


class AliasField(enum.Enum):
    """Descriptive axes an alias can be built from.

    Declaration order is the rendering order of an alias string.
    """

    FAMILY = "family"
    PLATFORM = "platform"
    CPU_ARCHITECTURE = "cpu_architecture"
    GPU_FRAMEWORK = "gpu_framework"
    CPU_INSTRUCTION_SET_EXTENSIONS = "cpu_instruction_set_extensions"
    VERSION = "version"


ALL_ALIAS_FIELDS: tuple[AliasField, ...] = tuple(AliasField)


def sorted_fields(fields: Iterable[AliasField]) -> list[AliasField]:
    """Order a collection of fields by rendering order."""
    wanted = set(fields)
    return [f for f in ALL_ALIAS_FIELDS if f in wanted]


@dataclass(frozen=True)
class EngineSpecifier:
    """Identifies one engine build by ``(name, version)``."""

    name: str
    version: str

    @property
    def engine_key(self) -> str:
        return f"{self.name}:{self.version}"


@dataclass(frozen=True)
class EngineDescriptor:
    """One installed or available runtime engine build."""

    name: str
    version: str
    family: str
    platform: str
    cpu_architecture: str
    cpu_instruction_set_extensions: tuple[str, ...] = ()
    gpu_framework: Optional[str] = None
    supported_model_formats: tuple[str, ...] = ()

    @property
    def engine_key(self) -> str:
        return f"{self.name}:{self.version}"

    @property
    def specifier(self) -> EngineSpecifier:
        return EngineSpecifier(name=self.name, version=self.version)

    def supports_all(self, model_formats: Iterable[str]) -> bool:
        return all(fmt in self.supported_model_formats for fmt in model_formats)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EngineDescriptor:
        """Build a descriptor from a snapshot entry.

        Accepts the flat snake_case shape as well as the nested shape the
        serving daemon reports (``engine``, ``cpu: {...}``, ``gpu: {...}``,
        ``supportedModelFormatNames``).
        """
        cpu = data.get("cpu") or {}
        gpu = data.get("gpu") or {}
        extensions = data.get(
            "cpu_instruction_set_extensions", cpu.get("instructionSetExtensions")
        )
        formats = data.get(
            "supported_model_formats", data.get("supportedModelFormatNames")
        )
        return cls(
            name=data["name"],
            version=data["version"],
            family=data["family"] if "family" in data else data["engine"],
            platform=data["platform"],
            cpu_architecture=(
                data["cpu_architecture"]
                if "cpu_architecture" in data
                else cpu["architecture"]
            ),
            cpu_instruction_set_extensions=tuple(extensions or ()),
            gpu_framework=data.get("gpu_framework", gpu.get("framework")),
            supported_model_formats=tuple(formats or ()),
        )


@dataclass(frozen=True)
class BuiltAlias:
    """An alias string plus the fields used to build it."""

    alias: str
    fields: frozenset[AliasField] = field(default_factory=frozenset)


@dataclass(frozen=True)
class AliasConfig:
    """Delimiters used when rendering an alias string."""

    delimiter: str = "-"
    version_delimiter: str = "@"
