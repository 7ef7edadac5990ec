"""
Normalized build model.

Every record is a frozen pydantic model: the normalizer builds them once
per load and nothing downstream mutates them. Cross-references between
modules are id sets, never object references, so a BuildStats always
serializes as a plain tree.
"""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

ModuleType = Literal["js", "css", "image", "font", "json", "wasm", "html", "map", "unknown"]
NodeType   = Literal["js", "css", "image", "font", "json", "wasm", "html", "map", "unknown", "folder"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Size(_Frozen):
    raw:            int           = Field(ge=0)
    gzip:           Optional[int] = Field(default=None, ge=0)
    # True when gzip is an estimate rather than a measured value.
    gzip_estimated: bool          = False


class Module(_Frozen):
    id:           str
    name:         str
    path:         str
    size:         Size
    type:         ModuleType
    dependencies: frozenset[str] = frozenset()
    dependents:   frozenset[str] = frozenset()

    @field_serializer("dependencies", "dependents")
    def _sorted_ids(self, ids: frozenset[str]) -> list[str]:
        return sorted(ids)


class Asset(_Frozen):
    name:   str
    size:   Size
    type:   ModuleType
    chunks: frozenset[str] = frozenset()

    @field_serializer("chunks")
    def _sorted_chunks(self, ids: frozenset[str]) -> list[str]:
        return sorted(ids)


class Chunk(_Frozen):
    id:      str
    name:    str
    size:    Size
    modules: tuple[str, ...] = ()


class BuildStats(_Frozen):
    timestamp:   int
    total_size:  Size
    total_time:  Optional[float] = None
    modules:     tuple[Module, ...] = ()
    assets:      tuple[Asset, ...]  = ()
    chunks:      tuple[Chunk, ...]  = ()
    entrypoints: tuple[str, ...]    = ()

    def module_index(self) -> dict[str, Module]:
        return {m.id: m for m in self.modules}


class HierarchyNode(_Frozen):
    name:          str
    path:          str
    type:          NodeType
    value:         int
    children:      tuple["HierarchyNode", ...] = ()
    origin_module: Optional[Module] = None

    @property
    def is_leaf(self) -> bool:
        return self.origin_module is not None
