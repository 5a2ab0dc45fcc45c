"""
Plugin manifest schema.

Catalog entries are validated against PluginManifest before they are
stored. Unknown top-level keys (admin_ui, api_endpoints, ...) are kept
as-is.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .dependencies import version_specifier
from .hooks import HookName


class PluginCategory(str, Enum):
    cms = "cms"
    auth = "auth"
    payment = "payment"
    delivery = "delivery"
    email = "email"
    analytics = "analytics"
    integration = "integration"
    ui = "ui"
    workflow = "workflow"
    utility = "utility"


class HookDefinition(BaseModel):
    name: HookName
    handler: str = Field(..., min_length=1)  # "package.module:function" or "hooks/file.py:function"
    priority: int = 100


class SettingDefinition(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["string", "number", "boolean", "object", "array", "select", "multiselect"]
    label: str
    description: Optional[str] = None
    default: Any = None
    required: bool = False


class PluginDependency(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)  # slug of the required plugin
    version: str = "*"
    optional: bool = False

    @field_validator("version")
    @classmethod
    def check_range(cls, value: str) -> str:
        version_specifier(value)
        return value


class PluginManifest(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    version: str = Field(..., pattern=r"^\d+\.\d+\.\d+$")
    description: str = Field(..., max_length=500)
    author: str = Field(..., max_length=100)
    platform_version: str = "1.0.0"
    category: PluginCategory
    tags: List[str] = Field(default_factory=list)
    hooks: List[HookDefinition] = Field(default_factory=list)
    settings_schema: Dict[str, SettingDefinition] = Field(default_factory=dict)
    dependencies: List[PluginDependency] = Field(default_factory=list)
    peer_dependencies: List[PluginDependency] = Field(default_factory=list)

    def default_config(self) -> Dict[str, Any]:
        """Settings defaults, used when a tenant installs without config"""
        return {
            key: setting.default
            for key, setting in self.settings_schema.items()
            if setting.default is not None
        }

    def missing_settings(self, config: Dict[str, Any]) -> List[str]:
        return [
            key
            for key, setting in self.settings_schema.items()
            if setting.required and config.get(key) in (None, "")
        ]
