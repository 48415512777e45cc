"""
Runtime Configuration Store.

`RewriteOptions` is the external, serializable configuration surface (TOML or
programmatic). `TransformerConfig` is the immutable snapshot the transformer
units read during a single conversion.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

# Instance members that are resolved by dedicated units (or need no rewrite
# beyond dropping `this.`), so the generic rewrite never flags them.
FRAMEWORK_RESERVED_NAMES: Tuple[str, ...] = (
  "$axios",
  "$http",
  "$api",
  "$fetch",
  "$route",
  "$router",
  "$store",
  "$vuex",
  "$t",
  "$i18n",
  "$n",
  "$d",
  "$config",
  "$nextTick",
  "$refs",
  "$emit",
  "$nuxt",
  "$options",
  "$parent",
  "$children",
  "$el",
  "$data",
  "$props",
  "$attrs",
  "$slots",
  "$scopedSlots",
  "$set",
  "$delete",
  "$watch",
  "$forceUpdate",
  "$destroy",
)


class MixinConfig(BaseModel):
  """Maps a mixin module onto a composable."""

  name: str = Field(..., description="Composable function name, e.g. 'usePrice'.")
  imports: List[str] = Field(default_factory=list, description="Members the composable exposes.")


class ImportRewrite(BaseModel):
  """Retargets imports from one library to another."""

  name: str = Field(..., description="Replacement import source.")
  component_rewrite: Dict[str, str] = Field(default_factory=dict, description="Old component name -> new name.")
  directives: Dict[str, str] = Field(default_factory=dict, description="Template directive -> imported name.")


class AdditionalImport(BaseModel):
  """Action taken when a component tag appears in the template."""

  import_path: Optional[str] = Field(None, description="Verbatim import statement to inject.")
  rewrite_to: Optional[str] = Field(None, description="Tag name to rename the component to.")


class RewriteOptions(BaseModel):
  """
  User supplied options for a conversion.
  """

  model_config = ConfigDict(extra="forbid")

  mixins: Dict[str, MixinConfig] = Field(default_factory=dict, description="Mixin key -> composable mapping.")
  imports_rewrite: Dict[str, ImportRewrite] = Field(default_factory=dict, description="Import source rewrites.")
  additional_imports: Dict[str, AdditionalImport] = Field(default_factory=dict, description="Tag triggered imports.")
  import_keeplist: List[str] = Field(default_factory=list, description="Import sources never removed.")
  reserved_names: List[str] = Field(default_factory=list, description="Extra `this.$x` names treated as resolved.")
  enable_i18n: bool = Field(True, description="Convert $t/$n/$d and $i18n to vue-i18n.")
  enable_asset_transforms: bool = Field(True, description="Rewrite ~/assets paths in the template.")

  @classmethod
  def from_dict(cls, data: Dict[str, Any]) -> "RewriteOptions":
    """
    Validates a raw mapping (e.g. a TOML table).

    Raises:
        ValueError: If the mapping does not match the schema.
    """
    try:
      return cls.model_validate(data)
    except ValidationError as e:
      raise ValueError(f"Invalid rewrite options: {e}")

  @classmethod
  def load(cls, config_file: Optional[Path] = None, search_path: Optional[Path] = None) -> "RewriteOptions":
    """
    Loads options from an explicit TOML file or from `pyproject.toml`.

    An explicit file is read as a whole. Otherwise the nearest `pyproject.toml`
    above `search_path` is consulted for a `[tool.vue_switcheroo]` table.

    Args:
        config_file (Optional[Path]): Dedicated TOML file.
        search_path (Optional[Path]): Directory to start searching from.

    Returns:
        RewriteOptions: The validated options (defaults when nothing is found).
    """
    if config_file is not None:
      with open(config_file, "rb") as f:
        return cls.from_dict(tomllib.load(f))

    settings, _ = _load_toml_settings(search_path or Path.cwd())
    return cls.from_dict(settings)


class TransformerConfig(BaseModel):
  """
  Immutable view of the options, shared read-only by every transformer unit.
  """

  model_config = ConfigDict(frozen=True)

  mixins: Dict[str, MixinConfig] = Field(default_factory=dict)
  imports_rewrite: Dict[str, ImportRewrite] = Field(default_factory=dict)
  additional_imports: Dict[str, AdditionalImport] = Field(default_factory=dict)
  import_keeplist: Tuple[str, ...] = ()
  reserved_names: Tuple[str, ...] = FRAMEWORK_RESERVED_NAMES
  enable_i18n: bool = True
  enable_asset_transforms: bool = True

  @classmethod
  def from_options(cls, options: Optional[RewriteOptions] = None) -> "TransformerConfig":
    """
    Builds the snapshot for one conversion.

    Args:
        options (Optional[RewriteOptions]): User options; defaults when None.

    Returns:
        TransformerConfig: The frozen configuration.
    """
    options = options or RewriteOptions()
    return cls(
      mixins=dict(options.mixins),
      imports_rewrite=dict(options.imports_rewrite),
      additional_imports=dict(options.additional_imports),
      import_keeplist=tuple(options.import_keeplist),
      reserved_names=FRAMEWORK_RESERVED_NAMES + tuple(options.reserved_names),
      enable_i18n=options.enable_i18n,
      enable_asset_transforms=options.enable_asset_transforms,
    )

  def mixin_members(self) -> List[str]:
    """All member names exposed by configured mixin composables."""
    members: List[str] = []
    for mixin in self.mixins.values():
      members.extend(mixin.imports)
    return members


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
      tool_section = data.get("tool", {})
      return tool_section.get("vue_switcheroo", {}), parent

  return {}, None
