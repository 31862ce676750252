"""
Registry of parameter encodings for a controller class. It answers, per action,
whether an encoding template applies and which encoding a parameter gets.

Each controller class owns one EncodingRegistry. A subclass starts from a deep
copy of its parent's configuration (on_subclass_defined) and then diverges.

Declarations can also be loaded from YAML files via load_declarations(name).
Bundled files live in the package configs/ directory.
"""

import copy
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..encodings import Encoding, EncodingTag, parse_encoding

logger = logging.getLogger(__name__)


class EncodingConfigError(Exception):
    """Raised when an encoding declaration file is invalid or incomplete."""


class UntemplatedActionError(LookupError):
    """Raised when resolving a parameter for an action no encoding template covers."""


@dataclass
class ActionEncodings:
    """Encodings for the parameters of a single action.

    Parameters without an explicit entry resolve to the fallback tag.
    """

    fallback: Encoding
    params: dict[str, Encoding] = field(default_factory=dict)

    def lookup(self, param: str) -> Encoding:
        """Explicit tag for param if declared, else the action's fallback."""
        if param in self.params:
            return self.params[param]
        return self.fallback


@dataclass
class EncodingConfig:
    """Parameter encoding settings of one controller class.

    After any declaration exactly one of default_encoding / action_overrides is set.
    A config with neither means no special handling for any action.
    """

    default_encoding: Optional[Encoding] = None
    action_overrides: Optional[dict[str, ActionEncodings]] = None

    @property
    def is_empty(self) -> bool:
        return self.default_encoding is None and self.action_overrides is None


def on_subclass_defined(parent_config: EncodingConfig) -> EncodingConfig:
    """Return an independent deep copy of a parent class's config for a subclass."""
    return copy.deepcopy(parent_config)


def _merge_action(
    overrides: dict[str, ActionEncodings], action: str, fallback: Encoding
) -> None:
    """Create or update one action entry, keeping its explicit parameter tags."""
    entry = overrides.get(action)
    if entry is None:
        overrides[action] = ActionEncodings(fallback=fallback)
    else:
        entry.fallback = fallback


class EncodingRegistry:
    """Stores and resolves the parameter encoding configuration of one class."""

    def __init__(self, config: Optional[EncodingConfig] = None):
        self.config = config if config is not None else EncodingConfig()

    def derive(self) -> "EncodingRegistry":
        """New registry for a subclass, starting from a copy of this one."""
        return EncodingRegistry(on_subclass_defined(self.config))

    def skip_encoding(
        self,
        actions: Iterable[Any] = (),
        with_tag: Encoding = EncodingTag.BINARY,
    ) -> None:
        """Tag parameters of the given actions (or of every action) with with_tag.

        Args:
            actions: Action names. Empty means every action of the class.
                A single str is one action name.
            with_tag: Tag for parameters without an explicit per-parameter entry.
        """
        if isinstance(actions, str):
            actions = [actions]
        names = [str(action) for action in actions]
        if not names:
            self.config.action_overrides = None
            self.config.default_encoding = with_tag
            logger.debug(f"Class-wide parameter encoding set to {with_tag}")
            return

        self.config.default_encoding = None
        if self.config.action_overrides is None:
            self.config.action_overrides = {}
        for name in names:
            _merge_action(self.config.action_overrides, name, with_tag)
        logger.debug(f"Parameter encoding {with_tag} for actions: {', '.join(names)}")

    def set_param_encoding(self, action: Any, param: Any, encoding: Encoding) -> None:
        """Tag one parameter of one action; other parameters of the action stay text."""
        self.skip_encoding([action], with_tag=EncodingTag.TEXT_DEFAULT)
        assert self.config.action_overrides is not None  # set by skip_encoding
        self.config.action_overrides[str(action)].params[str(param)] = encoding
        logger.debug(f"Parameter {action}.{param} encoding set to {encoding}")

    def is_templated(self, action: Any) -> bool:
        """True if any encoding rule applies to action."""
        if self.config.is_empty:
            return False
        overrides = self.config.action_overrides
        return overrides is None or str(action) in overrides

    def resolve(self, action: Any, param: Any) -> Encoding:
        """Return the encoding for param of action.

        Callers check is_templated(action) first.

        Raises:
            UntemplatedActionError: If no encoding rule covers action.
        """
        overrides = self.config.action_overrides
        if overrides is None:
            if self.config.default_encoding is None:
                raise UntemplatedActionError(
                    f"No parameter encoding declared for action {str(action)!r}."
                )
            return self.config.default_encoding

        entry = overrides.get(str(action))
        if entry is None:
            raise UntemplatedActionError(
                f"Action {str(action)!r} has no parameter encoding. "
                f"Templated actions: {sorted(overrides)}."
            )
        return entry.lookup(str(param))

    def apply_declarations(self, declarations: Iterable["Declaration"]) -> None:
        """Replay declarations in order."""
        for declaration in declarations:
            declaration.apply(self)


@dataclass
class SkipEncoding:
    """Declaration equivalent to skip_encoding(actions, with_tag)."""

    actions: tuple[str, ...] = ()
    with_tag: Encoding = EncodingTag.BINARY

    def apply(self, registry: EncodingRegistry) -> None:
        registry.skip_encoding(self.actions, with_tag=self.with_tag)


@dataclass
class ParamEncoding:
    """Declaration equivalent to set_param_encoding(action, param, encoding)."""

    action: str
    param: str
    encoding: Encoding

    def apply(self, registry: EncodingRegistry) -> None:
        registry.set_param_encoding(self.action, self.param, self.encoding)


Declaration = Union[SkipEncoding, ParamEncoding]


# --- Pydantic schema for YAML validation ---


class SkipEncodingSpec(BaseModel):
    """Schema for a skip declaration. An empty skip list means every action."""

    skip: list[str]
    with_: str = Field("binary", alias="with", min_length=1)

    model_config = {"populate_by_name": True, "extra": "forbid"}


class ParamEncodingSpec(BaseModel):
    """Schema for a single parameter declaration."""

    action: str = Field(..., min_length=1)
    param: str = Field(..., min_length=1)
    encoding: str = Field(..., min_length=1)

    model_config = {"extra": "forbid"}


class DeclarationFileSpec(BaseModel):
    """Schema for a whole declaration file."""

    declarations: list[Union[ParamEncodingSpec, SkipEncodingSpec]]


def _to_declaration(spec: Union[ParamEncodingSpec, SkipEncodingSpec]) -> Declaration:
    """Convert a validated spec into a declaration with a resolved tag."""
    if isinstance(spec, ParamEncodingSpec):
        return ParamEncoding(
            action=spec.action,
            param=spec.param,
            encoding=parse_encoding(spec.encoding),
        )
    return SkipEncoding(actions=tuple(spec.skip), with_tag=parse_encoding(spec.with_))


def _read_config(name: str, config_dir: Optional[Path]) -> str:
    """Read the raw text of a declaration file."""
    if config_dir is not None:
        config_path = config_dir / f"{name}.yaml"
        if not config_path.exists():
            logger.error("Config file not found: %s", config_path)
            raise EncodingConfigError(f"Config {name!r} not found at {config_path}.")
        return config_path.read_text(encoding="utf-8")

    try:
        pkg = resources.files("param_encoding")
        config_path = pkg / "configs" / f"{name}.yaml"
        return config_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        logger.error("Config not found: %s", e)
        raise EncodingConfigError(
            f"Config {name!r} not found in package configs."
        ) from e


def load_declarations(
    name: str,
    config_dir: Optional[Path] = None,
) -> list[Declaration]:
    """Load parameter encoding declarations from a YAML file by name.

    Args:
        name: File name without extension (e.g. 'repository_files').
        config_dir: Optional directory holding the file. If None, loads from package configs/.

    Returns:
        Declarations in file order, ready for EncodingRegistry.apply_declarations.

    Raises:
        EncodingConfigError: If the file is missing, invalid, or declares nothing.
    """
    content = _read_config(name, config_dir)

    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        logger.error("Invalid YAML in config %s: %s", name, e)
        raise EncodingConfigError(f"Invalid YAML in config {name!r}: {e}.") from e

    if not isinstance(raw, dict):
        logger.error("Config %s root must be a dict, got %s", name, type(raw))
        raise EncodingConfigError(
            f"Config {name!r} root must be a mapping, got {type(raw).__name__}."
        )

    if not raw.get("declarations"):
        logger.error("Config %s is empty", name)
        raise EncodingConfigError(f"Config {name!r} is empty.")

    try:
        spec = DeclarationFileSpec.model_validate(raw)
    except ValidationError as e:
        logger.error("Config %s failed validation: %s", name, e)
        raise EncodingConfigError(
            f"Config {name!r} failed validation: {e}."
        ) from e

    return [_to_declaration(item) for item in spec.declarations]


def load_encoding_registry(
    name: str,
    config_dir: Optional[Path] = None,
) -> EncodingRegistry:
    """Build a fresh registry from a declaration file."""
    registry = EncodingRegistry()
    registry.apply_declarations(load_declarations(name, config_dir))
    return registry
