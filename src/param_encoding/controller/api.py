"""
Controller-level API for declaring and applying parameter encodings.

ParameterEncodingController gives every subclass its own EncodingRegistry,
copied from the parent class when the subclass is defined. Class authors
declare encodings after the class body, either with the class methods or
with the class decorators in this module:

    @param_encoding("show", "file_path", EncodingTag.BINARY)
    class RepositoryController(ParameterEncodingController):
        ...

Decorators apply bottom-up, so the declaration closest to the class runs first.
"""

import logging
from pathlib import Path
from typing import Any, Callable, ClassVar, Mapping, Optional, TypeVar

from ..encodings import Encoding, EncodingTag, retag, retag_nested
from .registry import EncodingRegistry, load_declarations

logger = logging.getLogger(__name__)

# Keys the router adds to params; never retagged.
ROUTING_KEYS = frozenset({"controller", "action"})

C = TypeVar("C", bound="type[ParameterEncodingController]")


class ParameterEncodingController:
    """Base class for controllers that tag request parameters with encodings.

    Each subclass gets a copy of its parent's registry in __init_subclass__,
    so declarations on a subclass never affect the parent or its siblings.
    """

    _parameter_encodings: ClassVar[EncodingRegistry] = EncodingRegistry()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Attribute lookup still finds the nearest ancestor's registry here.
        cls._parameter_encodings = cls._parameter_encodings.derive()

    @classmethod
    def skip_parameter_encoding(
        cls, *actions: Any, with_tag: Encoding = EncodingTag.BINARY
    ) -> None:
        """Tag all parameters of actions (every action if none given) with with_tag.

        This is useful where the encoding of incoming data is unknown, like
        file system paths: the action receives raw bytes instead of UTF-8 text.
        """
        cls._parameter_encodings.skip_encoding(actions, with_tag=with_tag)

    @classmethod
    def param_encoding(cls, action: Any, param: Any, encoding: Encoding) -> None:
        """Tag a single parameter of action with encoding.

        All other parameters of the action remain UTF-8, even when the class
        previously skipped encoding for every action.
        """
        cls._parameter_encodings.set_param_encoding(action, param, encoding)

    @classmethod
    def load_parameter_encodings(
        cls, name: str, config_dir: Optional[Path] = None
    ) -> None:
        """Apply the declarations of a YAML file to this class."""
        declarations = load_declarations(name, config_dir)
        cls._parameter_encodings.apply_declarations(declarations)
        logger.debug(
            f"Applied {len(declarations)} encoding declarations from {name!r} to {cls.__name__}"
        )

    @classmethod
    def action_encoding_templated(cls, action: Any) -> bool:
        return cls._parameter_encodings.is_templated(action)

    @classmethod
    def encode_param_from_template(cls, action: Any, param: Any, value: Any) -> Any:
        """Retag value with the encoding declared for param on action.

        Only valid when action_encoding_templated(action) is True.
        """
        return retag(value, cls._parameter_encodings.resolve(action, param))

    @classmethod
    def encode_params(cls, action: Any, params: Mapping[str, Any]) -> dict[str, Any]:
        """Return a copy of params with declared encodings applied.

        Nested lists and dicts under a key use that key's encoding. Routing
        keys are copied unchanged.

        Args:
            action: Action the request is dispatched to
            params: Parameter values as produced by the request parser

        Returns:
            New dict; params itself is not modified
        """
        if not cls.action_encoding_templated(action):
            return dict(params)

        registry = cls._parameter_encodings
        encoded: dict[str, Any] = {}
        for key, value in params.items():
            if key in ROUTING_KEYS:
                encoded[key] = value
                continue
            encoded[key] = retag_nested(value, registry.resolve(action, key))
        logger.debug(f"Encoded {len(encoded)} parameters for {cls.__name__}#{action}")
        return encoded


def skip_parameter_encoding(
    *actions: Any, with_tag: Encoding = EncodingTag.BINARY
) -> Callable[[C], C]:
    """Class decorator form of ParameterEncodingController.skip_parameter_encoding."""

    def _decorator(cls: C) -> C:
        cls.skip_parameter_encoding(*actions, with_tag=with_tag)
        return cls

    return _decorator


def param_encoding(action: Any, param: Any, encoding: Encoding) -> Callable[[C], C]:
    """Class decorator form of ParameterEncodingController.param_encoding."""

    def _decorator(cls: C) -> C:
        cls.param_encoding(action, param, encoding)
        return cls

    return _decorator
