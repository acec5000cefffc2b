"""
Wrapper Registry

Holds the overridable tree of wrapper specs that maps grid regions to the
markup each region is built from. Paths are space-joined keys, e.g.
``"row.header cell container"``.
"""

import copy
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


# Built-in defaults. Values are markup specs, class names or flags.
DEFAULT_WRAPPERS: Dict[str, Any] = {
    'form': {
        'container': 'form class=gridform',
        'errors': True,
    },

    'error': {
        'container': 'ul class=error',
        'item': 'li',
    },

    'grid': {
        'container': 'table class=grid',
    },

    'row.header': {
        'container': 'tr class=header',
        'cell': {
            'container': 'th',  # .checker, .actions
        },
    },

    'row.filter': {
        'container': 'tr class=filters',
        'cell': {
            'container': 'td',  # .actions
        },
        'control': {
            '.input': 'text',
            '.select': 'select',
            '.submit': 'button',
        },
    },

    'row.content': {
        'container': 'tr',  # .even
        '.even': 'even',
        'cell': {
            'container': 'td',  # .checker, .actions
        },
    },

    'row.footer': {
        'container': 'tr class=footer',
        'cell': {
            'container': 'td',
        },
    },

    'paginator': {
        'container': 'span class=paginator',
        'button': {
            'container': 'span',  # .paginator-first, -prev, -next, -last
        },
    },

    'operations': {
        'container': 'span class=operations',
    },

    'info': {
        'container': 'span class=grid-info',
    },
}


def split_path(path: str) -> List[str]:
    """
    Split a wrapper path into its keys.

    Raises:
        ConfigurationError: If the path does not have 2 or 3 keys
    """
    keys = path.split() if isinstance(path, str) else []
    if not 2 <= len(keys) <= 3:
        raise ConfigurationError(f"Wrapper path '{path}' must consist of 2 or 3 space separated keys.", path)
    return keys


class WrapperRegistry:
    """
    Nested mapping of region → sub-key → wrapper spec.

    Each registry owns a private deep copy of its wrappers, so overriding one
    renderer's wrappers never leaks into another. Overrides replace whole
    nodes: replacing a mapping discards its former children.
    """

    def __init__(self, wrappers: Optional[Dict[str, Any]] = None):
        """
        Initialize the registry.

        Args:
            wrappers: Wrapper tree to start from; defaults to DEFAULT_WRAPPERS
        """
        self._wrappers: Dict[str, Any] = copy.deepcopy(DEFAULT_WRAPPERS if wrappers is None else wrappers)

    def resolve(self, path: str) -> Any:
        """
        Return the wrapper value stored at a path.

        Args:
            path: Space-joined keys, e.g. ``"grid container"``

        Returns:
            The spec string, flag or nested mapping at that path

        Raises:
            ConfigurationError: If any key along the path is missing
        """
        node: Any = self._wrappers
        for key in split_path(path):
            if not isinstance(node, dict) or key not in node:
                logger.error(f"Unresolved wrapper path '{path}' (missing key '{key}')")
                raise ConfigurationError(f"Wrapper '{path}' is not defined.", path)
            node = node[key]
        return node

    def override(self, path: str, value: Any) -> 'WrapperRegistry':
        """
        Replace the value at a path, creating missing intermediate mappings.

        Args:
            path: Space-joined keys
            value: New spec string, prototype node, flag or mapping

        Returns:
            Self for method chaining
        """
        keys = split_path(path)
        node = self._wrappers
        for key in keys[:-1]:
            child = node.get(key)
            if not isinstance(child, dict):
                child = node[key] = {}
            node = child
        node[keys[-1]] = value
        logger.debug(f"Overrode wrapper '{path}' with {value!r}")
        return self

    def __contains__(self, path: str) -> bool:
        try:
            self.resolve(path)
        except ConfigurationError:
            return False
        return True

    def paths(self) -> Iterator[Tuple[str, Any]]:
        """Yield every leaf path together with its value."""
        def _walk(node: Dict[str, Any], prefix: List[str]) -> Iterator[Tuple[str, Any]]:
            for key, value in node.items():
                keys = prefix + [key]
                if isinstance(value, dict) and len(keys) < 3:
                    yield from _walk(value, keys)
                else:
                    yield " ".join(keys), value

        return _walk(self._wrappers, [])

    def copy(self) -> 'WrapperRegistry':
        return WrapperRegistry(self._wrappers)
