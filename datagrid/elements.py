"""
Element Tree

Provides the mutable markup node the grid is assembled from and the factory
that turns wrapper specs ("tagname key=value ...") into fresh nodes.
"""

import copy
import html
import logging
import re
from typing import Any, Dict, Iterator, List, Optional, Union

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Elements that never get a closing tag
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
})

# Elements placed on their own line when serialized with indentation
BLOCK_ELEMENTS = frozenset({
    "table", "caption", "thead", "tbody", "tfoot", "tr", "th", "td",
    "ul", "ol", "li", "dl", "dt", "dd", "div", "p", "form", "fieldset",
})

_TAG_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")
_ATTR_RE = re.compile(r"""([^\s=]+)(?:=("[^"]*"|'[^']*'|\S*))?""")

# A child is either a nested node or a chunk of ready-made markup
Child = Union["ElementNode", str]


class ElementNode:
    """
    A markup element with a tag name, attributes and children.

    A node without a name is a fragment: it serializes only its children.
    The ``class`` attribute is kept as an ordered list of names so several
    values can coexist; every other attribute is last-write-wins.
    """

    def __init__(self, name: Optional[str] = None, attrs: Optional[Dict[str, Any]] = None):
        """
        Initialize the node.

        Args:
            name: Tag name, or None for a fragment
            attrs: Initial attributes (``class`` may be a string or a list)
        """
        self.name = name
        self.attrs: Dict[str, Any] = {}
        self.classes: List[str] = []
        self.children: List[Child] = []
        if attrs:
            self.update_attrs(attrs)

    # --- attributes ---

    def set_attr(self, name: str, value: Any) -> 'ElementNode':
        """Set one attribute. ``class`` values are appended, not replaced."""
        if name == "class":
            return self.add_class(value)
        self.attrs[name] = value
        return self

    def get_attr(self, name: str, default: Any = None) -> Any:
        if name == "class":
            return " ".join(self.classes) if self.classes else default
        return self.attrs.get(name, default)

    def update_attrs(self, attrs: Dict[str, Any]) -> 'ElementNode':
        """Merge a whole attribute map onto this node."""
        for name, value in attrs.items():
            self.set_attr(name, value)
        return self

    def add_class(self, *names: Any) -> 'ElementNode':
        """Append class names; accepts space separated strings and lists."""
        for name in names:
            if not name:
                continue
            if isinstance(name, (list, tuple, set)):
                self.add_class(*name)
                continue
            for token in str(name).split():
                if token not in self.classes:
                    self.classes.append(token)
        return self

    def has_class(self, name: str) -> bool:
        return name in self.classes

    # --- content ---

    def add(self, child: Optional[Child]) -> 'ElementNode':
        """Append a child node or a chunk of markup. Empty values are skipped."""
        if child is None or (isinstance(child, str) and child == ""):
            return self
        self.children.append(child)
        return self

    def set_text(self, text: Any) -> 'ElementNode':
        """Replace the content with escaped text."""
        self.children = []
        return self.add(html.escape(str(text)))

    def set_html(self, markup: Any) -> 'ElementNode':
        """Replace the content with raw markup."""
        self.children = []
        if markup is None:
            return self
        return self.add(str(markup))

    @property
    def is_block(self) -> bool:
        return self.name in BLOCK_ELEMENTS

    @property
    def is_void(self) -> bool:
        return self.name in VOID_ELEMENTS

    def iter(self, name: Optional[str] = None) -> Iterator['ElementNode']:
        """Depth-first walk over descendant nodes, optionally filtered by tag name."""
        for child in self.children:
            if isinstance(child, ElementNode):
                if name is None or child.name == name:
                    yield child
                yield from child.iter(name)

    def element_children(self) -> List['ElementNode']:
        return [child for child in self.children if isinstance(child, ElementNode)]

    def clone(self) -> 'ElementNode':
        """Deep copy, so sibling cells never share attribute or child lists."""
        return copy.deepcopy(self)

    # --- serialization ---

    def start_tag(self) -> str:
        if self.name is None:
            return ""
        parts = [self.name]
        if self.classes:
            parts.append(f'class="{html.escape(" ".join(self.classes))}"')
        for name, value in self.attrs.items():
            if value is None or value is False:
                continue
            if value is True:
                parts.append(name)
            else:
                parts.append(f'{name}="{html.escape(str(value))}"')
        return "<" + " ".join(parts) + ">"

    def end_tag(self) -> str:
        if self.name is None or self.is_void:
            return ""
        return f"</{self.name}>"

    def render(self, indent: Optional[int] = None) -> str:
        """
        Serialize the node to markup.

        Args:
            indent: Indentation depth. None renders compactly; an integer puts
                every block-level child on its own tab-indented line.

        Returns:
            Markup text
        """
        if self.is_void:
            return self.start_tag()

        if indent is None or self.name is None:
            inner_indent = indent
        else:
            inner_indent = indent + 1

        parts = [self.start_tag()]
        broken = False
        for child in self.children:
            if isinstance(child, ElementNode):
                if inner_indent is not None and self.name is not None and child.is_block:
                    parts.append("\n" + "\t" * inner_indent)
                    broken = True
                parts.append(child.render(inner_indent))
            else:
                parts.append(child)
        if broken:
            parts.append("\n" + "\t" * indent)
        parts.append(self.end_tag())
        return "".join(parts)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"<ElementNode {self.start_tag() or '(fragment)'} children={len(self.children)}>"


class ElementFactory:
    """
    Instantiates element nodes from wrapper specs.

    A spec is either a string of the form ``"tagname key=value ..."`` or an
    ``ElementNode`` prototype, which is cloned. Every call returns a new node.
    """

    def instantiate(self, spec: Union[str, ElementNode]) -> ElementNode:
        """
        Build a fresh node from a wrapper spec.

        Args:
            spec: Markup spec string or prototype node

        Returns:
            New element node

        Raises:
            ConfigurationError: If the spec is empty or not a usable markup spec
        """
        if isinstance(spec, ElementNode):
            return spec.clone()

        if not isinstance(spec, str) or not spec.strip():
            raise ConfigurationError(f"Cannot instantiate an element from wrapper spec {spec!r}.")

        name, _, rest = spec.strip().partition(" ")
        if not _TAG_RE.match(name):
            raise ConfigurationError(f"Wrapper spec {spec!r} does not start with a tag name.")

        node = ElementNode(name)
        for match in _ATTR_RE.finditer(rest):
            key, raw = match.group(1), match.group(2)
            if raw is None:
                node.set_attr(key, True)
                continue
            if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in "\"'":
                raw = raw[1:-1]
            node.set_attr(key, raw)
        return node
