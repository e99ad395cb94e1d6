# soapsimple/models.py
"""
Pydantic models shared by the converter, the transports and the client.

A SOAP call is described by a ParameterTree: an arena of ParameterNode
objects built once from the caller's XML fragment and handed to a transport
for serialization. Nodes refer to each other by their index in the arena
rather than by object references, so the tree has no ownership cycles.

The outcome of a call is a FetchResult, which is either a success (raw XML
plus its parsed document) or a failure (message plus FailureKind).
"""

from collections.abc import Iterator
from enum import StrEnum
from typing import Any, Self

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field, model_validator

# Reserved attribute on a request element that sets the node's SOAP type
# instead of being sent as an attribute, e.g. <userId _value_type="long">.
VALUE_TYPE_ATTRIBUTE: str = '_value_type'

# Type used for every node that does not carry VALUE_TYPE_ATTRIBUTE
DEFAULT_VALUE_TYPE: str = 'string'


class FailureKind(StrEnum):
    """Category of a failed call."""

    XML_PARSE_ERROR = 'XmlParseError'
    MISSING_PARAMETER = 'MissingParameter'
    TRANSPORT_ERROR = 'TransportError'
    APPLICATION_FAULT = 'ApplicationFault'


class ParameterNode(BaseModel):
    """
    One XML element converted into a SOAP parameter.

    Attributes:
        index: Position of this node in its ParameterTree arena.
        name: Element name as written in the fragment (prefix included).
        value: Text content for leaf nodes, None for branches.
        type: SOAP type of the value, 'string' unless overridden.
        attributes: Element attributes and namespace declarations made on the
                    element, without the reserved type attribute.
        parent: Arena index of the parent node, None for top-level parameters.
        children: Arena indexes of the child nodes, in document order.
    """

    model_config = ConfigDict(extra='forbid')

    index: int = Field(..., ge=0)
    name: str = Field(..., min_length=1)
    value: str | None = None
    type: str = DEFAULT_VALUE_TYPE
    attributes: dict[str, str] = Field(default_factory=dict)
    parent: int | None = None
    children: list[int] = Field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        """A leaf carries a value and never has children."""
        return self.value is not None

    @property
    def xsi_type(self) -> str | None:
        """
        The value for the xsi:type attribute when serializing this node.

        Leaves are always typed. Branches are only typed when the caller
        asked for a type explicitly. Types that already carry a prefix
        (e.g. 'tns:Custom') are passed through untouched.
        """
        if not self.is_leaf and self.type == DEFAULT_VALUE_TYPE:
            return None
        if ':' in self.type:
            return self.type
        return f'xsd:{self.type}'


class ParameterTree(BaseModel):
    """
    Arena of ParameterNode objects in insertion (document) order.

    Usage:
        >>> tree = ParameterTree()
        >>> user = tree.add_elem(name='user')
        >>> tree.add_elem(name='id', parent=user, value='42', type='long')
        1
        >>> [node.name for node in tree.roots()]
        ['user']
    """

    model_config = ConfigDict(extra='forbid')

    nodes: list[ParameterNode] = Field(default_factory=list)

    def add_elem(
        self,
        name: str,
        attributes: dict[str, str] | None = None,
        parent: int | None = None,
        value: str | None = None,
        type: str = DEFAULT_VALUE_TYPE,  # noqa: A002
    ) -> int:
        """
        Register a new node and attach it under its parent.

        Args:
            name: Element name.
            attributes: Element attributes (reserved type attribute excluded).
            parent: Arena index of the parent, or None for a top-level node.
            value: Text value for a leaf, None for a branch.
            type: SOAP type of the node.

        Returns:
            The arena index of the new node, usable as the parent of later nodes.

        Raises:
            IndexError: If parent does not refer to an existing node.
        """
        if parent is not None and not 0 <= parent < len(self.nodes):
            raise IndexError(f'Unknown parent node index: {parent}')

        index: int = len(self.nodes)
        self.nodes.append(
            ParameterNode(
                index=index,
                name=name,
                value=value,
                type=type,
                attributes=dict(attributes or {}),
                parent=parent,
            )
        )
        if parent is not None:
            self.nodes[parent].children.append(index)
        return index

    def roots(self) -> list[ParameterNode]:
        """Top-level parameters of the call, in document order."""
        return [node for node in self.nodes if node.parent is None]

    def children_of(self, node: ParameterNode | int) -> list[ParameterNode]:
        """Child nodes of a node (given as a node or an arena index), in order."""
        index: int = node if isinstance(node, int) else node.index
        return [self.nodes[child] for child in self.nodes[index].children]

    def walk(self) -> Iterator[tuple[int, ParameterNode]]:
        """Depth-first walk yielding (depth, node) pairs in document order."""
        stack: list[tuple[int, ParameterNode]] = [
            (0, node) for node in reversed(self.roots())
        ]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            stack.extend((depth + 1, child) for child in reversed(self.children_of(node)))

    def __len__(self) -> int:
        return len(self.nodes)


class FetchResult(BaseModel):
    """
    Outcome of a SOAP call: either a success payload or a failure message.

    Exactly one of `xml` and `error` is populated. `document` is only set
    on success and `kind` only on failure.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    xml: str | None = None
    document: etree._Element | None = None
    error: str | None = None
    kind: FailureKind | None = None

    @model_validator(mode='after')
    def validate_exactly_one_outcome(self) -> Self:
        """Reject results that are both (or neither) a success and a failure."""
        is_success: bool = self.xml is not None
        is_failure: bool = self.error is not None

        if is_success == is_failure:
            raise ValueError('FetchResult needs exactly one of xml or error')

        if is_failure and self.kind is None:
            raise ValueError('A failed FetchResult must carry a failure kind')

        if is_success and self.kind is not None:
            raise ValueError('A successful FetchResult cannot carry a failure kind')

        return self

    @classmethod
    def success(cls, xml: str, document: Any = None) -> 'FetchResult':
        """Build a successful result."""
        return cls(xml=xml, document=document)

    @classmethod
    def failure(cls, error: str, kind: FailureKind) -> 'FetchResult':
        """Build a failed result."""
        return cls(error=error, kind=kind)

    @property
    def ok(self) -> bool:
        """True when the call succeeded."""
        return self.error is None
