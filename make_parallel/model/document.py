"""In-memory host document: an id-indexed set of elements."""

from typing import Dict, Iterable, Iterator, List, Optional, Type, TypeVar

from make_parallel.model.elements import Element

E = TypeVar('E', bound=Element)


class Document:
    """Read-only view of the host model during one command invocation."""

    def __init__(self, elements: Iterable[Element] = (), title: str = ""):
        self.title = title
        self._elements: Dict[int, Element] = {}
        for element in elements:
            self.add(element)

    def add(self, element: Element) -> Element:
        """Register an element.

        Raises:
            ValueError: if an element with the same id is already present
        """
        if element.id in self._elements:
            raise ValueError(f"Duplicate element id {element.id}")
        self._elements[element.id] = element
        return element

    def get_element(self, element_id: Optional[int]) -> Optional[Element]:
        """Element by id, None for a missing or invalid id."""
        if element_id is None:
            return None
        return self._elements.get(element_id)

    def elements_of(self, element_class: Type[E]) -> List[E]:
        """All elements of a class, in insertion order."""
        return [e for e in self._elements.values() if isinstance(e, element_class)]

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._elements

    def __iter__(self) -> Iterator[Element]:
        return iter(self._elements.values())

    def __len__(self) -> int:
        return len(self._elements)

    def __repr__(self) -> str:
        return f"Document(title={self.title!r}, elements={len(self)})"
