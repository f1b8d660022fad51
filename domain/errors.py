from __future__ import annotations


class StructuralError(ValueError):
    """A referenced parent or child id breaks the element tree."""


class ElementNotFound(StructuralError, KeyError):
    def __init__(self, element_id: str) -> None:
        self.element_id = element_id
        super().__init__(f"Element not found: {element_id}")

    def __str__(self) -> str:
        return f"Element not found: {self.element_id}"


class PageNotFound(StructuralError, KeyError):
    def __init__(self, page_id: str) -> None:
        self.page_id = page_id
        super().__init__(f"Page not found: {page_id}")

    def __str__(self) -> str:
        return f"Page not found: {self.page_id}"


class NothingToCompileError(StructuralError):
    pass


class UnsupportedTypeError(ValueError):
    def __init__(self, element_type: str) -> None:
        self.element_type = element_type
        super().__init__(f"Unsupported element type: {element_type!r}")


class AmbiguousSizingError(ValueError):
    def __init__(self, element_id: str, axis: str) -> None:
        self.element_id = element_id
        self.axis = axis
        super().__init__(
            f"Element {element_id} fills {axis} inside a parent that hugs {axis}; "
            "falling back to hug"
        )


class MalformedIngestionInput(ValueError):
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
