"""Host page wrapper: container lookup, fragment injection and click handlers."""
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional
from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

PARSER = "html.parser"


class Page:
    """An HTML document whose regions get filled with sheet content."""

    def __init__(self, html: str):
        self.soup = BeautifulSoup(html, PARSER)
        self.handlers: Dict[str, List[Callable[[], None]]] = {}

    @classmethod
    def from_file(cls, path) -> "Page":
        return cls(Path(path).read_text(encoding="utf-8"))

    def write(self, path):
        Path(path).write_text(self.to_html(), encoding="utf-8")
        logger.info(f"Wrote page to {path}")

    def to_html(self) -> str:
        return str(self.soup)

    def select(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    def by_id(self, element_id: str) -> Optional[Tag]:
        return self.soup.find(id=element_id)

    def book_grid(self, category: str) -> Optional[Tag]:
        """
        Find the gallery grid of a book category.

        The ``#category-<name>`` heading sits inside an accordion block
        (class ``border-b``) whose panel holds the grid.

        Args:
            category: Lower-case category name

        Returns:
            The grid element, or None if any part is missing
        """
        heading = self.by_id(f"category-{category}")
        if heading is None:
            return None

        if "border-b" in heading.get("class", []):
            block = heading
        else:
            block = heading.find_parent(class_="border-b")
        if block is None:
            return None

        return block.select_one(".accordion-panel .grid")

    def section_list(self, section: str) -> Optional[Tag]:
        """Find the item list of the talks or news section."""
        return self.select(f"#{section} .space-y-8")

    @staticmethod
    def replace_contents(container: Tag, html: str):
        """Drop the container's children and insert ``html`` in their place."""
        container.clear()
        Page.append_html(container, html)

    @staticmethod
    def append_html(container: Tag, html: str):
        fragment = BeautifulSoup(html, PARSER)
        for node in list(fragment.contents):
            container.append(node.extract())

    def set_button(self, element_id: str, text: Optional[str] = None, disabled: Optional[bool] = None):
        """
        Update a control button; missing buttons are ignored.

        Args:
            element_id: Button id
            text: New label
            disabled: Disabled state (also dims the button)
        """
        button = self.by_id(element_id)
        if button is None:
            return

        if text is not None:
            button.string = text

        if disabled is None:
            return

        classes = [c for c in button.get("class", []) if c != "opacity-50"]
        if disabled:
            button["disabled"] = ""
            classes.append("opacity-50")
        elif button.has_attr("disabled"):
            del button["disabled"]

        if classes:
            button["class"] = classes
        elif button.has_attr("class"):
            del button["class"]

    def on(self, element_id: str, handler: Callable[[], None]):
        """Register a click handler for an element id."""
        self.handlers.setdefault(element_id, []).append(handler)

    def off(self, element_id: str):
        """Remove every click handler of an element id."""
        self.handlers.pop(element_id, None)

    def click(self, element_id: str):
        """Run the click handlers of an element id, if any."""
        for handler in self.handlers.get(element_id, []):
            handler()
