"""Image export: locate the rendered plan grid in page HTML and rasterize it to PNG.

The HTML is the output of the `partials/plan_grid.html` template. Only the
subtree under the target id is kept; script/noscript elements are dropped
before the rasterizer ever sees them.
"""
import asyncio
import logging
from datetime import date
from html.parser import HTMLParser
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Protocol, Union

from nutriplan.domain.NutritionalPlan import NutritionalPlan
from nutriplan.logic.export.errors import RasterizationError, RenderTargetNotFoundError
from nutriplan.utilities.constants import DEFAULT_RENDER_TARGET, IMAGE_BACKGROUND, IMAGE_SCALE
from nutriplan.utilities.formatting import export_filename

logger = logging.getLogger(__name__)

_VOID_TAGS = {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"}
_SKIPPED_TAGS = {"script", "noscript"}


class RenderNode:
    def __init__(self, tag: str, attrs: Optional[Dict[str, str]] = None):
        self.tag = tag
        self.attrs = attrs or {}
        self.children: List[Union["RenderNode", str]] = []

    def text(self) -> str:
        parts = []
        for child in self.children:
            parts.append(child.text() if isinstance(child, RenderNode) else child)
        return " ".join(" ".join(parts).split())

    def iter(self, *tags: str) -> Iterator["RenderNode"]:
        """Depth-first descendants (self included) whose tag is in `tags`, or all when empty."""
        if not tags or self.tag in tags:
            yield self
        for child in self.children:
            if isinstance(child, RenderNode):
                yield from child.iter(*tags)

    def __repr__(self) -> str:
        return f"<{self.tag} id={self.attrs.get('id')!r} children={len(self.children)}>"


def skip_script_nodes(node: RenderNode) -> bool:
    return node.tag not in _SKIPPED_TAGS


class RasterOptions(NamedTuple):
    bgcolor: str = IMAGE_BACKGROUND
    scale: int = IMAGE_SCALE
    node_filter: Callable[[RenderNode], bool] = skip_script_nodes


class Rasterizer(Protocol):
    def rasterize(self, node: RenderNode, options: RasterOptions) -> bytes:
        ...


class ImageArtifact(NamedTuple):
    content: bytes
    filename: str
    media_type: str = "image/png"


class _SubtreeParser(HTMLParser):
    def __init__(self, target_id: str, node_filter: Callable[[RenderNode], bool]):
        super().__init__(convert_charrefs=True)
        self.target_id = target_id
        self.node_filter = node_filter
        self.root: Optional[RenderNode] = None
        self._stack: List[RenderNode] = []
        self._skip_depth = 0
        self._done = False

    def handle_starttag(self, tag, attrs):
        if self._done:
            return
        attrs = {k: (v or "") for k, v in attrs}
        if self.root is None:
            if attrs.get("id") == self.target_id:
                self.root = RenderNode(tag, attrs)
                if tag in _VOID_TAGS:
                    self._done = True
                else:
                    self._stack.append(self.root)
            return
        if not self._stack:
            return
        if self._skip_depth:
            if tag not in _VOID_TAGS:
                self._skip_depth += 1
            return
        node = RenderNode(tag, attrs)
        if not self.node_filter(node):
            if tag not in _VOID_TAGS:
                self._skip_depth = 1
            return
        self._stack[-1].children.append(node)
        if tag not in _VOID_TAGS:
            self._stack.append(node)

    def handle_endtag(self, tag):
        if self._done or not self._stack or tag in _VOID_TAGS:
            return
        if self._skip_depth:
            self._skip_depth -= 1
            return
        for i in range(len(self._stack) - 1, -1, -1):
            if self._stack[i].tag == tag:
                del self._stack[i:]
                break
        if not self._stack:
            self._done = True

    def handle_data(self, data):
        if self._stack and not self._skip_depth and data.strip():
            self._stack[-1].children.append(data)


def find_render_target(html: str, target_id: str = DEFAULT_RENDER_TARGET,
                       node_filter: Callable[[RenderNode], bool] = skip_script_nodes) -> RenderNode:
    """Subtree rooted at the element with id `target_id`; raises RenderTargetNotFoundError."""
    parser = _SubtreeParser(target_id, node_filter)
    parser.feed(html or "")
    parser.close()
    if parser.root is None:
        raise RenderTargetNotFoundError(target_id)
    return parser.root


async def export_image(html: str, plan: NutritionalPlan, target_id: str = DEFAULT_RENDER_TARGET,
                       rasterizer: Optional[Rasterizer] = None, on: Optional[date] = None,
                       options: Optional[RasterOptions] = None) -> ImageArtifact:
    options = options or RasterOptions()
    node = find_render_target(html, target_id, options.node_filter)
    if rasterizer is None:
        from nutriplan.infra.image_utils import PillowRasterizer
        rasterizer = PillowRasterizer()
    try:
        content = await asyncio.to_thread(rasterizer.rasterize, node, options)
    except RasterizationError:
        raise
    except Exception as e:
        logger.exception("Rasterization of #%s failed for plan %s", target_id, plan.id)
        raise RasterizationError() from e
    if not content:
        raise RasterizationError()
    return ImageArtifact(content, export_filename(plan.name, "png", on=on))


__all__ = ["RenderNode", "RasterOptions", "Rasterizer", "ImageArtifact", "find_render_target",
           "export_image", "skip_script_nodes"]
