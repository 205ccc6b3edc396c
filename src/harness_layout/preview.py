"""Top-down PNG preview of a laid-out harness, drawn with Pillow.

The preview projects the scene onto the vehicle X/Y plane: zones become
rectangles, routes become polylines in their wire color, and nodes become
labelled dots.  It is a debugging aid for layout requests, not a
replacement for the 3D front end.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from .models import CoordinateSystem, PositionedNode, WireRoute


# --- Font handling ---

def _load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a font, falling back to default if none available."""
    font_paths = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        "/usr/share/fonts/TTF/DejaVuSans.ttf",
    ]
    for fp in font_paths:
        if Path(fp).exists():
            return ImageFont.truetype(fp, size)
    return ImageFont.load_default()


def _hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert hex color to RGB tuple. Supports both 3-char and 6-char hex."""
    hex_color = hex_color.lstrip("#")
    if len(hex_color) == 3:
        hex_color = hex_color[0]*2 + hex_color[1]*2 + hex_color[2]*2
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


class ScenePreview:
    """Renders positioned nodes and wire routes to a PNG image."""

    PADDING = 40
    PIXELS_PER_UNIT = 200
    NODE_RADIUS = 5
    # Large scenes are drawn at fewer pixels per unit to stay within this
    MAX_IMAGE_SIDE = 4096
    MAX_SCALE = 10.0

    BACKGROUND = "#11111b"
    ZONE_BORDER = "#45475a"
    ZONE_LABEL = "#a6adc8"
    NODE_FILL = "#cdd6f4"
    # Black wires would vanish on the dark background
    DARK_WIRE = "#585b70"

    def __init__(self, scale: float = 1.0):
        if not 0 < scale <= self.MAX_SCALE:
            raise ValueError(f"Preview scale must be in (0, {self.MAX_SCALE}], got {scale}")
        self.scale = scale
        self.font = _load_font(max(1, int(11 * scale)))

    def render(
        self,
        nodes: list[PositionedNode],
        routes: list[WireRoute],
        coordinate_system: Optional[CoordinateSystem] = None,
        output_path: Optional[str] = None,
    ) -> bytes:
        """Render the scene to PNG bytes. Optionally save to file."""
        zones = coordinate_system.zones if coordinate_system else {}
        min_x, min_y, max_x, max_y = self._bounds(nodes, routes, coordinate_system)

        ppu = self.PIXELS_PER_UNIT * self.scale
        pad = self.PADDING * self.scale
        extent = max(max_x - min_x, max_y - min_y)
        if extent > 0:
            ppu = min(ppu, (self.MAX_IMAGE_SIDE - 2 * pad) / extent)
        img_width = int((max_x - min_x) * ppu + 2 * pad) or 1
        img_height = int((max_y - min_y) * ppu + 2 * pad) or 1

        img = Image.new("RGB", (img_width, img_height), _hex_to_rgb(self.BACKGROUND))
        draw = ImageDraw.Draw(img)

        def to_px(x: float, y: float) -> tuple[float, float]:
            # Vehicle +Y points up in the image
            return (pad + (x - min_x) * ppu, img_height - pad - (y - min_y) * ppu)

        for name, zone in zones.items():
            cx, cy, _ = zone.center
            sx, sy, _ = zone.size
            x0, y0 = to_px(cx - sx / 2, cy + sy / 2)
            x1, y1 = to_px(cx + sx / 2, cy - sy / 2)
            x0, x1 = sorted((x0, x1))
            y0, y1 = sorted((y0, y1))
            draw.rectangle([x0, y0, x1, y1], outline=self.ZONE_BORDER, width=max(1, int(self.scale)))
            draw.text((x0 + 4, y0 + 2), name, fill=self.ZONE_LABEL, font=self.font)

        for route in routes:
            color = route.color if route.color.upper() != "#000000" else self.DARK_WIRE
            points = [to_px(p[0], p[1]) for p in route.path]
            draw.line(points, fill=_hex_to_rgb(color), width=max(1, int(2 * self.scale)))

        r = self.NODE_RADIUS * self.scale
        for node in nodes:
            px, py = to_px(node.position[0], node.position[1])
            draw.ellipse([px - r, py - r, px + r, py + r], fill=self.NODE_FILL)
            draw.text((px + r + 2, py - r), node.id, fill=self.NODE_FILL, font=self.font)

        buf = BytesIO()
        img.save(buf, format="PNG", optimize=True)
        png_bytes = buf.getvalue()

        if output_path:
            Path(output_path).write_bytes(png_bytes)

        return png_bytes

    def _bounds(
        self,
        nodes: list[PositionedNode],
        routes: list[WireRoute],
        coordinate_system: Optional[CoordinateSystem],
    ) -> tuple[float, float, float, float]:
        """X/Y extent of everything that will be drawn."""
        xs: list[float] = []
        ys: list[float] = []
        for node in nodes:
            xs.append(node.position[0])
            ys.append(node.position[1])
        for route in routes:
            for point in route.path:
                xs.append(point[0])
                ys.append(point[1])
        if coordinate_system:
            for zone in coordinate_system.zones.values():
                xs.extend([zone.center[0] - zone.size[0] / 2, zone.center[0] + zone.size[0] / 2])
                ys.extend([zone.center[1] - zone.size[1] / 2, zone.center[1] + zone.size[1] / 2])

        if not xs:
            return (0.0, 0.0, 1.0, 1.0)
        return (min(xs), min(ys), max(xs), max(ys))
