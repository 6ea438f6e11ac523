# apps/groups/services/preview_image.py

import io
import re

from PIL import Image, ImageDraw, ImageFont


class PreviewImageError(Exception): pass
class InvalidParameterError(PreviewImageError): pass


class PreviewCardGenerator:
    """
    Renders the placeholder card shown for entries submitted without an
    image: the title in large type over the start of the description.
    """
    WIDTH, HEIGHT = 1200, 630
    PADDING = 70
    BG_COLOR = "#075E54"
    ACCENT_COLOR = "#25D366"
    TITLE_COLOR = "#FFFFFF"
    TEXT_COLOR = "#DCF8C6"
    TITLE_SIZE, TEXT_SIZE = 64, 34
    MAX_TITLE_LINES, MAX_TEXT_LINES = 2, 5

    def __init__(self, title: str, description: str, font_path: str | None = None):
        if not isinstance(title, str) or not isinstance(description, str):
            raise InvalidParameterError("Title and description must be strings.")
        if not title.strip():
            raise InvalidParameterError("Title cannot be empty.")

        self.title = self._clean(title)
        self.description = self._clean(description)
        self.font_path = font_path
        self.font_cache = {}

        self.image = Image.new('RGB', (self.WIDTH, self.HEIGHT), color=self.BG_COLOR)
        self.draw = ImageDraw.Draw(self.image)

    def _clean(self, text: str) -> str:
        """Collapses whitespace and drops characters outside the Basic Multilingual Plane (emoji)."""
        text = re.sub(r'[^\u0000-\uFFFF]', '', text)
        return re.sub(r'\s+', ' ', text).strip()

    def _get_font(self, size: int):
        if size not in self.font_cache:
            if self.font_path:
                self.font_cache[size] = ImageFont.truetype(self.font_path, size)
            else:
                self.font_cache[size] = ImageFont.load_default(size=size)
        return self.font_cache[size]

    def _wrap(self, text, font, max_width, max_lines):
        lines, current = [], ""
        for word in text.split(' '):
            candidate = f"{current} {word}".strip()
            if self.draw.textlength(candidate, font=font) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            current = word
            if len(lines) == max_lines:
                break
        if current and len(lines) < max_lines:
            lines.append(current)

        if len(lines) == max_lines and ' '.join(lines) != text:
            lines[-1] = lines[-1].rstrip('.,;: ') + '...'
        return lines

    def render(self) -> Image.Image:
        max_width = self.WIDTH - 2 * self.PADDING
        self.draw.rectangle([0, 0, 18, self.HEIGHT], fill=self.ACCENT_COLOR)

        y = self.PADDING
        title_font = self._get_font(self.TITLE_SIZE)
        for line in self._wrap(self.title, title_font, max_width, self.MAX_TITLE_LINES):
            self.draw.text((self.PADDING, y), line, font=title_font, fill=self.TITLE_COLOR)
            y += int(self.TITLE_SIZE * 1.25)

        y += 30
        text_font = self._get_font(self.TEXT_SIZE)
        for line in self._wrap(self.description, text_font, max_width, self.MAX_TEXT_LINES):
            self.draw.text((self.PADDING, y), line, font=text_font, fill=self.TEXT_COLOR)
            y += int(self.TEXT_SIZE * 1.4)

        return self.image

    def to_png_bytes(self) -> io.BytesIO:
        buffer = io.BytesIO()
        self.render().save(buffer, format='PNG')
        buffer.seek(0)
        return buffer


def create_preview_image(title: str, description: str, font_path: str | None = None) -> io.BytesIO:
    """Renders the preview card and returns it as an in-memory PNG."""
    return PreviewCardGenerator(title, description, font_path=font_path).to_png_bytes()
