"""Scanline renderer for the tile, sprite and framebuffer video modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Protocol

WIDTH = 320
HEIGHT = 240

PALETTE_RAM = 0x014000
SPRITE_OAM = 0x013000
TILEMAP_BG0 = 0x015000
TILEMAP_BG1 = 0x017000
TILEMAP_FG0 = 0x019000
TILEMAP_FG1 = 0x01B000
TILEMAP_HUD = 0x01D000
TILE_DATA = 0x020000
FRAMEBUFFER = 0x000000

VRAM_LIMIT = 0x80000
SPRITE_COUNT = 512
MAX_SPRITES_PER_LINE = 128
SPRITE_LAYER = 5
OPAQUE = 16
BLACK = 0xFF000000

_TILEMAP_BASES = (TILEMAP_BG0, TILEMAP_BG1, TILEMAP_FG0, TILEMAP_FG1, TILEMAP_HUD)
_SPRITE_SIZES = (8, 16, 32, 64)


class RegisterSource(Protocol):
    """Anything that exposes the video chip's byte registers."""

    def get_register(self, index: int) -> int:
        ...


class ByteSource(Protocol):
    """Anything that answers byte reads at flat addresses (video RAM)."""

    def read_byte(self, address: int) -> int:
        ...


@dataclass
class Sprite:
    """One OAM entry: position, tile, [palBank:4][alpha:4] and flag bits."""

    x: int = 0
    y: int = 0
    tile: int = 0
    attributes: int = 0
    flags: int = 0
    priority: int = 0

    def enabled(self) -> bool:
        return bool(self.flags & 0x01)

    def hflip(self) -> bool:
        return bool(self.flags & 0x04)

    def vflip(self) -> bool:
        return bool(self.flags & 0x08)

    def rotate(self) -> bool:
        return bool(self.flags & 0x02)

    def size(self) -> int:
        return (self.flags >> 4) & 0x03

    def pal_bank(self) -> int:
        return (self.attributes >> 4) & 0x0F

    def alpha(self) -> int:
        return self.attributes & 0x0F


@dataclass
class _LineBuffer:
    color: bytearray = field(default_factory=lambda: bytearray(WIDTH))
    priority: bytearray = field(default_factory=lambda: bytearray(WIDTH))
    alpha: bytearray = field(default_factory=lambda: bytearray([OPAQUE]) * WIDTH)

    def clear(self) -> None:
        self.color[:] = bytes(WIDTH)
        self.priority[:] = bytes(WIDTH)
        self.alpha[:] = bytes([OPAQUE]) * WIDTH


def _channels(color: int) -> tuple[int, int, int, int]:
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF, (color >> 24) & 0xFF


def _pack(a: int, r: int, g: int, b: int) -> int:
    return ((a << 24) | (r << 16) | (g << 8) | b) & 0xFFFFFFFF


def _signed8(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value >= 0x80 else value


def rgb565_to_rgba8888(value: int) -> int:
    """Expand an RGB565 colour to 32 bits, red in the lowest byte."""
    r5 = (value >> 11) & 0x1F
    g6 = (value >> 5) & 0x3F
    b5 = value & 0x1F
    r = ((r5 << 3) | (r5 >> 2)) & 0xFF
    g = ((g6 << 2) | (g6 >> 4)) & 0xFF
    b = ((b5 << 3) | (b5 >> 2)) & 0xFF
    return BLACK | (b << 16) | (g << 8) | r


def apply_brightness(color: int, brightness: int) -> int:
    """Scale the colour channels by brightness/31 (0 is black, 31 unchanged)."""
    r, g, b, a = _channels(color)
    r = (r * brightness // 31) & 0xFF
    g = (g * brightness // 31) & 0xFF
    b = (b * brightness // 31) & 0xFF
    return _pack(a, r, g, b)


def apply_tint(color: int, tint_r: int, tint_g: int, tint_b: int) -> int:
    """Add signed offsets to the channels, clamping to 0..255.

    The blue channel is computed from the green input, as the hardware does.
    """
    r, g, _b, a = _channels(color)
    new_r = min(max(r + tint_r, 0), 255)
    new_g = min(max(g + tint_g, 0), 255)
    new_b = min(max(g + tint_b, 0), 255)
    return _pack(a, new_r, new_g, new_b)


def blend_alpha(fg: int, bg: int, alpha: int) -> int:
    """Mix two colours; alpha runs from 0 (all bg) to 16 (all fg)."""
    fr, fgc, fb, _ = _channels(fg)
    br, bgc, bb, _ = _channels(bg)
    r = ((fr * alpha + br * (16 - alpha)) // 16) & 0xFF
    g = ((fgc * alpha + bgc * (16 - alpha)) // 16) & 0xFF
    b = ((fb * alpha + bb * (16 - alpha)) // 16) & 0xFF
    return _pack(0xFF, r, g, b)


class VideoRenderer:
    """Renders 320x240 frames from video RAM under control of the video registers."""

    WIDTH: ClassVar[int] = WIDTH
    HEIGHT: ClassVar[int] = HEIGHT

    def __init__(self, registers: RegisterSource | None = None,
                 vram: ByteSource | None = None) -> None:
        self.registers = registers
        self.vram = vram
        self._framebuffer = [BLACK] * (WIDTH * HEIGHT)
        self._palette = [0] * 256
        self._sprites = [Sprite() for _ in range(SPRITE_COUNT)]
        self._layers = [_LineBuffer() for _ in range(6)]
        self._final = _LineBuffer()
        self._palette_dirty = True
        self._sprites_dirty = True
        self.reset()

    # State ----------------------------------------------------------------

    def reset(self) -> None:
        """Blank the screen, load a grayscale palette and clear layer buffers."""
        self._framebuffer[:] = [BLACK] * (WIDTH * HEIGHT)
        self._palette_dirty = True
        self._sprites_dirty = True
        self._palette[:] = [BLACK | (i << 16) | (i << 8) | i for i in range(256)]
        for buf in self._layers:
            buf.clear()

    def mark_palette_dirty(self) -> None:
        self._palette_dirty = True

    def mark_sprites_dirty(self) -> None:
        self._sprites_dirty = True

    @property
    def framebuffer(self) -> tuple[int, ...]:
        """Current frame as row-major 32-bit pixels."""
        return tuple(self._framebuffer)

    def pixel(self, x: int, y: int) -> int:
        return self._framebuffer[y * WIDTH + x]

    @property
    def palette(self) -> tuple[int, ...]:
        return tuple(self._palette)

    @property
    def sprites(self) -> tuple[Sprite, ...]:
        return tuple(self._sprites)

    # Rendering ------------------------------------------------------------

    def render_frame(self) -> None:
        for line in range(HEIGHT):
            self.render_scanline(line)

    def render_scanline(self, line: int) -> None:
        if self.registers is None or self.vram is None:
            return

        if self._palette_dirty:
            self._update_palette_cache()
            self._palette_dirty = False

        mode = self._reg(0x00) & 0x03
        if mode == 0:
            self._render_framebuffer_mode(line)
            return

        layer_enable = self._reg(0x01)
        if self._sprites_dirty:
            self._update_sprite_cache()
            self._sprites_dirty = False

        for layer in range(5):
            if layer_enable & (1 << layer):
                self._render_tile_layer(line, layer)
        if mode == 1 and layer_enable & 0x20:
            self._render_sprites_on_line(line)

        self._composite(line)
        self._apply_effects(line)

    # VRAM access ------------------------------------------------------------

    def _reg(self, index: int) -> int:
        return self.registers.get_register(index & 0xFF) & 0xFF

    def _read(self, address: int) -> int:
        if self.vram is None or address >= VRAM_LIMIT:
            return 0
        return self.vram.read_byte(address) & 0xFF

    def _read16(self, address: int) -> int:
        return self._read(address) | (self._read(address + 1) << 8)

    def _update_palette_cache(self) -> None:
        self._palette[:] = [rgb565_to_rgba8888(self._read16(PALETTE_RAM + i * 2))
                            for i in range(256)]

    def _update_sprite_cache(self) -> None:
        for i, sprite in enumerate(self._sprites):
            base = SPRITE_OAM + i * 8
            sprite.x = self._read16(base)
            sprite.y = self._read16(base + 2)
            sprite.tile = self._read(base + 4)
            sprite.attributes = self._read(base + 5)
            sprite.flags = self._read(base + 6)
            sprite.priority = self._read(base + 7)

    # Layers -----------------------------------------------------------------

    def _render_framebuffer_mode(self, line: int) -> None:
        src = FRAMEBUFFER + line * WIDTH
        row = line * WIDTH
        for x in range(WIDTH):
            self._framebuffer[row + x] = self._palette[self._read(src + x)]

    def _render_tile_layer(self, line: int, layer: int) -> None:
        base_reg = 0x10 + layer * 8
        scroll_x = self._reg(base_reg) | (self._reg(base_reg + 1) << 8)
        scroll_y = self._reg(base_reg + 2) | (self._reg(base_reg + 3) << 8)
        control = self._reg(base_reg + 4)
        priority = self._reg(base_reg + 5)

        bpp = control & 0x03
        big_tiles = bool((control >> 2) & 0x01)
        wide_map = bool((control >> 3) & 0x01)

        tile_px = 16 if big_tiles else 8
        map_width = 64 if wide_map else 32
        tilemap_base = _TILEMAP_BASES[layer]

        bytes_per_tile = tile_px * tile_px
        if bpp == 1:
            bytes_per_tile //= 2
        elif bpp == 0:
            bytes_per_tile //= 4

        world_y = (line + scroll_y) & 0x1FF
        tile_y, pixel_y = divmod(world_y, tile_px)
        buf = self._layers[layer]

        for screen_x in range(WIDTH):
            world_x = (screen_x + scroll_x) & 0x1FF
            tile_x, pixel_x = divmod(world_x, tile_px)

            entry = self._read16(tilemap_base + (tile_y * map_width + tile_x) * 2)
            tile_num = entry & 0x3FF
            hflip = bool(entry & 0x0400)
            vflip = bool(entry & 0x0800)
            pal_bank = (entry >> 12) & 0x0F

            px = tile_px - 1 - pixel_x if hflip else pixel_x
            py = tile_px - 1 - pixel_y if vflip else pixel_y

            row_addr = TILE_DATA + tile_num * bytes_per_tile + py * tile_px
            if bpp == 0:
                byte = self._read(row_addr + px // 4)
                color = ((byte >> ((3 - px % 4) * 2)) & 0x03) | (pal_bank << 4)
            elif bpp == 1:
                byte = self._read(row_addr + px // 2)
                color = ((byte & 0x0F) if px & 1 else (byte >> 4)) | (pal_bank << 4)
            elif bpp == 2:
                color = self._read(row_addr + px)
            else:
                color = 0

            if color == 0:
                continue
            buf.color[screen_x] = color & 0xFF
            buf.priority[screen_x] = priority
            buf.alpha[screen_x] = OPAQUE

    def _render_sprites_on_line(self, line: int) -> None:
        buf = self._layers[SPRITE_LAYER]
        on_line = 0
        for sprite in reversed(self._sprites):
            if on_line >= MAX_SPRITES_PER_LINE:
                break
            if not sprite.enabled():
                continue
            size = _SPRITE_SIZES[sprite.size()]
            if line < sprite.y or line >= sprite.y + size:
                continue
            on_line += 1

            sprite_y = line - sprite.y
            if sprite.vflip():
                sprite_y = size - 1 - sprite_y
            tile_addr = TILE_DATA + sprite.tile * 64

            for sx in range(size):
                screen_x = sprite.x + sx
                if screen_x < 0 or screen_x >= WIDTH:
                    continue
                sprite_x = size - 1 - sx if sprite.hflip() else sx
                raw = self._read(tile_addr + (sprite_y % 8) * 8 + sprite_x % 8)
                color = (raw & 0x0F) | (sprite.pal_bank() << 4)
                if color & 0x0F == 0:
                    continue
                if sprite.priority >= buf.priority[screen_x]:
                    buf.color[screen_x] = color
                    buf.priority[screen_x] = sprite.priority
                    buf.alpha[screen_x] = sprite.alpha()

    # Compositing and effects ------------------------------------------------

    def _composite(self, line: int) -> None:
        final = self._final
        for x in range(WIDTH):
            top_color, top_priority, top_alpha = 0, 0, OPAQUE
            for buf in self._layers:
                color = buf.color[x]
                if color == 0:
                    continue
                priority = buf.priority[x]
                if priority < top_priority:
                    continue
                alpha = buf.alpha[x]
                # Translucent pixels have no palette index for the blend,
                # so they are drawn as the foreground colour.
                if alpha == OPAQUE or alpha > 0:
                    top_color, top_priority, top_alpha = color, priority, OPAQUE
            final.color[x] = top_color
            final.priority[x] = top_priority
            final.alpha[x] = top_alpha

        row = line * WIDTH
        for x in range(WIDTH):
            self._framebuffer[row + x] = self._palette[final.color[x]]

    def _apply_effects(self, line: int) -> None:
        brightness = self._reg(0x08)
        tint_r = _signed8(self._reg(0x09))
        tint_g = _signed8(self._reg(0x0A))
        tint_b = _signed8(self._reg(0x0B))
        tinted = tint_r != 0 or tint_g != 0 or tint_b != 0

        row = line * WIDTH
        for x in range(WIDTH):
            color = self._framebuffer[row + x]
            if brightness != 31:
                color = apply_brightness(color, brightness)
            if tinted:
                color = apply_tint(color, tint_r, tint_g, tint_b)
            self._framebuffer[row + x] = color