# sanoemu

This package provides components for an emulator of the SANo console. The
SANo has three 65816-family CPUs: main, graphics and sound. They pass
messages to each other through shared mailboxes. The package depends only
on the standard library.

## Modules

### `sanoemu.log`

`Log` builds one log line from chained calls and writes it when you call
`show()`:

```python
from sanoemu.log import Log

Log.inf("Bus").text("mapped at").sp().hex(0x4000, 6).show()
# [INFO][Bus] mapped at 0x004000
```

- `text(value)` appends a value.
- `sp()` appends a space.
- `hex(value, width=0)` appends the value in upper-case hex with a `0x`
  prefix. If `width` is given, the digits are zero-padded to that width.
- `num(value)` appends a decimal number.
- `render()` returns the line built so far and does not write it.
- `show()` writes the line and a newline, then clears the line.

`Log(stream)` writes to the stream you give it. If you give none, it
writes to standard output.

The class methods `err`, `wrn`, `inf`, `dbg` and `trc` start a line with
`[ERROR][tag] `, `[WARN][tag] `, `[INFO][tag] `, `[DEBUG][tag] ` or
`[TRACE][tag] `. `err` writes to standard error. The others write to
standard output.

The module also has the one-shot functions `info`, `debug`, `warning` and
`error`. Each one prints its message with a `[INFO]`, `[DEBUG]`,
`[WARNING]` or `[ERROR]` prefix. `error` prints to standard error.

### `sanoemu.memory_bus`

`MemoryBus` is a 24-bit address space. You map `MemoryDevice` objects onto
it with `map_device(device, base_address, size)`. A `MemoryDevice` is an
abstract class with two methods, `read(address)` and `write(address,
value)`. They receive the absolute address, masked to 24 bits.

- A read from an address where nothing is mapped returns `0xFF`.
- A write to an address where nothing is mapped is ignored.
- `read16` and `write16` access two bytes in little-endian order.
- Regions that overlap are still mapped, and a warning goes to the
  `logging` module.
- `find_device(address)` returns the device mapped at an address, or
  `None` if there is none.
- `unmap_all()` removes every mapping.
- `regions` lists the `MappedRegion` entries in order of base address.
- `dump_memory(start, length)` prints a hex dump to standard output, 16
  bytes per row.

### `sanoemu.ram`

`RAM(base_address, size, name="RAM")` is a block of bytes that answers
flat addresses.

- `read_byte(address)` reads a byte. Outside the block it returns `0xFF`
  and logs an error.
- `store_byte(address, value)` writes a byte. Outside the block it
  ignores the write and logs an error.
- `decode_address(address)` returns the address if it falls inside the
  block, and `None` otherwise.
- `load_from_file(filename, offset=0)` copies a file into RAM and returns
  the number of bytes copied. It raises `ValueError` if the file does not
  fit.
- `save_to_file(filename)` writes the whole block to a file.
- `clear(value=0)` fills the block with one value.

### `sanoemu.mailbox`

`Mailbox(base_address, size, name="Mailbox")` is shared memory between
two CPUs.

- `store_byte` stores the byte, sets `has_new_data` and calls
  `write_callback` if one is set.
- `read_byte` returns the byte and clears `has_new_data`.
- Accesses outside the mailbox behave as they do in `RAM`.
- `set_new_data_flag()` and `clear_new_data_flag()` set and clear the
  flag directly.
- `busy` is a plain flag that the mailbox only resets.
- `clear()` zeroes the data and resets both flags.

### `sanoemu.master_clock`

`MasterClock` counts cycles separately for the main, graphics and sound
CPUs. You add cycles with `add_main_cpu_cycles`, `add_graphics_cpu_cycles`
and `add_sound_cpu_cycles`.

The graphics CPU runs at the 13.5 MHz pixel clock and serves as the master
clock: one graphics cycle is one pixel. From it the clock works out:

- `current_scanline` and `current_pixel`, with 858 pixels per line;
- `is_vblank()`, which is true from line 240 onwards;
- `is_hblank()`, which is true from pixel 720 onwards;
- audio sample ticks at 32 kHz.

You can set three callbacks. `on_scanline` receives the line number.
`on_vblank` and `on_audio_sample` receive no arguments.

Other methods:

- `advance_scanline()` steps one line forward. After 262 lines it wraps
  to line 0 and counts a frame.
- `check_callbacks()` evaluates video and audio timing again.
- `run_frame()` sets the cycle targets for the next 1/60 s and increments
  `frame_count`.
- `should_run_main_cpu()`, `should_run_graphics_cpu()` and
  `should_run_sound_cpu()` report whether a CPU is behind its target.
- `emulation_speed()` returns emulated time divided by real time since
  the last `reset()`.

### `sanoemu.video_renderer`

`VideoRenderer(registers, vram)` draws a 320×240 frame.

- `vram` is any object with a `read_byte(address)` method, such as `RAM`.
- `registers` is any object with a `get_register(index)` method.

The low two bits of register 0 select the mode.

- **Mode 0** is an 8-bit indexed framebuffer at video RAM address 0.
- **Modes 1 to 3** draw up to five tile layers, enabled by bits 0 to 4 of
  register 1.
  - Each layer uses registers `0x10 + 8*n` onward: scroll, bit depth,
    tile size, map size and priority.
  - Sprites come from OAM and are drawn only in mode 1 when bit 5 of
    register 1 is set.
  - The layers are composited by priority.
  - Register 8 sets brightness (31 leaves colours unchanged).
  - Registers 9 to 11 hold signed tints.

The palette is 256 RGB565 entries at `0x014000`. Palette and sprite memory
are cached. After you change them, call `mark_palette_dirty()` or
`mark_sprites_dirty()` so the renderer reads them again.

Other methods and properties:

- `render_frame()` draws all 240 lines.
- `render_scanline(line)` draws one line.
- `framebuffer` returns the pixels as a row-major tuple of 32-bit values.
- `pixel(x, y)` returns one pixel.
- `palette` returns the cached palette.
- `sprites` returns the cached sprites.
- `reset()` blanks the screen and loads a grayscale palette.

The module also has these colour helpers:

- `rgb565_to_rgba8888` puts red in the lowest byte.
- `apply_brightness`.
- `apply_tint`, which computes the blue channel from the green input.
- `blend_alpha`, where alpha 0 gives the background colour and 16 gives
  the foreground colour.

## Example

```python
from sanoemu.ram import RAM
from sanoemu.video_renderer import VideoRenderer, rgb565_to_rgba8888


class Registers:
    """Video registers; all zero selects framebuffer mode."""

    def __init__(self):
        self.values = bytearray(256)

    def get_register(self, index):
        return self.values[index]


vram = RAM(0x000000, 128 * 1024, "Graphics RAM")
vram.store_byte(0x014000, 0x00)  # palette entry 0, low byte
vram.store_byte(0x014001, 0xF8)  # palette entry 0, high byte: pure red
renderer = VideoRenderer(Registers(), vram)
renderer.render_frame()
assert renderer.pixel(0, 0) == rgb565_to_rgba8888(0xF800)
```

## What this package does not do

This package contains no CPU core, so it cannot execute 65816 code. It
does not load cartridges or ROM headers. It does not produce audio
output, and it has no window or display. It provides no command to run.

`RAM` and `Mailbox` do not subclass `MemoryDevice`: they use
`read_byte`/`store_byte`. To put them on a `MemoryBus`, wrap them in a
`MemoryDevice`.

## Installation and tests

```
pip install .
pip install .[test]
pytest
```