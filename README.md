# boycolor

An emulation core for the Sharp LR35902 processor used in the Game Boy,
together with helpers for reading an emulator's display and keyboard
configuration from TOML files. It has no dependencies outside the
standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Contents

- `boycolor.registers`: `Registers`, the CPU register file. It holds the
  8-bit registers `a`, `f`, `b`, `c`, `d`, `e`, `h`, `l` and the 16-bit
  `sp` and `pc`, reads the pairs with `af()`, `bc()`, `de()` and `hl()`,
  writes them with `set_af()`, `set_bc()`, `set_de()` and `set_hl()`, and
  gives flag access through `flag()` and `set_flag()` with the masks
  `Z_FLAG`, `N_FLAG`, `H_FLAG` and `C_FLAG`.
- `boycolor.bus`: `Bus`, the protocol for the memory the CPU runs against,
  and `FlatMemory`, a plain 64 KiB address space implementing it. In
  `FlatMemory` the interrupt enable register is at `0xFFFF`, the interrupt
  flag register at `0xFF0F`, words are little-endian and addresses wrap at
  `0xFFFF`.
- `boycolor.alu`: 8-bit and 16-bit add, subtract, logic, compare and
  rotate operations that update the flags in a `Registers`.
- `boycolor.cb_shift`: the CB-prefixed rotate, shift and swap
  instructions (`sla`, `sra`, `srl`, `swap`, `execute_shift`).
- `boycolor.cb_bits`: the CB-prefixed bit test, reset and set
  instructions (`bit`, `res`, `set_bit`), and `execute_cb`, which runs
  any CB-prefixed opcode.
- `boycolor.cpu`: `Cpu`, which fetches, decodes and executes
  instructions, services interrupts in priority order (V-Blank, LCD STAT,
  timer, serial, joypad) when `ime` is set, and handles HALT and STOP by
  waiting until the interrupt flag register changes. An unknown opcode
  logs a warning and halts the CPU.
- `boycolor.input`: `JoypadKey`, `KeyboardBinding` (`QWERTY`, `AZERTY`
  or `from_config_file(path)`), `build_keyboard_control_map`,
  `keyboard_map_from_config` and `get_key_bindings`. Errors are raised as
  `InputConfigError`.
- `boycolor.config`: `EmulatorAppConfig`, a dataclass of window title,
  width, height, `force_aspect`, `keyboard_binding` and `display_fps`,
  with `compute_display_scale()` and `from_file(path)`. Errors are
  raised as `ConfigError`.

## Example

```python
from boycolor.bus import FlatMemory
from boycolor.cpu import Cpu

mem = FlatMemory()
mem.write_byte(0x0000, 0x3E)   # LD A, 0x42
mem.write_byte(0x0001, 0x42)

cpu = Cpu(mem)
cycles = cpu.step()            # clock cycles spent: 8
assert cpu.regs.a == 0x42
assert cpu.cycles() == 2       # machine cycles executed so far
```

`Cpu.execute(opcode)` runs an opcode that has already been fetched and
returns its machine cycles. `Cpu.post_bios()` puts the registers and
I/O ports in the state the boot ROM leaves behind; execution then starts
at `0x0100`.

## Configuration files

`EmulatorAppConfig.from_file(path)` reads the `[display]` table of a
TOML file:

```toml
[display]
force_aspect = true
show_fps = false
width = 320
height = 288
```

A missing or invalid setting is logged as a warning and keeps its
default (320 x 288, aspect forced, no FPS display). A width below 160 or
a height below 144 is rejected. A file that cannot be read or parsed
raises `ConfigError`.

The keyboard binding is read separately, from an `[input.keyboard]`
table:

```toml
[input.keyboard]
Up = "Up"
Down = "Down"
Left = "Left"
Right = "Right"
Select = "Numpad1"
Start = "Numpad3"
A = "E"
B = "T"
```

```python
from boycolor.input import KeyboardBinding, build_keyboard_control_map

controls = build_keyboard_control_map(KeyboardBinding.from_config_file("config.toml"))
```

A missing section or joypad key falls back to the QWERTY layout with a
warning. `get_key_bindings(binding, symbol_backend_keys)` turns the
symbols into a frontend's own key codes, given a mapping from each
symbol to its key code.

## What the package does not do

This is a CPU core and configuration layer, not a complete emulator.
It has no boot ROM image, no cartridge loading or memory bank
controllers, no graphics, sound, timer or joypad hardware, no window or
input frontend, and no command to start a game. `FlatMemory` stands in
for the memory system, and its `step()` simply returns the clock cycles
it is given.