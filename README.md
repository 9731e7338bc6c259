# pimsim

Building blocks for a simulator of DRAM with processing-in-memory (PIM)
units. It covers the PIM command format, the parameter files and typed
settings, CSV statistics output, and NumPy `.npy` array files. It has no
dependencies outside the standard library.

## Modules

### `pimsim.pim_cmd`

The PIM instruction set.

- `PIMCmdType` (`NOP`, `ADD`, `MUL`, `MAC`, `MAD`, `MOV`, `FILL`, `JUMP`,
  `EXIT` and reserved codes) and `PIMOpdType` (`A_OUT`, `M_OUT`, `EVEN_BANK`,
  `ODD_BANK`, `GRF_A`, `GRF_B`, `SRF_M`, `SRF_A`) are `IntEnum`s.
- `PIMCmd` is a dataclass with fields `type`, `dst`, `src0`, `src1`, `src2`,
  `loop_counter`, `loop_offset`, `is_auto`, `dst_idx`, `src0_idx`,
  `src1_idx` and `is_relu`.
  - `to_int()` encodes the command as a 32-bit word. It calls `validate()`
    first.
  - `validate()` raises `InvalidPIMCommand`, a `ValueError`, for a `MOV` or
    `FILL` into a bank from a `GRF_A` or `GRF_B` operand.
  - `str(cmd)` gives the assembly text, for example `MAC GRF_B[0], GRF_A[0], EVEN_BANK, auto`.
  - Two commands are equal when they encode to the same word.
- `decode(word)` builds a `PIMCmd` from a 32-bit word. Fields that the
  command type does not carry keep their defaults.
- `to_bit`, `from_bit` and `opd_to_str` are the bit-field and operand helpers
  that the module uses internally.

```python
from pimsim.pim_cmd import PIMCmd, PIMCmdType, PIMOpdType, decode

cmd = PIMCmd(PIMCmdType.MAC, PIMOpdType.GRF_B, PIMOpdType.GRF_A, PIMOpdType.EVEN_BANK, is_auto=1)
word = cmd.to_int()
assert decode(word) == cmd
print(cmd)  # MAC GRF_B[0], GRF_A[0], EVEN_BANK, auto
```

### `pimsim.parameter_reader`

Parameter files hold `KEY = VALUE` lines.

- Spaces and tabs are removed from each line.
- A line that starts with `;` is a comment.
- A `;` after the value starts a trailing comment.

`parse_parameter_lines(lines, filename)` returns `(key, value)` pairs.
`ParameterReader(filename).parameters()` does the same for a file.

Both raise `ParameterReaderError` in these cases:

- the file cannot be opened or read;
- a line holds other than one `=`;
- a key or a value is empty.

Line numbers in the error messages count from zero.

### `pimsim.system_configuration`

`ConfigStore` keeps parameters as text. A store can be created from a
mapping, and it has these methods:

- `set(key, value)` stores a value. Booleans are kept as `true` or `false`.
- `update_from_file(filename)` adds or replaces every parameter in a
  parameter file.
- `get_string(key)` returns the raw text and raises `KeyError` when the key
  is missing.
- `get_uint(key)` and `get_uint64(key)` return unsigned 32-bit and 64-bit
  integers, and 0 when the key is missing.
- `get_float(key)` returns the value rounded to single precision, and 0.0
  when the key is missing.
- `get_bool(key)` returns true only for the exact text `true`.

The functions `row_buffer_policy`, `scheduling_policy`,
`address_mapping_scheme`, `queuing_structure`, `pim_mode` and
`pim_precision` read one setting from a store and return the matching enum.
`pim_data_length` returns the bytes per element: 2, 1 or 4. Each of them
raises `ValueError` for an unknown setting.

The module also defines the enums `DramMode` and `PimBankType`.

### `pimsim.configuration`

`Configuration(store)` reads the timing and geometry parameters from a
`ConfigStore`, such as `al`, `bl`, `num_chans`, `t_ck`, `t_rcdrd` and `wl`.
It also reads the policy enums and the debug and output flags.

It derives the composite delays, for example `read_to_pre_delay`,
`write_to_pre_delay`, `read_to_write_delay` and `write_to_read_delay_r`.

It raises `ValueError` when `NUM_CHANS` is zero.

### `pimsim.csv_writer`

`CSVWriter(output)` writes to any text stream. Items are added with
`add_field` and `add_value`, or with `<<`: strings and `IndexedName`s are
field names, and everything else is a value.

- The first `finalize()` writes the collected names as the header line.
  Values given before it are ignored.
- After that, names are ignored and each `finalize()` ends one row of values.
- Every entry, header or value, is followed by a comma.

`IndexedName("bw", 0, 1)` gives the name `bw[0][1]`. It takes one to three
indices and raises `ValueError` for a base name that is too long.

```python
import io
from pimsim.csv_writer import CSVWriter

out = io.StringIO()
writer = CSVWriter(out)
writer << "Bandwidth" << 0.5
writer.finalize()          # header: "Bandwidth,"
writer << "Bandwidth" << 1.5
writer.finalize()          # row: "1.5,"
```

### `pimsim.simulator_object`

`SimulatorObject` is an abstract base for clocked components. It provides:

- a `current_clock_cycle` counter;
- `step()`, which advances the counter by one;
- an abstract `update()`.

### `pimsim.npy`

Reading and writing `.npy` files without NumPy.

`save_array(filename, fortran_order, shape, data, typecode)` writes a flat
sequence of values. `load_array(filename, typecode)` returns
`(shape, values)` and raises `ValueError` when the file's type does not
match.

Element types are given as `struct` typecodes:

| Typecodes | Element type |
| --- | --- |
| `f`, `d` | floats |
| `b`, `h`, `i`, `l`, `q` | signed integers |
| `B`, `I`, `L`, `Q` | unsigned integers |
| `F`, `D` | complex numbers |
| `H` | raw half-precision floats |

The header helpers are also public: `read_header`, `write_header`,
`parse_header` (returns an `NpyHeader`), `write_header_dict`,
`typestring_for` and `comp_size`.

## What the package does not do

The package holds components only. It does not include these parts of a
simulator:

- memory channels, ranks, banks or a memory controller;
- a way to run a trace;
- a command-line program;
- the PIM execution units.

A complete simulation has to be assembled on top of these modules.

## Running the tests

```
pip install -e .[test]
pytest
```