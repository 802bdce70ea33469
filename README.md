# sodiumlib

Low-level helpers of the kind found inside a small teaching kernel, as plain
Python: fixed-width number conversions, C-string utilities, fixed-point float
formatting and two first-fit heap allocators.

## Modules

### `sodiumlib.convert`

Integer/text conversions that keep to fixed widths: `dword` (32 bits),
`word` (16 bits), `byte` (8 bits) and a 32-bit signed `int`. Values that
overflow wrap around.

- `itoa(number)`, `wtoa(number)`, `btoa(number)`: decimal text.
- `itoh(number)`, `wtoh(number)`, `btoh(number)`: upper-case hexadecimal
  text (`itoh` uses two's complement for negative numbers).
- `ctod(text)`, `ctow(text)`, `ctob(text)`: parse unsigned decimal text;
  a non-digit raises `ValueError`.
- `ctoi(text)`: parse signed decimal text. Digits are read from the right;
  on meeting a non-digit, text starting with `-` gives the digits read so far
  negated, other text raises `ValueError`.
- `htoi(text)`: parse hexadecimal digits without validation, stopping at a
  NUL character.
- `xtoi(text)`: hexadecimal if the text holds an `x` (a `0x` prefix) or an
  `h` (a suffix), decimal via `ctoi` otherwise.

### `sodiumlib.floatfmt`

- `ftoa(value, decimals)`: render a float with exactly `decimals` digits
  after the point, as `"%.Nf"` does; infinities and NaNs come out as `inf`,
  `-inf`, `nan`, `-nan`. Negative `decimals` raise `ValueError`.
- `atof(text)`: read the leading number of a string (white space, sign,
  digits, point, exponent, or `inf`/`infinity`/`nan`); `0.0` when the text
  does not start with one.

### `sodiumlib.strings`

Text passed to these functions ends at its first NUL character, as a C
string would.

- `compare_strings(first, second)`: equal and the first is not empty.
- `compare_strings_strict(first, second)`: equal; two empty strings match.
- `string_length(text)`: characters plus the terminating NUL.
- `concat(first, second)`, `lower(text)`, `upper(text)` (ASCII only),
  `is_number(text)` (every character an ASCII digit).
- `find_in_string(text, pattern, start)`: one-based position of `pattern`
  searching from zero-based `start`, or `None`; a negative start raises
  `ValueError`.
- `left(text, count)`, `right(text, count)`: the first or last `count`
  characters; `count` may be up to the length plus one, other counts raise
  `ValueError`.
- `copy_memory(destination, source, size)`, `zero_memory(buffer, size)`:
  work in place on writable bytes-like objects.
- `format_string(template, *args)`: a small `sprintf` with `%c`, `%d`,
  `%f` / `%.Nf` (six decimals by default, value passed through single
  precision), `%w`, `%b`, `%x`, `%xw`, `%xb` and `%s`. Field widths are read
  and ignored; unknown conversions are dropped.

### `sodiumlib.kheap`

`KernelHeap(size=12000)` is a first-fit allocator over a fixed range of
addresses starting at zero. Free blocks carry an 8-byte header, allocated
blocks a 4-byte header, and the free list is kept ordered by size and
merged with neighbours on `free`. Methods: `malloc(size)`, `free(address)`,
`block_size(address)`, `free_blocks()` (a list of `FreeBlock(address, size)`)
and `describe()` (a printable listing). Failures raise `HeapError`; a
non-positive size or a `None` address raises `ValueError`.

### `sodiumlib.heap`

`Heap(initial_size=3000, increment=3000, limit=None)` uses the same
strategy over backing memory that is created on the first allocation and
grows at its end whenever no free block fits, up to `limit` bytes if given.
Methods: `malloc(size)`, `calloc(size)`, `realloc(address, size)`,
`free(address)`, `read(address, size)`, `write(address, data)`,
`free_blocks()` and `describe()`. `realloc` with `None` allocates, with size
zero frees and returns `None`, with the same size returns the same address,
and otherwise moves the block and copies its contents.

## Examples

```python
from sodiumlib.convert import itoa, xtoi
from sodiumlib.floatfmt import ftoa, atof

itoa(-345)          # "-345"
xtoi("0x1F")        # 31
ftoa(3.625, 2)      # "3.62"
atof("  -5")        # -5.0
```

```python
from sodiumlib.kheap import KernelHeap

heap = KernelHeap(12000)
a = heap.malloc(500)
b = heap.malloc(1500)
heap.free(a)
print(heap.describe())
```

```python
from sodiumlib.heap import Heap

heap = Heap(3000, 3000, 1 << 20)
p = heap.calloc(16)
heap.write(p, b"hello")
p = heap.realloc(p, 64)
heap.read(p, 5)     # b"hello"
heap.free(p)
```

## What it does not do

- The heaps manage simulated addresses, not real process memory.
  `KernelHeap` tracks block sizes only and stores no contents; `Heap` keeps
  its contents in a Python `bytearray`.
- There is no command-line program; the package is a library only.

## Running the tests

```
pip install .[test]
pytest
```