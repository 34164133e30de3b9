# micaprof

`micaprof` collects microarchitecture-independent characteristics of a
program from a stream of events that you feed it: memory accesses,
instruction fetches, register reads and writes, conditional branch outcomes
and executed instructions. Each analysis is a plain object with one or more
event methods, a `report()` that returns its counters as a tuple of
integers, and a `reset()` that clears the counters to start a new interval
while keeping the state that spans intervals.

It has no dependencies outside the standard library.

## Analyses

| Module | Class | What it measures |
| --- | --- | --- |
| `micaprof.memstackdist` | `ReuseDistance` | LRU stack (reuse) distance of cache blocks in power-of-two buckets, plus cold references |
| `micaprof.memfootprint` | `MemFootprint` | Distinct cache blocks and pages touched by the data and instruction streams |
| `micaprof.reg` | `RegisterProfiler` | Register operand counts, degree of use and dependency distance distributions |
| `micaprof.stride` | `StrideProfiler` | Local (per static instruction) and global strides of reads and writes |
| `micaprof.ppm` | `BranchProfiler` | Mispredictions of GAg, PAg, GAs and PAs PPM predictors, plus transition and taken rates |
| `micaprof.itypes` | `InstructionMix`, `HierarchicalMix` | Instruction mix by configurable groups, or by a fixed exclusive nine-class hierarchy |

### Reuse distance

`ReuseDistance(block_size_log, bucket_count)` splits each access into blocks
of `1 << block_size_log` bytes. `access(address, size)` counts every block
touched; `report()` returns `(references, cold_references, *buckets)`.
`reset()` clears the counters but keeps the LRU stack.

### Memory footprint

`MemFootprint(block_size_log=6, page_size_log=12, chunk_bits=12)` records
data accesses with `mem_op(address, size)` and instruction fetches with
`instr_mem(address, size)`; non-positive sizes are ignored.
`working_set_sizes()` returns a `FootprintSizes` with `data_blocks`,
`data_pages`, `instruction_blocks` and `instruction_pages`; `report()` gives
the same four numbers as a tuple. `reset()` forgets everything touched.

### Register traffic

`RegisterProfiler(max_operands, max_reg_use, max_comm_dist)` is fed either
single events, `read_register(reg, instruction_count)` and
`write_register(reg, instruction_count)`, or whole instructions with
`execute(InstructionRegisters(reads=..., writes=..., operand_count=...), instruction_count)`.
Registers may be any hashable value. `report()` returns the total number of
register operands, the number of values whose life ended, their total uses,
the number of reads, and the cumulative read counts at dependency distances
1, 2, 4, 8, 16, 32 and 64.

### Strides

`StrideProfiler(max_distance)` hands out operand indices with
`index_read(address, nth=1)` and `index_write(address)`, then records
accesses with `read(index, address, size)` and `write(index, address, size)`.
`report()` returns the read count, local and global read cumulatives, the
write count, and local and global write cumulatives, each cumulative taken at
strides 0, 8, 64, 512, 4096, 32768 and 262144 (points at or beyond
`max_distance` are left out).

### Branch predictability

`BranchProfiler(history_lengths)` keeps one set of GAg, PAg, GAs and PAs
predictors per history length. `register_branch(address)` returns a branch
id (starting at 1), and `branch(branch_id, taken)` records one outcome.
`report()` returns, for each history length, the GAg, PAg, GAs and PAs
misprediction counts, followed by the number of executed branches and the
folded transition and taken counts. The `incorrect` attribute maps each
predictor name to its per-length misprediction counts.

### Instruction mix

Instructions are described with `micaprof.itypes.Instruction`, which holds
the `category`, `opcode` and `extension` names and flags such as
`memory_read`, `memory_write`, `control_flow`, `mov` and
`register_operands_only`.

`InstructionMix(groups)` counts each instruction in every group it matches;
instructions that match no group go to an extra "other" group, whose
categories are listed by `other_categories`. `HierarchicalMix()` puts each
instruction in exactly one of `NOP`, `VEC-MEM`, `MEMORY`, `FLOAT`, `VECTOR`,
`CTRL`, `REGISTER`, `SCALAR` and `OTHER`; `other_pairs` lists the
`extension-category` pairs seen in `OTHER`. Both have `classify()`,
`count()`, `report()` and `reset()`, and an `in_region` flag: while it is
false, instructions are not counted.

Groups come from `micaprof.itypes_spec`. `default_groups()` returns the
built-in twelve groups; `parse_spec(lines)` and `load_spec(path)` read a
specification with lines of the form

```
<group id>, <subgroup id>, <CATEGORY|OPCODE|SPECIAL>, <name>
```

`SPECIAL` names are `mem_read`, `mem_write` and `reg_transfer`. A malformed
or unreadable specification raises `SpecError`. `describe_groups(groups)`
returns a readable listing.

## Example

```python
from micaprof.memstackdist import ReuseDistance
from micaprof.itypes import Instruction, InstructionMix
from micaprof.itypes_spec import default_groups

reuse = ReuseDistance(block_size_log=6, bucket_count=19)
for address in (0x1000, 0x1040, 0x1000):
    reuse.access(address, 8)
references, cold, *buckets = reuse.report()

mix = InstructionMix(default_groups())
mix.count(Instruction(category="BINARY", opcode="ADD"))
print(mix.report())
```

## What it does not do

`micaprof` does not observe a running program by itself: there is no
instrumentation, tracing or disassembly, and no command-line tool. You
produce the events and call the analyses. It also writes no result files;
each `report()` returns numbers and leaves storing them to you.

## Installation

```
pip install micaprof
```

Run the tests with `pytest` after installing the `test` extra.