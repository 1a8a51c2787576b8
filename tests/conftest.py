from __future__ import annotations

import pytest

PREVIOUS_OUTPUT = """\
src/index.ts(3,7): error TS2322: Type 'string' is not assignable to type 'number'.
Files:                         120
Lines of Library:            38000
Lines of TypeScript:          5000
Identifiers:                 70000
Symbols:                     60000
Types:                       20000
Instantiations:              45000
Memory used:               123456K
I/O Read time:               0.02s
Parse time:                  0.45s
Check time:                  1.00s
Total time:                  2.00s
"""

CURRENT_OUTPUT = """\
Files:                         121
Lines of Library:            38000
Lines of TypeScript:          5100
Identifiers:                 70000
Symbols:                     60500
Types:                       20000
Instantiations:              50000
Memory used:               120000K
I/O Read time:               0.02s
Parse time:                  0.46s
Check time:                  1.25s
Total time:                  2.90s
"""


@pytest.fixture
def previous_output() -> str:
    return PREVIOUS_OUTPUT


@pytest.fixture
def current_output() -> str:
    return CURRENT_OUTPUT
