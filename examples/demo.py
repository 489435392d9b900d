"""paste2typ Core -- Quick demo.

Run: python examples/demo.py
"""

import tempfile
from pathlib import Path

REGRESSION_CSV = """Variable,(1),(2)
GDP growth,0.52***,0.48**
,(3.21),(2.10)
Inflation,-0.06***,-0.04
Constant,1.20,1.15
Observations,500,500
Adj. R2,0.31,0.29
"""

ROBUSTNESS_CSV = """Variable,(1),(2)
GDP growth,0.47**,0.45*
Constant,1.10,1.08
Observations,480,480
"""


def main():
    from paste2typ_core import (
        TableConfig,
        convert_clipboard_text,
        convert_files,
        detect_format,
    )

    # 1. Convert pasted text
    print("=" * 60)
    print("1. CONVERT PASTED CSV")
    print("=" * 60)
    print(f"  Detected format: {detect_format(REGRESSION_CSV).value}")
    for block in convert_clipboard_text(REGRESSION_CSV):
        print(block)
    print()

    # 2. Three-line table with math-mode variable names
    print("=" * 60)
    print("2. THREE-LINE TABLE, MATH MODE")
    print("=" * 60)
    config = TableConfig(three_line_table=True, auto_math_mode=True)
    for block in convert_clipboard_text(REGRESSION_CSV, config):
        print(block)
    print()

    # 3. Several files as panels
    print("=" * 60)
    print("3. FILES AS PANELS")
    print("=" * 60)
    with tempfile.TemporaryDirectory() as tmp:
        baseline = Path(tmp) / "baseline.csv"
        robustness = Path(tmp) / "robustness.csv"
        baseline.write_text(REGRESSION_CSV, encoding="utf-8")
        robustness.write_text(ROBUSTNESS_CSV, encoding="utf-8")

        batch = convert_files([str(baseline), str(robustness)], {"three_line_table": True})
        for result in batch.results:
            print(f"  {result.label}: {result.status.value} ({result.rows} x {result.columns})")
        print()
        print(batch.combined)
    print()

    print("Done! Try the CLI: paste2typ convert --three-line --file table.csv")


if __name__ == "__main__":
    main()
