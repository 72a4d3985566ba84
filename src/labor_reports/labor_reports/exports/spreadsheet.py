from __future__ import annotations

import io
from typing import Iterable, Mapping

import pandas as pd

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def to_xlsx_bytes(rows: Iterable[Mapping[str, object]], sheet_name: str) -> bytes:
    """One-sheet workbook built in memory (nothing is written to disk)."""

    df = pd.DataFrame(list(rows))
    # Excel caps sheet names at 31 chars
    sheet_name = (sheet_name or "Sheet1")[:31]

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        sheet = writer.sheets[sheet_name]
        for idx, column in enumerate(df.columns, start=1):
            values = [str(column)] + [str(v) for v in df[column].tolist()]
            width = max(len(v) for v in values) + 2
            sheet.column_dimensions[sheet.cell(row=1, column=idx).column_letter].width = width

    output.seek(0)
    return output.getvalue()
