from __future__ import annotations

import re

DEFAULT_OUTPUT_NAME = "merged-document.pdf"

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def normalize_output_name(name: str | None, default: str = DEFAULT_OUTPUT_NAME) -> str:
    if not name:
        return default
    clean = name.replace("\\", "/").split("/")[-1]
    clean = re.sub(r"[^A-Za-z0-9._() -]", "_", clean).strip()
    clean = clean.lstrip(".")
    if not clean:
        return default
    base, dot, extension = clean.rpartition(".")
    if dot and extension.lower() == "pdf":
        return f"{base}.pdf" if base else default
    return f"{clean}.pdf"


def format_file_size(size_bytes: int) -> str:
    if size_bytes <= 0:
        return "0 Bytes"
    value = float(size_bytes)
    unit_index = 0
    while value >= 1024 and unit_index < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    rounded = round(value, 2)
    if rounded == int(rounded):
        return f"{int(rounded)} {_SIZE_UNITS[unit_index]}"
    return f"{rounded} {_SIZE_UNITS[unit_index]}"


def has_pdf_extension(name: str) -> bool:
    return name.lower().endswith(".pdf")
