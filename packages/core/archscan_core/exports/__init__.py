"""Architecture model export helpers."""

from archscan_core.exports.mermaid_c4 import (
    C4ExportResult,
    export_mermaid_c4,
    export_mermaid_c4_result,
)

__all__ = [
    "C4ExportResult",
    "export_mermaid_c4",
    "export_mermaid_c4_result",
]
