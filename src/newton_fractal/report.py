"""Structured results returned from a render."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .classification import ColorAssignment
from .complex_number import ComplexNumber


@dataclass(frozen=True)
class RenderReport:
    """Container for outputs produced by ``run_render``."""

    image: Optional[np.ndarray]
    roots: Tuple[ComplexNumber, ...]
    colors: ColorAssignment
    timing: Dict[str, Any]
    chunks: Optional[List[Dict[str, Any]]]

    def copy_chunks(self) -> Optional[List[Dict[str, Any]]]:
        if self.chunks is None:
            return None
        return [record.copy() for record in self.chunks]

    def root_records(self, polynomial) -> List[Dict[str, float]]:
        """One row per root with its position, residual and color."""
        records = []
        palette = self.colors.palette
        for index, root in enumerate(self.roots):
            residual = polynomial.eval(root)
            r, g, b = (int(c) for c in palette[index])
            records.append(
                {
                    "index": index,
                    "real": root.real,
                    "imaginary": root.imaginary,
                    "residual_real": residual.real,
                    "residual_imaginary": residual.imaginary,
                    "color": f"#{r:02x}{g:02x}{b:02x}",
                }
            )
        return records
